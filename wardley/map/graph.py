"""Dependency graph construction and analysis."""

from dataclasses import dataclass, field

from ..models import DeclaredComponent, DeclaredGraph, DependencyEdge


@dataclass
class MapGraph:
    """Name-indexed dependency graph with reversed adjacency and cycle detection.

    Edge lists keep declaration order and parallel edges, so every traversal
    is deterministic and in-degrees count each declared edge.
    """

    nodes: dict[str, DeclaredComponent] = field(default_factory=dict)  # name -> component
    edges: dict[str, list[str]] = field(default_factory=dict)  # component -> dependencies
    reverse_edges: dict[str, list[str]] = field(default_factory=dict)  # component -> dependents

    @classmethod
    def from_components(
        cls, components: list[DeclaredComponent], dependencies: list[DependencyEdge]
    ) -> "MapGraph":
        """Build graph from components and dependency edges.

        Raises ValueError if an edge references an undeclared component.
        """
        graph = cls()

        # Add all nodes first
        for component in components:
            graph.nodes[component.name] = component
            graph.edges[component.name] = []
            graph.reverse_edges[component.name] = []

        for dep in dependencies:
            for endpoint in (dep.source, dep.target):
                if endpoint not in graph.nodes:
                    raise ValueError(f"Dependency references undeclared component '{endpoint}'")
            graph.edges[dep.source].append(dep.target)
            graph.reverse_edges[dep.target].append(dep.source)

        return graph

    @classmethod
    def from_declared(cls, declared: DeclaredGraph) -> "MapGraph":
        return cls.from_components(list(declared.components), list(declared.dependencies))

    def get_dependencies(self, name: str) -> list[str]:
        """Get direct dependencies of a component."""
        return self.edges.get(name, [])

    def get_dependents(self, name: str) -> list[str]:
        """Get components that depend on this one."""
        return self.reverse_edges.get(name, [])

    def out_degree(self, name: str) -> int:
        return len(self.edges.get(name, []))

    def find_cycles(self) -> list[list[str]]:
        """Find all cycles using Tarjan's strongly connected components.

        Returns list of cycles (each cycle is a list of node names in
        declaration order). Includes SCCs with more than one node and
        single nodes with a self-loop. The search keeps its own stack, so
        long dependency chains are fine.
        """
        counter = 0
        stack: list[str] = []
        lowlinks: dict[str, int] = {}
        index: dict[str, int] = {}
        on_stack: set[str] = set()
        sccs = []

        for root in self.nodes:
            if root in index:
                continue

            index[root] = lowlinks[root] = counter
            counter += 1
            stack.append(root)
            on_stack.add(root)
            # (node, remaining dependencies to visit)
            work = [(root, iter(self.edges.get(root, [])))]

            while work:
                node, deps = work[-1]
                descended = False
                for dep in deps:
                    if dep not in index:
                        index[dep] = lowlinks[dep] = counter
                        counter += 1
                        stack.append(dep)
                        on_stack.add(dep)
                        work.append((dep, iter(self.edges.get(dep, []))))
                        descended = True
                        break
                    if dep in on_stack:
                        lowlinks[node] = min(lowlinks[node], index[dep])
                if descended:
                    continue

                work.pop()
                if work:
                    parent = work[-1][0]
                    lowlinks[parent] = min(lowlinks[parent], lowlinks[node])

                if lowlinks[node] == index[node]:
                    scc = []
                    while True:
                        w = stack.pop()
                        on_stack.discard(w)
                        scc.append(w)
                        if w == node:
                            break
                    if len(scc) > 1 or node in self.edges.get(node, []):
                        sccs.append(scc)

        order = {name: i for i, name in enumerate(self.nodes)}
        cycles = [sorted(scc, key=order.__getitem__) for scc in sccs]
        cycles.sort(key=lambda cycle: order[cycle[0]])
        return cycles
