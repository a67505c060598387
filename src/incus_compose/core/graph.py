"""Dependency graph over container names."""

import heapq
import logging
from typing import Dict, Iterable, List, Mapping, Set, Tuple


logger = logging.getLogger(__name__)

UNVISITED, IN_PROGRESS, DONE = 0, 1, 2


class DependencyGraph:
    """Directed graph where an edge ``a -> b`` means *a depends on b*.

    Only edges between known nodes are kept; self-edges and dangling
    references are reported elsewhere and left out of the graph.
    """

    def __init__(self, dependencies: Mapping[str, Iterable[str]], priorities: Mapping[str, int]):
        """Build the graph from ``name -> depends_on`` and ``name -> boot_priority``."""
        self.nodes: List[str] = sorted(dependencies)
        self.priorities: Dict[str, int] = {name: priorities.get(name, 0) for name in self.nodes}
        self.edges: Dict[str, List[str]] = {}
        known = set(self.nodes)
        for name in self.nodes:
            targets = {dep for dep in dependencies[name] if dep in known and dep != name}
            self.edges[name] = sorted(targets)

    def find_cycles(self) -> List[Tuple[str, ...]]:
        """Return every distinct cycle reached by a back-edge during DFS.

        Each cycle is listed in dependency order starting from the node where
        the traversal entered it, and each loop is reported once.
        """
        color = {name: UNVISITED for name in self.nodes}
        cycles: List[Tuple[str, ...]] = []
        seen: Set[Tuple[str, ...]] = set()

        for root in self.nodes:
            if color[root] != UNVISITED:
                continue
            path = [root]
            stack = [iter(self.edges[root])]
            color[root] = IN_PROGRESS
            while stack:
                node = path[-1]
                for dep in stack[-1]:
                    if color[dep] == UNVISITED:
                        color[dep] = IN_PROGRESS
                        path.append(dep)
                        stack.append(iter(self.edges[dep]))
                        break
                    if color[dep] == IN_PROGRESS:
                        cycle = tuple(path[path.index(dep):])
                        key = _canonical(cycle)
                        if key not in seen:
                            seen.add(key)
                            cycles.append(cycle)
                else:
                    color[node] = DONE
                    path.pop()
                    stack.pop()

        return cycles

    def start_order(self) -> List[str]:
        """Topological order, dependencies first.

        Among nodes whose dependencies are all started, the highest
        ``boot_priority`` goes first, then the smallest name. Must only be
        called on an acyclic graph.
        """
        remaining = {name: len(deps) for name, deps in self.edges.items()}
        dependents: Dict[str, List[str]] = {name: [] for name in self.nodes}
        for name, deps in self.edges.items():
            for dep in deps:
                dependents[dep].append(name)

        ready = [(-self.priorities[name], name) for name, count in remaining.items() if count == 0]
        heapq.heapify(ready)
        order: List[str] = []
        while ready:
            _, name = heapq.heappop(ready)
            order.append(name)
            for dependent in dependents[name]:
                remaining[dependent] -= 1
                if remaining[dependent] == 0:
                    heapq.heappush(ready, (-self.priorities[dependent], dependent))

        if len(order) != len(self.nodes):
            raise ValueError("Dependency graph contains a cycle")
        return order

    def start_batches(self, order: Iterable[str]) -> List[List[str]]:
        """Group an order into waves whose members do not depend on each other.

        A node's wave is one past the deepest wave among its dependencies;
        within a wave the given order is kept.
        """
        level: Dict[str, int] = {}
        batches: List[List[str]] = []
        for name in order:
            depth = max((level[dep] + 1 for dep in self.edges[name]), default=0)
            level[name] = depth
            if depth == len(batches):
                batches.append([])
            batches[depth].append(name)
        return batches


def _canonical(cycle: Tuple[str, ...]) -> Tuple[str, ...]:
    """Rotate a cycle so its smallest name comes first."""
    start = cycle.index(min(cycle))
    return cycle[start:] + cycle[:start]
