from __future__ import annotations

from typing import Dict, List, Sequence, Set


def strongly_connected_components(graph: Dict[str, Sequence[str]]) -> List[Set[str]]:
    """Tarjan's algorithm with an explicit work stack.

    Neighbours missing from ``graph`` are ignored. Components are returned in
    the order Tarjan completes them.
    """
    index = 0
    indices: Dict[str, int] = {}
    lowlinks: Dict[str, int] = {}
    stack: List[str] = []
    on_stack: Set[str] = set()
    components: List[Set[str]] = []

    for root in graph:
        if root in indices:
            continue
        work: List[tuple[str, int]] = [(root, 0)]
        while work:
            node, edge_idx = work.pop()
            if edge_idx == 0:
                indices[node] = index
                lowlinks[node] = index
                index += 1
                stack.append(node)
                on_stack.add(node)
            neighbors = [item for item in graph.get(node, ()) if item in graph]
            descended = False
            while edge_idx < len(neighbors):
                neighbor = neighbors[edge_idx]
                edge_idx += 1
                if neighbor not in indices:
                    work.append((node, edge_idx))
                    work.append((neighbor, 0))
                    descended = True
                    break
                if neighbor in on_stack:
                    lowlinks[node] = min(lowlinks[node], indices[neighbor])
            if descended:
                continue
            if lowlinks[node] == indices[node]:
                component: Set[str] = set()
                while True:
                    popped = stack.pop()
                    on_stack.discard(popped)
                    component.add(popped)
                    if popped == node:
                        break
                components.append(component)
            if work:
                parent = work[-1][0]
                lowlinks[parent] = min(lowlinks[parent], lowlinks[node])
    return components
