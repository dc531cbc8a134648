"""Component labelling of activated vertices by depth-first search."""

from __future__ import annotations

from typing import Sequence


def component_map(
    adjacency: Sequence[Sequence[int]], activated: Sequence[bool]
) -> tuple[list[int], int]:
    """Label activated vertices with component ids.

    ``adjacency[u]`` lists the neighbours of vertex ``u`` in edge order; an
    undirected edge appears in both lists. Vertices are searched depth
    first, starting roots in index order. A vertex reached along a tree edge
    takes its parent's label if it is activated; an activated vertex still
    unlabelled when discovered gets a fresh id. Inactive vertices keep the
    label ``len(adjacency)``, which is outside the range of valid ids.

    Returns the labels and the number of ids handed out.
    """
    count = len(adjacency)
    if len(activated) != count:
        raise ValueError("activated must have one entry per vertex")
    for neighbours in adjacency:
        for v in neighbours:
            if not 0 <= v < count:
                raise IndexError(f"neighbour {v} is not a vertex")

    labels = [count] * count
    visited = [False] * count
    next_id = 0

    def discover(u: int) -> None:
        nonlocal next_id
        visited[u] = True
        if activated[u] and labels[u] == count:
            labels[u] = next_id
            next_id += 1

    for root in range(count):
        if visited[root]:
            continue
        discover(root)
        stack = [(root, iter(adjacency[root]))]
        while stack:
            u, edges = stack[-1]
            for v in edges:
                if not visited[v]:
                    if activated[v]:
                        labels[v] = labels[u]
                    discover(v)
                    stack.append((v, iter(adjacency[v])))
                    break
            else:
                stack.pop()

    return labels, next_id