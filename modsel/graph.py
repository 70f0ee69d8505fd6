"""Directed graph helpers shared by the catalog and the dev import guardrail.

Graphs are plain adjacency mappings ``{node: iterable of successors}``.
Successors missing from the mapping are treated as leaves.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Set


def find_cycles(graph: Mapping[str, Iterable[str]]) -> List[List[str]]:
    """Return each elementary cycle reachable in a DFS, as a node path.

    Iterative DFS (explicit stack) so deep chains do not hit the recursion
    limit. Every back edge yields one cycle ``[n0, n1, ..., n0]``; nodes are
    visited in sorted order so the result is deterministic.
    """
    adj: Dict[str, List[str]] = {
        n: sorted(set(succ)) for n, succ in graph.items()
    }
    done: Set[str] = set()
    cycles: List[List[str]] = []
    for start in sorted(adj):
        if start in done:
            continue
        path: List[str] = [start]
        on_path: Set[str] = {start}
        stack = [iter(adj.get(start, ()))]
        while stack:
            nxt = next(stack[-1], None)
            if nxt is None:
                stack.pop()
                finished = path.pop()
                on_path.discard(finished)
                done.add(finished)
                continue
            if nxt in on_path:
                idx = path.index(nxt)
                cycles.append(path[idx:] + [nxt])
                continue
            if nxt in done:
                continue
            path.append(nxt)
            on_path.add(nxt)
            stack.append(iter(adj.get(nxt, ())))
    return cycles


__all__ = ["find_cycles"]
