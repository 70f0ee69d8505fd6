"""AST based import graph for the ``modsel`` package (dev guardrail).

Collects edges between project-internal modules, resolving relative imports
and ``from modsel import x`` forms. Used in tests to enforce:
  - No import cycles inside the package.
  - No forbidden edges (layering constraints).
"""
from __future__ import annotations

import ast
from pathlib import Path
from typing import Dict, List, Set, Tuple

from modsel.graph import find_cycles


def _module_name(root_path: Path, package: str, py: Path) -> str:
    rel = py.relative_to(root_path).with_suffix("").as_posix()
    name = f"{package}.{rel}".replace("/", ".")
    if name.endswith(".__init__"):
        name = name[: -len(".__init__")]
    return name


def _resolve_from(
    current: str, is_pkg: bool, node: ast.ImportFrom
) -> str | None:
    if not node.level:
        return node.module
    parts = current.split(".")
    if not is_pkg:
        parts = parts[:-1]
    if node.level > 1:
        parts = parts[: len(parts) - (node.level - 1)]
    if not parts:
        return None
    base = ".".join(parts)
    return f"{base}.{node.module}" if node.module else base


def build_import_graph(
    root: str | Path = "modsel", package: str = "modsel"
) -> Dict[str, Set[str]]:
    root_path = Path(root)
    known: Set[str] = set()
    files = [p for p in root_path.rglob("*.py") if "__pycache__" not in p.parts]
    for py in files:
        known.add(_module_name(root_path, package, py))
    edges: Dict[str, Set[str]] = {}
    for py in files:
        src = _module_name(root_path, package, py)
        try:
            tree = ast.parse(py.read_text(encoding="utf-8"))
        except SyntaxError:
            continue
        targets = edges.setdefault(src, set())
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                for n in node.names:
                    if n.name == package or n.name.startswith(package + "."):
                        targets.add(n.name)
            elif isinstance(node, ast.ImportFrom):
                mod = _resolve_from(src, py.name == "__init__.py", node)
                if not mod or not (
                    mod == package or mod.startswith(package + ".")
                ):
                    continue
                for alias in node.names:
                    sub = f"{mod}.{alias.name}"
                    # `from pkg import submodule` points at the submodule
                    targets.add(sub if sub in known else mod)
        targets.discard(src)
    for n in list(edges):
        for dst in edges[n]:
            edges.setdefault(dst, set())
    return edges


def detect_cycles(graph: Dict[str, Set[str]]) -> List[List[str]]:
    return find_cycles(graph)


def forbidden_edges(
    graph: Dict[str, Set[str]], rules: List[Tuple[str, str]]
) -> List[Tuple[str, str]]:
    found: List[Tuple[str, str]] = []
    for src, targets in graph.items():
        for dst in targets:
            for a, b in rules:
                if src.startswith(a) and dst.startswith(b):
                    found.append((src, dst))
    return found


__all__ = [
    "build_import_graph",
    "detect_cycles",
    "forbidden_edges",
]
