# catalog_sheets/schema/categories.py
# --------------------------------------------------------------------------------------
# Category paths ("Indoor Lights/Ceiling Lights/Downlights") <-> category forest.
# The forest is rebuilt from the flat path list on every read; a node is identified
# only by its name and position, so no ids survive between reads.
# --------------------------------------------------------------------------------------
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Sequence

CategoryNode = Dict[str, Any]  # {"name": str, "children"?: [CategoryNode, ...]}

PATH_SEPARATOR = "/"


def split_path(path: str) -> List[str]:
    return [part.strip() for part in (path or "").split(PATH_SEPARATOR) if part.strip()]


def category_paths(rows: Sequence[Sequence[str]]) -> List[str]:
    """Column A of the categories tab, header skipped, trimmed, blanks dropped."""
    paths: List[str] = []
    for row in rows[1:]:
        if not row:
            continue
        value = str(row[0] or "").strip()
        if value:
            paths.append(value)
    return paths


def build_category_tree(paths: Iterable[str]) -> List[CategoryNode]:
    """
    Insert every path into a shared forest. Only non-terminal segments get a
    "children" list, so leaves carry no children key at all.
    """
    root: List[CategoryNode] = []
    for path in paths:
        parts = split_path(path)
        current = root
        for i, name in enumerate(parts):
            last = i == len(parts) - 1
            node = next((n for n in current if n["name"] == name), None)
            if node is None:
                node = {"name": name}
                if not last:
                    node["children"] = []
                current.append(node)
            if not last:
                # a former leaf becomes a branch once something is filed under it
                current = node.setdefault("children", [])
    return root


def is_leaf(node: CategoryNode) -> bool:
    return not node.get("children")


def tree_to_paths(tree: Iterable[CategoryNode], prefix: Sequence[str] = ()) -> List[str]:
    """Leaf paths of the forest, depth-first in insertion order."""
    paths: List[str] = []
    for node in tree:
        current = [*prefix, node["name"]]
        if is_leaf(node):
            paths.append(PATH_SEPARATOR.join(current))
        else:
            paths.extend(tree_to_paths(node["children"], current))
    return paths
