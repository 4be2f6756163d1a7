"""Name matcher used to resolve query boxes to node ids."""

from __future__ import annotations

from typing import Iterable

from collabnet.graph.models import NodeRecord

DEFAULT_LIMIT = 12


def normalize(text: str) -> str:
    return (text or "").strip().casefold()


def top_matches(
    nodes: Iterable[NodeRecord],
    query: str,
    limit: int = DEFAULT_LIMIT,
) -> list[NodeRecord]:
    """Rank nodes whose name matches ``query``.

    Prefix matches come first, then substring matches; each tier keeps the
    input order. An empty query matches nothing.
    """
    needle = normalize(query)
    if not needle or limit <= 0:
        return []

    starts: list[NodeRecord] = []
    contains: list[NodeRecord] = []
    for node in nodes:
        name = normalize(node.name)
        if name.startswith(needle):
            starts.append(node)
        elif needle in name:
            contains.append(node)
    return (starts + contains)[:limit]
