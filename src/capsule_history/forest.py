"""Forest builder — parent → children adjacency and root discovery.

The parent relation of a normalized batch forms a forest. A version is a
root when it has no parent, or when its parent is not part of the batch
(a dangling reference starts a new branch instead of failing the view).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import networkx as nx

from capsule_history.errors import CyclicHistoryError
from capsule_history.records import VersionRecord

logger = logging.getLogger(__name__)


@dataclass
class Forest:
    """Adjacency and roots for one normalized batch.

    Attributes:
        versions: The batch, oldest first.
        children: Maps parent id → child ids in chronological order. Keys may
            include dangling parent ids that are not in the batch.
        roots: Root records in chronological order.
        graph: parent → child DiGraph over ids present in the batch; each
            node carries its record under the ``data`` attribute.
    """

    versions: list[VersionRecord]
    children: dict[str, list[str]] = field(default_factory=dict)
    roots: list[VersionRecord] = field(default_factory=list)
    graph: nx.DiGraph = field(default_factory=nx.DiGraph)

    def children_of(self, version_id: str) -> list[str]:
        return self.children.get(version_id, [])


def build_history_graph(versions: list[VersionRecord]) -> nx.DiGraph:
    """Build the parent → child DiGraph, skipping dangling parent references."""
    graph: nx.DiGraph = nx.DiGraph()
    for version in versions:
        graph.add_node(version.id, data=version)
    for version in versions:
        if version.parent_id is not None and version.parent_id in graph:
            graph.add_edge(version.parent_id, version.id)
    return graph


def check_acyclic(graph: nx.DiGraph) -> None:
    """Raise CyclicHistoryError if the history graph has a cycle.

    A version that names itself as its parent is a cycle of length one.
    """
    try:
        cycle = nx.find_cycle(graph)
    except nx.NetworkXNoCycle:
        return
    raise CyclicHistoryError([src for src, _tgt in cycle])


def build_forest(versions: list[VersionRecord]) -> Forest:
    """Derive adjacency and roots from a normalized batch.

    One pass in the given (chronological) order appends every version to its
    parent's child list, so siblings are ordered oldest first.

    Raises:
        CyclicHistoryError: if parent links among the batch form a cycle.
    """
    graph = build_history_graph(versions)
    check_acyclic(graph)

    children: dict[str, list[str]] = {}
    roots: list[VersionRecord] = []

    for version in versions:
        if version.parent_id is not None:
            children.setdefault(version.parent_id, []).append(version.id)
        if version.parent_id is None:
            roots.append(version)
        elif version.parent_id not in graph:
            logger.debug(
                "version %s references missing parent %s; treating it as a root",
                version.id,
                version.parent_id,
            )
            roots.append(version)

    return Forest(versions=versions, children=children, roots=roots, graph=graph)
