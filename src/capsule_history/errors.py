"""Errors raised while normalizing and laying out a version history."""

from __future__ import annotations


class HistoryError(Exception):
    """Base class for structural problems in a version batch."""


class InvalidVersionError(HistoryError):
    """A raw version record is missing a required field."""


class DuplicateVersionError(HistoryError):
    """The same version id appears more than once in one batch."""

    def __init__(self, version_id: str) -> None:
        super().__init__(f"duplicate version id in batch: {version_id!r}")
        self.version_id = version_id


class CyclicHistoryError(HistoryError):
    """The parent relation, restricted to the batch, contains a cycle."""

    def __init__(self, version_ids: list[str]) -> None:
        joined = " -> ".join(version_ids)
        super().__init__(f"parent cycle among versions: {joined}")
        self.version_ids = version_ids
