"""Version records and the chronological normalizer.

A capsule's history arrives as an unordered batch of versions. Each version
names the version it was derived from (``parent_id``) and when it was
created. Before any layout happens the batch is:

  1. checked for duplicate ids,
  2. stably sorted by ``created_at`` (ties keep input order),
  3. given a 1-based ``ordinal`` wherever the provider did not supply one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from capsule_history.errors import DuplicateVersionError, InvalidVersionError

logger = logging.getLogger(__name__)

# Wire keys accepted for each field, in lookup order.
_ID_KEYS = ("version_id", "id")
_PARENT_KEYS = ("parent_version_id", "parent_id", "parentId")
_CREATED_KEYS = ("created_at", "createdAt")
_ORDINAL_KEYS = ("version_number", "ordinal")


@dataclass(frozen=True)
class VersionRecord:
    """One immutable snapshot in a capsule's history.

    ``metadata`` carries whatever else the provider sent (author, change
    summary, content hash, ...). The layout never looks at it; renderers may.
    """

    id: str
    parent_id: str | None
    created_at: Any
    ordinal: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> VersionRecord:
        """Build a record from a provider dict.

        Accepts the dashboard wire shape (``version_id``,
        ``parent_version_id``, ``created_at``, ``version_number``) as well as
        the camelCase shape (``id``, ``parentId``, ``createdAt``,
        ``ordinal``). Unrecognised keys are kept as metadata.
        """
        version_id, id_key = _first(payload, _ID_KEYS)
        if version_id is None or version_id == "":
            raise InvalidVersionError(f"version record has no id: {dict(payload)!r}")
        created_at, created_key = _first(payload, _CREATED_KEYS)
        if created_at is None:
            raise InvalidVersionError(f"version {version_id!r} has no created_at")
        parent_id, parent_key = _first(payload, _PARENT_KEYS)
        ordinal, ordinal_key = _first(payload, _ORDINAL_KEYS)

        if ordinal is not None:
            try:
                ordinal = int(ordinal)
            except (TypeError, ValueError):
                raise InvalidVersionError(f"version {version_id!r} has non-integer ordinal {ordinal!r}") from None

        consumed = {id_key, created_key, parent_key, ordinal_key}
        metadata = {k: v for k, v in payload.items() if k not in consumed}

        return cls(
            id=str(version_id),
            parent_id=None if parent_id is None or parent_id == "" else str(parent_id),
            created_at=created_at,
            ordinal=ordinal,
            metadata=metadata,
        )


def _first(payload: Mapping[str, Any], keys: tuple[str, ...]) -> tuple[Any, str | None]:
    for key in keys:
        if key in payload:
            return payload[key], key
    return None, None


def parse_version_list(payload: Any) -> list[VersionRecord]:
    """Parse a list of version dicts, or a ``{"versions": [...]}`` envelope."""
    if isinstance(payload, Mapping):
        if "versions" not in payload:
            raise InvalidVersionError("version list envelope has no 'versions' key")
        payload = payload["versions"]
    return [item if isinstance(item, VersionRecord) else VersionRecord.from_dict(item) for item in payload]


# ─── Chronological Sort ───────────────────────────────────────────────────────


def as_datetime(value: Any) -> datetime | None:
    """Interpret a timestamp as an aware datetime, or None if it is opaque.

    Naive datetimes and naive ISO strings are taken to be UTC. Numbers are
    epoch seconds; one outside datetime's range (epoch milliseconds, say)
    is opaque here.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=timezone.utc)
    return None


def timestamp_key(value: Any) -> tuple[int, Any]:
    """Sort key for one timestamp.

    Numbers are used as given, so epoch seconds and epoch milliseconds both
    order correctly within a batch. Datetimes and ISO strings compare by
    their epoch seconds. Anything else is opaque: it sorts after every
    timestamp, by its string form.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, value)
    moment = as_datetime(value)
    if moment is not None:
        return (0, moment.timestamp())
    return (1, str(value))


def chronological_keys(records: list[VersionRecord]) -> list[tuple[int, Any]]:
    """Sort keys for ``records``, one per record."""
    return [timestamp_key(r.created_at) for r in records]


def normalize_versions(records: Iterable[VersionRecord]) -> list[VersionRecord]:
    """Sort ``records`` oldest-first and fill in missing ordinals.

    Returns new records; the inputs are not modified. An empty batch yields
    an empty list, which callers treat as "no history available".

    Raises:
        DuplicateVersionError: if two records share an id.
    """
    batch = list(records)

    seen: set[str] = set()
    for record in batch:
        if record.id in seen:
            raise DuplicateVersionError(record.id)
        seen.add(record.id)

    keys = chronological_keys(batch)
    # sorted() is stable: equal timestamps keep their input order.
    order = sorted(range(len(batch)), key=keys.__getitem__)

    normalized: list[VersionRecord] = []
    for index, pos in enumerate(order):
        record = batch[pos]
        if record.ordinal is None:
            record = replace(record, ordinal=index + 1)
        normalized.append(record)

    logger.debug("normalized %d versions", len(normalized))
    return normalized
