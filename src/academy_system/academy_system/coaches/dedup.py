"""Entity resolution for coach rows.

The coaches table has no uniqueness constraint across identities, so the same
person can show up several times (joins, historical imports, accounts created
twice). `resolve_entities` keeps the first record of each real person, where
"same person" is decided by a priority-ordered list of identity keys.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Hashable, Iterable, Optional, Sequence, TypeVar

from ..core.enums import LiveStatus
from .model import CoachLiveView

T = TypeVar("T")


@dataclass(frozen=True)
class IdentityKey(Generic[T]):
    """One identity signal.

    `extract` returns the normalized key or None when the signal is blank.
    `matches_when` restricts when a seen key counts as a match for a candidate;
    retained records always register their key.
    """

    name: str
    extract: Callable[[T], Optional[Hashable]]
    matches_when: Optional[Callable[[T], bool]] = None


def resolve_entities(items: Iterable[T], keys: Sequence[IdentityKey[T]]) -> list[T]:
    seen: dict[str, set] = {k.name: set() for k in keys}
    kept: list[T] = []

    for item in items:
        values = [(k, k.extract(item)) for k in keys]

        duplicate = False
        for key, value in values:
            if value is None or value not in seen[key.name]:
                continue
            if key.matches_when is None or key.matches_when(item):
                duplicate = True
                break

        if duplicate:
            continue

        kept.append(item)
        for key, value in values:
            if value is not None:
                seen[key.name].add(value)

    return kept


def _norm(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    v = value.strip().lower()
    return v or None


def _raw(value: Optional[str]) -> Optional[str]:
    return value if value else None


COACH_IDENTITY_KEYS: tuple[IdentityKey[CoachLiveView], ...] = (
    IdentityKey("id", lambda c: _raw(c.coach_id)),
    IdentityKey("email", lambda c: _norm(c.email)),
    IdentityKey("profile_id", lambda c: _raw(c.profile_id)),
    # Name only catches orphans: a record with both a profile and an email is
    # never merged on a shared display name.
    IdentityKey(
        "full_name",
        lambda c: _norm(c.full_name),
        matches_when=lambda c: not c.profile_id or not _norm(c.email),
    ),
)


def _priority(view: CoachLiveView) -> tuple[int, int]:
    return (
        0 if view.profile_id else 1,
        0 if view.status == LiveStatus.WORKING else 1,
    )


def dedupe_coaches(views: Iterable[CoachLiveView]) -> list[CoachLiveView]:
    """One entry per real person, keeping the most authoritative record.

    Records with a profile come first, then those currently working; the sort
    is stable so the incoming order breaks remaining ties.
    """
    ordered = sorted(views, key=_priority)
    return resolve_entities(ordered, COACH_IDENTITY_KEYS)
