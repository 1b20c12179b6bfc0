"""Slot names: the keys each collection is persisted under.

Every collection lives in its own slot so a write to one never touches
another. Progress slots are only built from a Scope member, which keeps
similarly named review domains from colliding.
"""

from __future__ import annotations

from benkyo_store.models import Scope

_PROGRESS_PREFIX = "progress:"

_RECORD_SLOTS = {
    "word": "records:words",
    "note": "records:notes",
}

_DOMAINS = ("words", "kana")


def records_slot(kind: str) -> str:
    try:
        return _RECORD_SLOTS[kind]
    except KeyError:
        raise ValueError(f"Records of kind {kind!r} are not stored.") from None


def mistakes_slot(domain: str) -> str:
    _check_domain(domain)
    return f"mistakes:{domain}"


def daily_slot(domain: str) -> str:
    _check_domain(domain)
    return f"daily:{domain}"


def progress_slot(scope: Scope) -> str:
    if not isinstance(scope, Scope):
        raise TypeError(f"progress_slot() needs a Scope, got {type(scope).__name__}")
    return f"{_PROGRESS_PREFIX}{scope.value}"


def _check_domain(domain: str) -> None:
    if domain not in _DOMAINS:
        raise ValueError(f"Unknown domain {domain!r}. Choose one of {', '.join(_DOMAINS)}.")
