"""Domain errors. Every one of them is recoverable at the command boundary."""

from __future__ import annotations

from benkyo_store.models import Scope


class BenkyoError(Exception):
    """Base class for errors the CLI turns into a message instead of a crash."""


class EmptyPool(BenkyoError):
    """A review was started with nothing to review."""

    def __init__(self, scope: Scope):
        self.scope = scope
        if scope.mistakes_only:
            message = "The mistake book is empty."
        elif scope.domain == "kana":
            message = "There are no kana to practise in this mode."
        else:
            message = "The word list is empty."
        super().__init__(message)


class EmptyBatch(BenkyoError):
    """An import file was well-formed but held no usable rows."""

    def __init__(self, source: str):
        self.source = source
        super().__init__(f"{source}: no usable rows to import.")


class MalformedImport(BenkyoError):
    """An import file could not be parsed or has the wrong structure."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"{source}: {reason}")


class OutOfRange(BenkyoError):
    """A session cursor points past the end of its items."""

    def __init__(self, index: int, length: int):
        self.index = index
        self.length = length
        super().__init__(f"index {index} is out of range for {length} item(s)")


class SessionFinished(BenkyoError):
    """The review session has no current item."""


class ReconcileFinished(BenkyoError):
    """Every duplicate has already been resolved."""
