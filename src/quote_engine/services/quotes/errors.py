"""Quote submission errors surfaced to the user interface."""

from __future__ import annotations


class QuoteValidationError(ValueError):
    """The submission is incomplete or violates a booking rule."""

    def __init__(self, messages: list[str]) -> None:
        self.messages = list(messages)
        super().__init__("; ".join(self.messages))


class QuotePersistenceError(RuntimeError):
    """The quote record could not be stored; nothing was created."""
