from __future__ import annotations


class InvalidOperation(ValueError):
    """A rule precondition failed; the state was left untouched."""


class PersistenceError(RuntimeError):
    """Saving or loading the game failed. Recoverable by the caller."""


class SaveNotFoundError(PersistenceError):
    def __init__(self, slot_name: str) -> None:
        self.slot_name = slot_name
        super().__init__(f"No save found in slot '{slot_name}'.")
