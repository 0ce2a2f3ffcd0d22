"""
Domain errors raised by the rotation engine.

Lookups by unknown id are not errors: mutations silently do nothing and
next_station falls back to the first station.
"""


class RotationError(ValueError):
    """Base class for rotation errors the caller is expected to report."""


class DuplicateNameError(RotationError):
    def __init__(self, kind: str, name: str) -> None:
        super().__init__(f"{kind.capitalize()} already exists: {name}")
        self.kind = kind
        self.name = name


class EmptyGroupSetError(RotationError):
    def __init__(self) -> None:
        super().__init__("Please create groups before generating a schedule")
