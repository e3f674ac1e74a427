"""Exceptions raised by the composition engine."""


class CompositionError(Exception):
    """Base exception for all composition engine errors."""

    pass


class InvalidParameterError(CompositionError, ValueError):
    """A parameter does not resolve to a known table entry or is malformed.

    Attributes:
        field: Name of the offending parameter
        value: Value that was rejected
    """

    def __init__(self, field: str, value: object, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.value = value
