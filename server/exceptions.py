"""Custom exceptions for Tunesmith server."""


class TunesmithError(Exception):
    """Base exception for all Tunesmith server errors."""

    pass


class ExportError(TunesmithError):
    """Error serializing a composition to MIDI."""

    pass


class StoreError(TunesmithError):
    """Error in composition store operations."""

    pass

