"""Error taxonomy for card configuration and builds."""

from __future__ import annotations


class RankCardError(Exception):
    """Base class for every error raised by the renderer."""


class ValidationError(RankCardError, ValueError):
    """A builder call received input of the wrong kind or an unsupported value."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class BuildPreconditionError(RankCardError):
    """Build was started without a required field or before fonts were ready."""


class AssetResolutionError(RankCardError):
    """An image source could not be fetched or decoded."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"{message} (source={source})")
        self.source = source


def type_name(value: object) -> str:
    if value is None:
        return "None"
    return type(value).__name__
