"""Renderer package for rank card composition."""

from .assets import ImageLoader, builtin_medal
from .builder import RankCardBuilder, validate_config
from .compositor import STAGES, RankCardCompositor
from .errors import AssetResolutionError, BuildPreconditionError, RankCardError, ValidationError
from .fonts import FontFace, FontRegistry, default_faces, get_registry, register_fonts
from .formatting import abbreviate, format_hex, invert_color, shorten, to_abbrev, validate_hex
from .geometry import compute_fill_width
from .models import BackgroundType, CardConfig, FillType, Status
from .text_layout import get_lines, pillow_measure

__all__ = [
    "AssetResolutionError",
    "BackgroundType",
    "BuildPreconditionError",
    "CardConfig",
    "FillType",
    "FontFace",
    "FontRegistry",
    "ImageLoader",
    "RankCardBuilder",
    "RankCardCompositor",
    "RankCardError",
    "STAGES",
    "Status",
    "ValidationError",
    "abbreviate",
    "builtin_medal",
    "compute_fill_width",
    "default_faces",
    "format_hex",
    "get_lines",
    "get_registry",
    "invert_color",
    "pillow_measure",
    "register_fonts",
    "shorten",
    "to_abbrev",
    "validate_config",
    "validate_hex",
]
