"""Typed rank card configuration models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Union


ImageSource = Union[str, bytes, bytearray, Path]

DEFAULT_WIDTH = 1000
DEFAULT_HEIGHT = 380
DEFAULT_BACKGROUND_COLOR = "#23272A"
DEFAULT_OVERLAY_COLOR = "#333640"
DEFAULT_OVERLAY_ALPHA = 0.5
DEFAULT_TRACK_COLOR = "#484B4E"
DEFAULT_BAR_COLOR = "#FFFFFF"
DEFAULT_TEXT_COLOR = "#FFFFFF"
DEFAULT_VALUE_COLOR = "#F3F3F3"
DEFAULT_STATUS_WIDTH = 5

BUILTIN_PREFIX = "builtin:"


class BackgroundType(str, Enum):
    COLOR = "COLOR"
    IMAGE = "IMAGE"


class FillType(str, Enum):
    COLOR = "COLOR"
    GRADIENT = "GRADIENT"


class Status(str, Enum):
    ONLINE = "online"
    IDLE = "idle"
    DND = "dnd"
    OFFLINE = "offline"
    STREAMING = "streaming"

    @property
    def color(self) -> str:
        return STATUS_COLORS[self]


STATUS_COLORS: dict[Status, str] = {
    Status.ONLINE: "#43B581",
    Status.IDLE: "#FAA61A",
    Status.DND: "#F04747",
    Status.OFFLINE: "#747F8E",
    Status.STREAMING: "#593595",
}


@dataclass
class BackgroundSpec:
    type: BackgroundType = BackgroundType.COLOR
    source: ImageSource = DEFAULT_BACKGROUND_COLOR


@dataclass
class OverlaySpec:
    display: bool = True
    color: str = DEFAULT_OVERLAY_COLOR
    alpha: float = DEFAULT_OVERLAY_ALPHA


@dataclass
class AvatarSpec:
    source: ImageSource | None = None
    x: int = 70
    y: int = 50
    width: int = 180
    height: int = 180


@dataclass
class ProgressBarSpec:
    rounded: bool = True
    x: float = 275.5
    y: float = 183.75
    width: float = 650
    height: float = 37.5
    track_color: str = DEFAULT_TRACK_COLOR
    fill_type: FillType = FillType.COLOR
    bar_color: str | tuple[str, str] = DEFAULT_BAR_COLOR


@dataclass
class StatusSpec:
    type: Status = Status.ONLINE
    color: str = STATUS_COLORS[Status.ONLINE]
    # False disables the ring entirely
    width: float | bool = DEFAULT_STATUS_WIDTH
    circle: bool = False


@dataclass
class CounterSpec:
    label: str
    display: bool = True
    value: int | float = 1
    label_color: str = DEFAULT_TEXT_COLOR
    value_color: str = DEFAULT_VALUE_COLOR


@dataclass
class XPSpec:
    value: int | float = 0
    color: str = DEFAULT_TEXT_COLOR


@dataclass
class UsernameSpec:
    name: str | None = None
    color: str = DEFAULT_TEXT_COLOR


@dataclass
class BadgeSpec:
    source: ImageSource
    x: int
    y: int
    size: int
    text_offset_y: int
    count: int = 0


@dataclass(frozen=True)
class TrackStyle:
    x: float = 0
    y: float = 0
    width: int = 0
    height: int = 0
    color: str = DEFAULT_TRACK_COLOR
    stroke: bool = False
    line_width: int = 0


@dataclass(frozen=True)
class BarStyle:
    width: float = 0
    color: str = DEFAULT_BAR_COLOR


@dataclass
class CardConfig:
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    background: BackgroundSpec = field(default_factory=BackgroundSpec)
    overlay: OverlaySpec = field(default_factory=OverlaySpec)
    avatar: AvatarSpec = field(default_factory=AvatarSpec)
    progress_bar: ProgressBarSpec = field(default_factory=ProgressBarSpec)
    status: StatusSpec = field(default_factory=StatusSpec)
    rank: CounterSpec = field(default_factory=lambda: CounterSpec(label="RANK"))
    level: CounterSpec = field(default_factory=lambda: CounterSpec(label="LEVEL"))
    current_xp: XPSpec = field(default_factory=XPSpec)
    required_xp: XPSpec = field(default_factory=XPSpec)
    username: UsernameSpec = field(default_factory=UsernameSpec)
    bronze: BadgeSpec = field(
        default_factory=lambda: BadgeSpec(source=BUILTIN_PREFIX + "bronze", x=680, y=230, size=120, text_offset_y=85)
    )
    silver: BadgeSpec = field(
        default_factory=lambda: BadgeSpec(source=BUILTIN_PREFIX + "silver", x=480, y=230, size=120, text_offset_y=85)
    )
    gold: BadgeSpec = field(
        default_factory=lambda: BadgeSpec(source=BUILTIN_PREFIX + "gold", x=280, y=240, size=100, text_offset_y=75)
    )
    render_emojis: bool = False
    font_size: float | None = None

    @property
    def badges(self) -> tuple[BadgeSpec, BadgeSpec, BadgeSpec]:
        """Badges in draw order."""
        return (self.bronze, self.silver, self.gold)
