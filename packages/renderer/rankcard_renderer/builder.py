"""Fluent builder that accumulates a validated :class:`CardConfig`.

Each setter validates only its own arguments. Most bad input silently falls
back to a default; the cases that cannot be guessed (wrong fill-type shape,
unknown background type or status, missing image data, non-numeric rank, level
or XP values) raise :class:`ValidationError` immediately. Cross-field checks
happen once, in :meth:`RankCardBuilder.validate_for_build`.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Sequence

from .errors import BuildPreconditionError, ValidationError, type_name
from .models import (
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_HEIGHT,
    DEFAULT_OVERLAY_ALPHA,
    DEFAULT_OVERLAY_COLOR,
    DEFAULT_STATUS_WIDTH,
    DEFAULT_TEXT_COLOR,
    DEFAULT_TRACK_COLOR,
    DEFAULT_WIDTH,
    BackgroundType,
    BadgeSpec,
    CardConfig,
    CounterSpec,
    FillType,
    ImageSource,
    Status,
    XPSpec,
)


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _str_or(value: object, default: str) -> str:
    return value if value and isinstance(value, str) else default


def _require_number(field: str, value: object) -> None:
    if not _is_number(value):
        raise ValidationError(field, f"Expected {field} to be a finite number, received {value!r}!")


class RankCardBuilder:
    def __init__(self, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT) -> None:
        for name, value in (("width", width), ("height", height)):
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ValidationError(name, f"Expected {name} to be a positive integer, received {value!r}!")
        self.config = CardConfig(width=width, height=height)

    # ── identity ──

    def set_username(self, name: str, color: str = DEFAULT_TEXT_COLOR) -> RankCardBuilder:
        if not isinstance(name, str):
            raise ValidationError("username", f"Expected username to be a string, received {type_name(name)}!")
        self.config.username.name = name
        self.config.username.color = _str_or(color, DEFAULT_TEXT_COLOR)
        return self

    def set_avatar(self, data: ImageSource) -> RankCardBuilder:
        if not data:
            raise ValidationError("avatar", f"Invalid avatar type \"{type_name(data)}\"!")
        self.config.avatar.source = data
        return self

    def render_emojis(self, apply: bool = False) -> RankCardBuilder:
        self.config.render_emojis = bool(apply)
        return self

    def set_font_size(self, size: float | None) -> RankCardBuilder:
        self.config.font_size = size if _is_number(size) and size > 0 else None
        return self

    # ── surface ──

    def set_background(self, type: str | BackgroundType, data: ImageSource) -> RankCardBuilder:
        if not data:
            raise ValidationError("background", "Missing field : data")
        kind = _coerce_enum(BackgroundType, type)
        if kind is BackgroundType.COLOR:
            self.config.background.type = BackgroundType.COLOR
            self.config.background.source = data if isinstance(data, str) else DEFAULT_BACKGROUND_COLOR
        elif kind is BackgroundType.IMAGE:
            self.config.background.type = BackgroundType.IMAGE
            self.config.background.source = data
        else:
            raise ValidationError("background", f"Unsupported background type \"{type}\"")
        return self

    def set_overlay(self, color: str, alpha: float = DEFAULT_OVERLAY_ALPHA, display: bool = True) -> RankCardBuilder:
        overlay = self.config.overlay
        overlay.color = _str_or(color, DEFAULT_OVERLAY_COLOR)
        overlay.display = bool(display)
        overlay.alpha = float(alpha) if _is_number(alpha) and 0 <= alpha <= 1 else DEFAULT_OVERLAY_ALPHA
        return self

    # ── progress ──

    def set_progress_bar(
        self,
        color: str | Sequence[str],
        fill_type: str | FillType = FillType.COLOR,
        rounded: bool = True,
    ) -> RankCardBuilder:
        kind = _coerce_enum(FillType, fill_type)
        bar = self.config.progress_bar
        if kind is FillType.COLOR:
            if not isinstance(color, str):
                raise ValidationError("progress_bar", f"Color type must be a string, received {type_name(color)}!")
            bar.bar_color = color
        elif kind is FillType.GRADIENT:
            if not isinstance(color, (list, tuple)):
                raise ValidationError("progress_bar", f"Color type must be Array, received {type_name(color)}!")
            if len(color) < 2:
                raise ValidationError("progress_bar", f"Gradient needs at least 2 colors, received {len(color)}!")
            # only two stops are supported; extras are dropped
            bar.bar_color = (color[0], color[1])
        else:
            raise ValidationError("progress_bar", f"Unsupported progressbar type \"{fill_type}\"!")
        bar.fill_type = kind
        bar.rounded = bool(rounded)
        return self

    def set_progress_bar_track(self, color: str) -> RankCardBuilder:
        self.config.progress_bar.track_color = _str_or(color, DEFAULT_TRACK_COLOR)
        return self

    def set_current_xp(self, data: int | float, color: str = DEFAULT_TEXT_COLOR) -> RankCardBuilder:
        _require_number("current_xp", data)
        self.config.current_xp = XPSpec(value=data, color=_str_or(color, DEFAULT_TEXT_COLOR))
        return self

    def set_required_xp(self, data: int | float, color: str = DEFAULT_TEXT_COLOR) -> RankCardBuilder:
        _require_number("required_xp", data)
        self.config.required_xp = XPSpec(value=data, color=_str_or(color, DEFAULT_TEXT_COLOR))
        return self

    # ── rank / level ──

    def set_rank(self, data: int | float, text: str = "RANK", display: bool = True) -> RankCardBuilder:
        _require_number("rank", data)
        self._set_counter(self.config.rank, data, _str_or(text, "RANK"), display)
        return self

    def set_level(self, data: int | float, text: str = "LEVEL", display: bool = True) -> RankCardBuilder:
        _require_number("level", data)
        self._set_counter(self.config.level, data, _str_or(text, "LEVEL"), display)
        return self

    def set_rank_color(self, text: str = DEFAULT_TEXT_COLOR, number: str = DEFAULT_TEXT_COLOR) -> RankCardBuilder:
        self.config.rank.label_color = _str_or(text, DEFAULT_TEXT_COLOR)
        self.config.rank.value_color = _str_or(number, DEFAULT_TEXT_COLOR)
        return self

    def set_level_color(self, text: str = DEFAULT_TEXT_COLOR, number: str = DEFAULT_TEXT_COLOR) -> RankCardBuilder:
        self.config.level.label_color = _str_or(text, DEFAULT_TEXT_COLOR)
        self.config.level.value_color = _str_or(number, DEFAULT_TEXT_COLOR)
        return self

    @staticmethod
    def _set_counter(counter: CounterSpec, value: int | float, label: str, display: bool) -> None:
        counter.value = value
        counter.label = label
        counter.display = bool(display)

    # ── status ──

    def set_status(self, status: str | Status, circle: bool = False, width: float | bool = DEFAULT_STATUS_WIDTH) -> RankCardBuilder:
        kind = _coerce_enum(Status, status)
        if kind is None:
            raise ValidationError("status", f"Invalid status \"{status}\"")
        spec = self.config.status
        spec.type = kind
        spec.color = kind.color
        if width is False:
            spec.width = False
        else:
            spec.width = width if _is_number(width) else DEFAULT_STATUS_WIDTH
        if isinstance(circle, bool):
            spec.circle = circle
        return self

    def set_custom_status_color(self, color: str) -> RankCardBuilder:
        self.config.status.color = _str_or(color, self.config.status.type.color)
        return self

    # ── badges ──

    def set_bronze(self, count: int, icon: ImageSource | None = None) -> RankCardBuilder:
        _set_badge(self.config.bronze, count, icon)
        return self

    def set_silver(self, count: int, icon: ImageSource | None = None) -> RankCardBuilder:
        _set_badge(self.config.silver, count, icon)
        return self

    def set_gold(self, count: int, icon: ImageSource | None = None) -> RankCardBuilder:
        _set_badge(self.config.gold, count, icon)
        return self

    # ── build support ──

    def validate_for_build(self) -> CardConfig:
        return validate_config(self.config)

    async def build(self, compositor: Any | None = None) -> bytes:
        """Convenience wrapper around :meth:`RankCardCompositor.build`."""
        if compositor is None:
            from .compositor import RankCardCompositor

            compositor = RankCardCompositor()
        return await compositor.build(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RankCardBuilder:
        """Apply a JSON-like mapping through the regular setters."""
        builder = cls(
            width=data.get("width", DEFAULT_WIDTH),
            height=data.get("height", DEFAULT_HEIGHT),
        )

        if "username" in data:
            _apply(builder.set_username, data["username"], "name")
        if "avatar" in data:
            builder.set_avatar(data["avatar"])
        if "background" in data:
            bg = data["background"]
            if isinstance(bg, str):
                builder.set_background(BackgroundType.COLOR, bg)
            elif isinstance(bg, Mapping):
                builder.set_background(bg.get("type", "COLOR"), bg.get("data"))
            else:
                raise ValidationError("background", f"Expected background to be a color or object, received {type_name(bg)}!")
        if "overlay" in data:
            _apply(builder.set_overlay, data["overlay"], "color")
        if "progress_bar" in data:
            _apply(builder.set_progress_bar, data["progress_bar"], "color")
        if "progress_bar_track" in data:
            builder.set_progress_bar_track(data["progress_bar_track"])
        if "current_xp" in data:
            _apply(builder.set_current_xp, data["current_xp"], "data")
        if "required_xp" in data:
            _apply(builder.set_required_xp, data["required_xp"], "data")
        if "rank" in data:
            _apply(builder.set_rank, data["rank"], "data")
        if "level" in data:
            _apply(builder.set_level, data["level"], "data")
        if "rank_color" in data:
            _apply(builder.set_rank_color, data["rank_color"], "text")
        if "level_color" in data:
            _apply(builder.set_level_color, data["level_color"], "text")
        if "status" in data:
            _apply(builder.set_status, data["status"], "status")
        if "status_color" in data:
            builder.set_custom_status_color(data["status_color"])
        for name in ("bronze", "silver", "gold"):
            if name in data:
                _apply(getattr(builder, f"set_{name}"), data[name], "count")
        if "font_size" in data:
            builder.set_font_size(data["font_size"])
        if "render_emojis" in data:
            builder.render_emojis(data["render_emojis"])
        return builder


def validate_config(cfg: CardConfig) -> CardConfig:
    if not _is_number(cfg.current_xp.value):
        raise BuildPreconditionError(
            f"Expected currentXP to be a finite number, received {cfg.current_xp.value!r}!"
        )
    if not _is_number(cfg.required_xp.value):
        raise BuildPreconditionError(
            f"Expected requiredXP to be a finite number, received {cfg.required_xp.value!r}!"
        )
    if not cfg.avatar.source:
        raise BuildPreconditionError("Avatar source not found!")
    if not cfg.username.name:
        raise BuildPreconditionError("Missing username")
    return cfg


def _apply(setter, value: Any, primary: str) -> None:
    kwargs = dict(value) if isinstance(value, Mapping) else {primary: value}
    try:
        setter(**kwargs)
    except TypeError as exc:
        # unknown or missing keys in a JSON object
        raise ValidationError(primary, f"Invalid fields for {setter.__name__}: {exc}") from exc


def _set_badge(badge: BadgeSpec, count: int, icon: ImageSource | None) -> None:
    badge.count = int(count) if _is_number(count) and count >= 0 else 0
    if icon:
        badge.source = icon


def _coerce_enum(enum_type, value):
    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        for candidate in (value, value.upper(), value.lower()):
            try:
                return enum_type(candidate)
            except ValueError:
                continue
    return None
