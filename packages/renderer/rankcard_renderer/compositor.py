"""Rank card composer: resolves assets and runs the fixed draw pipeline."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable

from PIL import Image, ImageChops, ImageDraw

from .assets import ImageLoader
from .builder import validate_config
from .errors import BuildPreconditionError
from .fonts import DEFAULT_FAMILY, FontRegistry, FontType, get_registry
from .formatting import abbreviate, shorten
from .geometry import compute_fill_width
from .models import BackgroundType, CardConfig, FillType
from .primitives import draw_text, encode_png, linear_gradient, parse_color, text_width


logger = logging.getLogger("rankcard.compositor")

USERNAME_LIMIT = 23
USERNAME_POS = (275.5, 164)
OVERLAY_INSET = 20

LEVEL_LABEL_X = 800
LEVEL_VALUE_RIGHT = 930
COUNTER_BASELINE = 82
RANK_VALUE_RIGHT = 790
COUNTER_GAP = 7

XP_X = 800
XP_BASELINE = 164
XP_GAP = 15

BADGE_TEXT_DX = 110
BADGE_FONT_SIZE = 60

# rounded track: left cap, straight body, right cap
CAP_X = 275.5
CAP_Y = 202.25
LEFT_CAP_R = 18.5
RIGHT_CAP_R = 18.75
BODY_TOP = 183.75
BODY_HEIGHT = 37.5
ROUNDED_TRACK_SPAN = 596.5
RECT_STROKE_WIDTH = 7

AVATAR_CENTER = (135, 145)
AVATAR_RADIUS = 100
AVATAR_BOX = (35, 45)
STATUS_DOT_CENTER = (215, 205)
STATUS_DOT_RADIUS = 20


@dataclass
class ResolvedAssets:
    avatar: Image.Image
    background: Image.Image | None
    badges: tuple[Image.Image, ...]


@dataclass
class RenderContext:
    canvas: Image.Image
    config: CardConfig
    assets: ResolvedAssets
    fonts: FontRegistry
    font_family: str = DEFAULT_FAMILY
    fill_width: float = 0

    def font(self, default_size: float, weight: str = "bold", fixed: bool = False) -> FontType:
        size = default_size if fixed or not self.config.font_size else self.config.font_size
        return self.fonts.font(self.font_family, size, weight)


def track_width(config: CardConfig) -> float:
    return ROUNDED_TRACK_SPAN if config.progress_bar.rounded else config.progress_bar.width


def _is_finite(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


# ── stages ──


def draw_background(ctx: RenderContext) -> None:
    background = ctx.assets.background
    if background is None:
        ctx.canvas.paste(parse_color(ctx.config.background.source, "#23272A"), (0, 0, *ctx.canvas.size))
        return
    stretched = background.resize(ctx.canvas.size, Image.Resampling.LANCZOS)
    ctx.canvas.alpha_composite(stretched)


def draw_overlay(ctx: RenderContext) -> None:
    overlay = ctx.config.overlay
    if not overlay.display:
        return
    w, h = ctx.canvas.size
    r, g, b, a = parse_color(overlay.color, "#333640")
    layer = Image.new("RGBA", ctx.canvas.size, (0, 0, 0, 0))
    box = (OVERLAY_INSET, OVERLAY_INSET, w - OVERLAY_INSET - 1, h - OVERLAY_INSET - 1)
    ImageDraw.Draw(layer).rectangle(box, fill=(r, g, b, round(a * overlay.alpha)))
    ctx.canvas.alpha_composite(layer)


def draw_username(ctx: RenderContext) -> None:
    username = ctx.config.username
    text = shorten(username.name or "", USERNAME_LIMIT)
    draw_text(ctx.canvas, USERNAME_POS, text, ctx.font(36), username.color, emoji=ctx.config.render_emojis)


def draw_level(ctx: RenderContext) -> None:
    level = ctx.config.level
    if not level.display or not _is_finite(level.value):
        return
    label_font = ctx.font(36)
    value_text = abbreviate(int(level.value))
    label_x = LEVEL_LABEL_X - text_width(label_font, value_text)
    draw_text(ctx.canvas, (label_x, COUNTER_BASELINE), level.label, label_font, level.label_color)
    draw_text(
        ctx.canvas, (LEVEL_VALUE_RIGHT, COUNTER_BASELINE), value_text, ctx.font(32), level.value_color, align="end"
    )


def draw_rank(ctx: RenderContext) -> None:
    rank, level = ctx.config.rank, ctx.config.level
    if not rank.display or not _is_finite(rank.value):
        return
    label_font, value_font = ctx.font(36), ctx.font(32)
    level_text = abbreviate(int(level.value)) if _is_finite(level.value) else "-"
    rank_text = abbreviate(int(rank.value)) or "-"

    label_right = (
        LEVEL_LABEL_X
        - text_width(label_font, level_text)
        - COUNTER_GAP
        - text_width(label_font, level.label)
        - COUNTER_GAP
        - text_width(label_font, rank_text)
    )
    value_right = RANK_VALUE_RIGHT - text_width(value_font, level_text) - COUNTER_GAP - text_width(value_font, level.label)
    draw_text(ctx.canvas, (label_right, COUNTER_BASELINE), rank.label, label_font, rank.label_color, align="end")
    draw_text(ctx.canvas, (value_right, COUNTER_BASELINE), rank_text, value_font, rank.value_color, align="end")


def draw_xp(ctx: RenderContext) -> None:
    current, required = ctx.config.current_xp, ctx.config.required_xp
    font = ctx.font(30)
    current_text = abbreviate(current.value)
    required_text = f"/ {abbreviate(required.value)}"
    draw_text(ctx.canvas, (XP_X + text_width(font, current_text) + XP_GAP, XP_BASELINE), required_text, font, required.color)
    draw_text(ctx.canvas, (XP_X, XP_BASELINE), current_text, font, current.color)


def draw_badges(ctx: RenderContext) -> None:
    font = ctx.font(BADGE_FONT_SIZE, weight="regular", fixed=True)
    for badge, icon in zip(ctx.config.badges, ctx.assets.badges):
        sized = icon.resize((badge.size, badge.size), Image.Resampling.LANCZOS)
        ctx.canvas.paste(sized, (badge.x, badge.y), sized)
        draw_text(ctx.canvas, (badge.x + BADGE_TEXT_DX, badge.y + badge.text_offset_y), str(badge.count), font, "#FFFFFF")


def _capsule_mask(size: tuple[int, int], span: float) -> Image.Image:
    mask = Image.new("L", size, 0)
    draw = ImageDraw.Draw(mask)
    draw.pieslice((CAP_X - LEFT_CAP_R, CAP_Y - LEFT_CAP_R, CAP_X + LEFT_CAP_R, CAP_Y + LEFT_CAP_R), 90, 270, fill=255)
    draw.rectangle((CAP_X, BODY_TOP, CAP_X + span, BODY_TOP + BODY_HEIGHT), fill=255)
    right = CAP_X + span
    draw.pieslice((right - RIGHT_CAP_R, CAP_Y - RIGHT_CAP_R, right + RIGHT_CAP_R, CAP_Y + RIGHT_CAP_R), 270, 90, fill=255)
    return mask


def _paint_fill(ctx: RenderContext, mask: Image.Image, left: float, right: float) -> None:
    bar = ctx.config.progress_bar
    if bar.fill_type is FillType.GRADIENT:
        color_from, color_to = bar.bar_color
        layer = Image.new("RGBA", ctx.canvas.size, (0, 0, 0, 0))
        layer.paste(linear_gradient((math.ceil(right - left), ctx.canvas.height), color_from, color_to), (int(left), 0))
        ctx.canvas.paste(layer, (0, 0), mask)
    else:
        ctx.canvas.paste(parse_color(bar.bar_color, "#FFFFFF"), None, mask)


def draw_progress_bar(ctx: RenderContext) -> None:
    bar = ctx.config.progress_bar
    size = ctx.canvas.size

    if bar.rounded:
        ctx.canvas.paste(parse_color(bar.track_color, "#484B4E"), None, _capsule_mask(size, ROUNDED_TRACK_SPAN))
        # the right cap is drawn even at zero progress
        _paint_fill(
            ctx,
            _capsule_mask(size, ctx.fill_width),
            CAP_X - LEFT_CAP_R,
            CAP_X + ROUNDED_TRACK_SPAN + RIGHT_CAP_R,
        )
        return

    if ctx.fill_width > 0:
        mask = Image.new("L", size, 0)
        ImageDraw.Draw(mask).rectangle((bar.x, bar.y, bar.x + ctx.fill_width - 1, bar.y + bar.height - 1), fill=255)
        _paint_fill(ctx, mask, bar.x, bar.x + bar.width)

    half = RECT_STROKE_WIDTH / 2
    ImageDraw.Draw(ctx.canvas).rectangle(
        (bar.x - half, bar.y - half, bar.x + bar.width + half, bar.y + bar.height + half),
        outline=parse_color(bar.track_color, "#484B4E"),
        width=RECT_STROKE_WIDTH,
    )


def draw_avatar(ctx: RenderContext) -> None:
    spec = ctx.config.avatar
    avatar = ctx.assets.avatar.resize((spec.width + 20, spec.height + 20), Image.Resampling.LANCZOS)
    cx, cy = AVATAR_CENTER[0] - AVATAR_BOX[0], AVATAR_CENTER[1] - AVATAR_BOX[1]
    clip = Image.new("L", avatar.size, 0)
    ImageDraw.Draw(clip).ellipse(
        (cx - AVATAR_RADIUS, cy - AVATAR_RADIUS, cx + AVATAR_RADIUS - 1, cy + AVATAR_RADIUS - 1), fill=255
    )
    ctx.canvas.paste(avatar, AVATAR_BOX, ImageChops.multiply(clip, avatar.getchannel("A")))


def draw_status(ctx: RenderContext) -> None:
    status = ctx.config.status
    color = parse_color(status.color, status.type.color)
    draw = ImageDraw.Draw(ctx.canvas)

    if status.circle:
        x, y = STATUS_DOT_CENTER
        r = STATUS_DOT_RADIUS
        draw.ellipse((x - r, y - r, x + r, y + r), fill=color)
        return

    width = status.width
    if width is False or not _is_finite(width) or width <= 0:
        return
    x, y = AVATAR_CENTER
    r = AVATAR_RADIUS + width / 2
    draw.ellipse((x - r, y - r, x + r, y + r), outline=color, width=max(1, round(width)))


Stage = Callable[[RenderContext], None]

STAGES: tuple[tuple[str, Stage], ...] = (
    ("background", draw_background),
    ("overlay", draw_overlay),
    ("username", draw_username),
    ("level", draw_level),
    ("rank", draw_rank),
    ("xp", draw_xp),
    ("badges", draw_badges),
    ("progress_bar", draw_progress_bar),
    ("avatar", draw_avatar),
    ("status", draw_status),
)


class RankCardCompositor:
    """Builds finished rank card images from a builder or a plain config."""

    def __init__(
        self,
        loader: ImageLoader | None = None,
        fonts: FontRegistry | None = None,
        font_family: str = DEFAULT_FAMILY,
    ) -> None:
        self.loader = loader or ImageLoader()
        self.fonts = fonts or get_registry()
        self.font_family = font_family

    async def resolve_assets(self, config: CardConfig) -> ResolvedAssets:
        # sequential on purpose: a failure names the first bad source
        avatar = await self.loader.load(config.avatar.source)
        background = None
        if config.background.type is BackgroundType.IMAGE:
            background = await self.loader.load(config.background.source)
        badges = []
        for badge in config.badges:
            badges.append(await self.loader.load(badge.source))
        return ResolvedAssets(avatar=avatar, background=background, badges=tuple(badges))

    async def render(self, card) -> Image.Image:
        config = validate_config(card.config if hasattr(card, "config") else card)
        if not self.fonts.ready:
            raise BuildPreconditionError("Fonts are not registered; await register_fonts() before building")

        started = time.perf_counter()
        assets = await self.resolve_assets(config)
        canvas = Image.new("RGBA", (config.width, config.height), (0, 0, 0, 0))
        ctx = RenderContext(
            canvas=canvas,
            config=config,
            assets=assets,
            fonts=self.fonts,
            font_family=self.font_family,
            fill_width=compute_fill_width(config.current_xp.value, config.required_xp.value, track_width(config)),
        )
        for name, stage in STAGES:
            logger.debug("stage %s", name, extra={"event": "render_stage"})
            stage(ctx)

        logger.info(
            "rendered card user=%s size=%sx%s in %.1fms",
            config.username.name,
            config.width,
            config.height,
            (time.perf_counter() - started) * 1000,
            extra={"event": "card_rendered"},
        )
        return canvas

    async def build(self, card) -> bytes:
        return encode_png(await self.render(card))
