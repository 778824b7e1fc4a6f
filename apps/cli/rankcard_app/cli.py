"""CLI entrypoints for rendering rank cards and inspecting settings."""

from __future__ import annotations

import argparse
import asyncio
import json
from dataclasses import asdict
from pathlib import Path

from rankcard_core import config_path, load_config
from rankcard_core.logging_setup import configure_logging
from rankcard_renderer import (
    FontFace,
    ImageLoader,
    RankCardBuilder,
    RankCardCompositor,
    RankCardError,
    abbreviate,
    default_faces,
    get_registry,
    invert_color,
)
from rankcard_renderer.primitives import write


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def _font_faces(cfg) -> list[FontFace]:
    fonts_dir = Path(cfg.fonts.fonts_dir).expanduser() if cfg.fonts.fonts_dir else None
    files = {"bold": cfg.fonts.bold_file, "regular": cfg.fonts.regular_file}
    return default_faces(fonts_dir, family=cfg.fonts.family, files=files)


async def _render(card: dict, cfg) -> bytes:
    registry = get_registry()
    await registry.register_fonts(_font_faces(cfg))

    card = dict(card)
    card.setdefault("width", cfg.canvas.width)
    card.setdefault("height", cfg.canvas.height)
    builder = RankCardBuilder.from_dict(card)

    compositor = RankCardCompositor(
        loader=ImageLoader(timeout_s=cfg.network.timeout_s, user_agent=cfg.network.user_agent),
        fonts=registry,
        font_family=cfg.fonts.family,
    )
    return await compositor.build(builder)


def cmd_render(args: argparse.Namespace) -> int:
    cfg = load_config()
    card = json.loads(Path(args.card).read_text(encoding="utf-8"))
    out = Path(args.out) if args.out else Path(cfg.output.directory).expanduser() / cfg.output.filename

    try:
        data = asyncio.run(_render(card, cfg))
    except RankCardError as exc:
        _print_json({"success": False, "error": type(exc).__name__, "message": str(exc)})
        return 2

    path = write(data, out)
    _print_json({"success": True, "path": str(path), "bytes": len(data)})
    return 0


def cmd_abbrev(args: argparse.Namespace) -> int:
    _print_json({str(n): abbreviate(n) for n in args.numbers})
    return 0


def cmd_invert(args: argparse.Namespace) -> int:
    _print_json({"color": args.color, "inverted": invert_color(args.color)})
    return 0


def cmd_fonts(_args: argparse.Namespace) -> int:
    cfg = load_config()
    faces = _font_faces(cfg)
    _print_json(
        {
            "fonts_dir": cfg.fonts.fonts_dir,
            "family": cfg.fonts.family,
            "faces": [{"weight": f.weight, "path": str(f.path)} for f in faces],
            "fallback": len(faces) == 0,
        }
    )
    return 0


def cmd_config_show(_args: argparse.Namespace) -> int:
    _print_json(asdict(load_config()))
    return 0


def cmd_config_path(_args: argparse.Namespace) -> int:
    print(config_path())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rankcard", description="Rank card renderer and tools")
    sub = parser.add_subparsers(dest="command", required=True)

    render_cmd = sub.add_parser("render", help="Render a rank card from a JSON description")
    render_cmd.add_argument("--card", required=True, help="Path to card JSON")
    render_cmd.add_argument("--out", default=None, help="Output PNG path (defaults to configured output)")
    render_cmd.set_defaults(func=cmd_render)

    abbrev_cmd = sub.add_parser("abbrev", help="Abbreviate numbers with K/M/B/T suffixes")
    abbrev_cmd.add_argument("numbers", nargs="+", type=float)
    abbrev_cmd.set_defaults(func=cmd_abbrev)

    invert_cmd = sub.add_parser("invert", help="Invert a hex color")
    invert_cmd.add_argument("color")
    invert_cmd.set_defaults(func=cmd_invert)

    fonts_cmd = sub.add_parser("fonts", help="Show font faces that would be registered")
    fonts_cmd.set_defaults(func=cmd_fonts)

    config_cmd = sub.add_parser("config", help="Inspect persisted settings")
    config_sub = config_cmd.add_subparsers(dest="config_cmd", required=True)
    show_cmd = config_sub.add_parser("show", help="Print effective settings")
    show_cmd.set_defaults(func=cmd_config_show)
    path_cmd = config_sub.add_parser("path", help="Print settings file location")
    path_cmd.set_defaults(func=cmd_config_path)

    return parser


def main(argv: list[str] | None = None) -> int:
    cfg = load_config()
    configure_logging(keep_files=cfg.logging.keep_log_files, console=cfg.logging.console, level=cfg.logging.level)
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
