"""Process-wide font registration.

Fonts are registered by an explicit awaited call. Builds check that the
registry is ready instead of racing a timer.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from PIL import ImageFont

from .errors import BuildPreconditionError


logger = logging.getLogger("rankcard.fonts")

DEFAULT_FAMILY = "Manrope"
DEFAULT_FONT_FILES = {
    "bold": "Manrope-Bold.ttf",
    "regular": "Manrope-Regular.ttf",
}

FontType = ImageFont.FreeTypeFont | ImageFont.ImageFont


@dataclass(frozen=True)
class FontFace:
    path: Path
    family: str
    weight: str = "regular"
    style: str = "normal"


def default_faces(
    fonts_dir: Path | None,
    family: str = DEFAULT_FAMILY,
    files: dict[str, str] | None = None,
) -> list[FontFace]:
    """Faces found in ``fonts_dir``; missing files are logged and skipped."""
    if fonts_dir is None:
        logger.warning("no fonts directory configured; using Pillow default font", extra={"event": "font_fallback"})
        return []

    faces = []
    for weight, filename in (files or DEFAULT_FONT_FILES).items():
        path = fonts_dir / filename
        if path.exists():
            faces.append(FontFace(path=path, family=family, weight=weight))
        else:
            logger.warning(
                "default font missing: %s; using Pillow default font",
                path,
                extra={"event": "font_fallback"},
            )
    return faces


class FontRegistry:
    def __init__(self) -> None:
        self._faces: dict[tuple[str, str], FontFace] = {}
        self._cache: dict[tuple[str, str, float], FontType] = {}
        self._ready = False

    @property
    def ready(self) -> bool:
        return self._ready

    @property
    def faces(self) -> list[FontFace]:
        return list(self._faces.values())

    async def register_fonts(self, faces: list[FontFace] | None = None, fonts_dir: Path | str | None = None) -> None:
        if faces is None:
            faces = default_faces(Path(fonts_dir) if fonts_dir else None)

        for face in faces:
            # validation loads the file; a broken font must fail here, not mid-build
            try:
                await asyncio.to_thread(ImageFont.truetype, str(face.path), 12)
            except OSError as exc:
                raise BuildPreconditionError(f"Cannot load font {face.path}: {exc}") from exc
            self._faces[(face.family.lower(), face.weight.lower())] = face
            logger.info(
                "registered font %s %s from %s",
                face.family,
                face.weight,
                face.path,
                extra={"event": "font_registered"},
            )

        self._cache.clear()
        self._ready = True

    def font(self, family: str = DEFAULT_FAMILY, size: float = 36, weight: str = "bold") -> FontType:
        key = (family.lower(), weight.lower(), float(size))
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        face = self._faces.get((family.lower(), weight.lower())) or self._faces.get((family.lower(), "regular"))
        if face is not None:
            font: FontType = ImageFont.truetype(str(face.path), size)
        else:
            font = ImageFont.load_default(size=size)
        self._cache[key] = font
        return font

    def reset(self) -> None:
        self._faces.clear()
        self._cache.clear()
        self._ready = False


_REGISTRY = FontRegistry()


def get_registry() -> FontRegistry:
    return _REGISTRY


async def register_fonts(faces: list[FontFace] | None = None, fonts_dir: Path | str | None = None) -> FontRegistry:
    await _REGISTRY.register_fonts(faces, fonts_dir)
    return _REGISTRY
