"""Image source resolution: bytes, paths, URLs and built-in medal icons."""

from __future__ import annotations

import asyncio
import logging
import os
import ssl
from io import BytesIO
from pathlib import Path

import aiohttp
import certifi
from PIL import Image, ImageDraw, UnidentifiedImageError

from .errors import AssetResolutionError
from .models import BUILTIN_PREFIX


logger = logging.getLogger("rankcard.assets")

DEFAULT_TIMEOUT_S = 15
DEFAULT_USER_AGENT = "RankCard/0.1 (+https://pypi.org/project/rankcard/)"

# (face, rim) per built-in medal
MEDAL_COLORS: dict[str, tuple[str, str]] = {
    "bronze": ("#CD7F32", "#8C5523"),
    "silver": ("#C0C0C0", "#7E7E7E"),
    "gold": ("#FFD700", "#B8860B"),
}


def _build_ssl_context() -> ssl.SSLContext:
    """Create TLS context for remote image sources with explicit CA handling."""
    if os.environ.get("RANKCARD_ALLOW_INSECURE_TLS", "").strip() == "1":
        return ssl._create_unverified_context()

    ca_bundle = os.environ.get("RANKCARD_CA_BUNDLE", "").strip()
    if ca_bundle:
        return ssl.create_default_context(cafile=ca_bundle)

    return ssl.create_default_context(cafile=certifi.where())


def describe_source(source: object) -> str:
    if isinstance(source, (bytes, bytearray)):
        return f"<{len(source)} bytes>"
    if isinstance(source, Image.Image):
        return f"<image {source.width}x{source.height}>"
    return str(source)


def builtin_medal(name: str, size: int = 128) -> Image.Image:
    try:
        face, rim = MEDAL_COLORS[name]
    except KeyError:
        raise AssetResolutionError(BUILTIN_PREFIX + name, "Unknown built-in icon") from None

    icon = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(icon)
    pad = size // 8
    draw.ellipse((pad, pad, size - pad - 1, size - pad - 1), fill=face, outline=rim, width=max(2, size // 16))
    inner = size // 3
    draw.ellipse((inner, inner, size - inner - 1, size - inner - 1), outline=rim, width=max(1, size // 32))
    return icon


class ImageLoader:
    """Resolves opaque image references into decoded RGBA images."""

    def __init__(self, timeout_s: float = DEFAULT_TIMEOUT_S, user_agent: str = DEFAULT_USER_AGENT) -> None:
        self.timeout_s = timeout_s
        self.user_agent = user_agent

    async def load(self, source: object) -> Image.Image:
        if isinstance(source, Image.Image):
            return source.convert("RGBA")
        if isinstance(source, (bytes, bytearray, memoryview)):
            return self.decode(bytes(source), describe_source(source))
        if isinstance(source, str) and source.startswith(BUILTIN_PREFIX):
            return builtin_medal(source[len(BUILTIN_PREFIX) :])
        if isinstance(source, str) and source.startswith(("http://", "https://")):
            data = await self.fetch(source)
            return self.decode(data, source)
        if isinstance(source, (str, Path)):
            data = await self.read_file(Path(source))
            return self.decode(data, str(source))
        raise AssetResolutionError(describe_source(source), "Unsupported image source type")

    async def fetch(self, url: str) -> bytes:
        timeout = aiohttp.ClientTimeout(total=self.timeout_s)
        headers = {"User-Agent": self.user_agent, "Accept": "image/*"}
        connector = aiohttp.TCPConnector(ssl=_build_ssl_context())
        logger.info("fetching image url=%s", url, extra={"event": "asset_fetch"})
        try:
            async with aiohttp.ClientSession(timeout=timeout, headers=headers, connector=connector) as session:
                async with session.get(url, allow_redirects=True) as response:
                    if response.status != 200:
                        raise AssetResolutionError(url, f"HTTP {response.status}")
                    return await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise AssetResolutionError(url, f"Request failed: {exc!r}") from exc

    @staticmethod
    async def read_file(path: Path) -> bytes:
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            raise AssetResolutionError(str(path), f"Cannot read file: {exc.strerror or exc}") from exc

    @staticmethod
    def decode(data: bytes, label: str) -> Image.Image:
        try:
            image = Image.open(BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError) as exc:
            raise AssetResolutionError(label, "Cannot decode image") from exc
        return image.convert("RGBA")
