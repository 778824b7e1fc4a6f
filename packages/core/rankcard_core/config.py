"""Persistent rank card settings schema and load/save helpers."""

from __future__ import annotations

import json
import logging
import os
import platform
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any


CONFIG_VERSION = 2

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

logger = logging.getLogger("rankcard.config")


@dataclass
class FontsConfig:
    fonts_dir: str | None = None
    family: str = "Manrope"
    bold_file: str = "Manrope-Bold.ttf"
    regular_file: str = "Manrope-Regular.ttf"


@dataclass
class NetworkConfig:
    timeout_s: float = 15.0
    user_agent: str = "RankCard/0.1 (+https://pypi.org/project/rankcard/)"


@dataclass
class CanvasConfig:
    width: int = 1000
    height: int = 380


@dataclass
class OutputConfig:
    directory: str = "."
    filename: str = "rank.png"


@dataclass
class LoggingConfig:
    keep_log_files: int = 7
    level: str = "INFO"
    console: bool = True


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    fonts: FontsConfig = field(default_factory=FontsConfig)
    network: NetworkConfig = field(default_factory=NetworkConfig)
    canvas: CanvasConfig = field(default_factory=CanvasConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


DEFAULT_CONFIG = AppConfig()


def config_root() -> Path:
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "RankCard"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "RankCard"
    return Path.home() / ".config" / "rankcard"


def config_path() -> Path:
    return config_root() / "config.json"


def _merge(dataclass_type, raw: dict[str, Any]):
    defaults = dataclass_type()  # type: ignore[misc]
    if not isinstance(raw, dict):
        return defaults
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _normalize_network(cfg: AppConfig) -> None:
    try:
        timeout = float(cfg.network.timeout_s)
    except (TypeError, ValueError):
        timeout = NetworkConfig.timeout_s
    cfg.network.timeout_s = max(1.0, min(120.0, timeout))
    if not isinstance(cfg.network.user_agent, str) or not cfg.network.user_agent.strip():
        cfg.network.user_agent = NetworkConfig.user_agent


def _normalize_canvas(cfg: AppConfig) -> None:
    for name, default in (("width", CanvasConfig.width), ("height", CanvasConfig.height)):
        value = getattr(cfg.canvas, name)
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            setattr(cfg.canvas, name, default)


def _normalize_logging(cfg: AppConfig) -> None:
    level = str(cfg.logging.level).upper()
    cfg.logging.level = level if level in LOG_LEVELS else "INFO"
    try:
        keep = int(cfg.logging.keep_log_files)
    except (TypeError, ValueError):
        keep = LoggingConfig.keep_log_files
    cfg.logging.keep_log_files = max(2, keep)
    cfg.logging.console = bool(cfg.logging.console)


def _migrate(raw: dict[str, Any]) -> dict[str, Any]:
    version = int(raw.get("config_version", 1))
    data = dict(raw)

    if version < 2:
        # v1 kept the fonts directory at the top level.
        fonts = dict(data.get("fonts", {}) or {})
        if "fonts_dir" in data:
            fonts.setdefault("fonts_dir", data.pop("fonts_dir"))
        data["fonts"] = fonts
        data.setdefault("logging", {})
        data["config_version"] = 2

    return data


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("unreadable config %s: %s", path, exc, extra={"event": "config_invalid"})
        return AppConfig()
    if not isinstance(raw, dict):
        return AppConfig()

    data = _migrate(raw)
    cfg = AppConfig(
        config_version=int(data.get("config_version", CONFIG_VERSION)),
        fonts=_merge(FontsConfig, data.get("fonts", {})),
        network=_merge(NetworkConfig, data.get("network", {})),
        canvas=_merge(CanvasConfig, data.get("canvas", {})),
        output=_merge(OutputConfig, data.get("output", {})),
        logging=_merge(LoggingConfig, data.get("logging", {})),
    )

    _normalize_network(cfg)
    _normalize_canvas(cfg)
    _normalize_logging(cfg)
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path
