"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

STORAGE_BACKENDS = ("file", "supabase")

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CaptureConfig:
    cache_ttl_seconds: float = 30.0
    max_captures: int = 1000
    retention_days: int = 30


@dataclass(frozen=True)
class FileStoreConfig:
    path: str = "captures.json"


@dataclass(frozen=True)
class SupabaseConfig:
    url: str = ""
    anon_key: str = ""
    timeout: int = 30


@dataclass(frozen=True)
class StorageConfig:
    backend: str = "file"
    file: FileStoreConfig = field(default_factory=FileStoreConfig)
    supabase: SupabaseConfig = field(default_factory=SupabaseConfig)


@dataclass(frozen=True)
class ProtocolConfig:
    token_map: dict[str, str] = field(default_factory=dict)
    emission_price: float = 1.0


@dataclass(frozen=True)
class TelegramConfig:
    enabled: bool = False
    alert_bot_token: str = ""
    log_bot_token: str = ""
    chat_id: str = ""


@dataclass(frozen=True)
class NotificationsConfig:
    telegram: TelegramConfig = field(default_factory=TelegramConfig)


@dataclass(frozen=True)
class AppConfig:
    capture: CaptureConfig = field(default_factory=CaptureConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    protocols: dict[str, ProtocolConfig] = field(default_factory=dict)
    notifications: NotificationsConfig = field(default_factory=NotificationsConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_capture(raw: dict[str, Any]) -> CaptureConfig:
    return CaptureConfig(
        cache_ttl_seconds=float(raw.get("cache_ttl_seconds", 30)),
        max_captures=int(raw.get("max_captures", 1000)),
        retention_days=int(raw.get("retention_days", 30)),
    )


def _build_storage(raw: dict[str, Any]) -> StorageConfig:
    file_raw = raw.get("file") or {}
    sb_raw = raw.get("supabase") or {}
    return StorageConfig(
        backend=str(raw.get("backend", "file")).lower(),
        file=FileStoreConfig(path=file_raw.get("path", FileStoreConfig.path)),
        supabase=SupabaseConfig(
            url=sb_raw.get("url", "").rstrip("/"),
            anon_key=sb_raw.get("anon_key", ""),
            timeout=int(sb_raw.get("timeout", 30)),
        ),
    )


def _build_protocols(raw: dict[str, Any]) -> dict[str, ProtocolConfig]:
    protocols: dict[str, ProtocolConfig] = {}
    for name, cfg in raw.items():
        cfg = cfg or {}
        protocols[name.lower()] = ProtocolConfig(
            token_map={str(k): str(v) for k, v in (cfg.get("token_map") or {}).items()},
            emission_price=float(cfg.get("emission_price", 1.0)),
        )
    return protocols


def _build_notifications(raw: dict[str, Any]) -> NotificationsConfig:
    tg = raw.get("telegram") or {}
    return NotificationsConfig(
        telegram=TelegramConfig(
            enabled=bool(tg.get("enabled", False)),
            alert_bot_token=tg.get("alert_bot_token", ""),
            log_bot_token=tg.get("log_bot_token", ""),
            chat_id=str(tg.get("chat_id", "")),
        ),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (one level up from this package).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        capture=_build_capture(raw.get("capture") or {}),
        storage=_build_storage(raw.get("storage") or {}),
        protocols=_build_protocols(raw.get("protocols") or {}),
        notifications=_build_notifications(raw.get("notifications") or {}),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    if cfg.storage.backend not in STORAGE_BACKENDS:
        raise ValueError(f"Unknown storage backend '{cfg.storage.backend}'")

    if cfg.storage.backend == "supabase":
        if not cfg.storage.supabase.url or not cfg.storage.supabase.anon_key:
            raise ValueError("Supabase storage needs both url and anon_key")

    if cfg.capture.max_captures <= 0:
        raise ValueError("capture.max_captures must be positive")
    if cfg.capture.cache_ttl_seconds < 0:
        raise ValueError("capture.cache_ttl_seconds must not be negative")
