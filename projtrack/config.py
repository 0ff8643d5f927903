#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

MIN_TICK_INTERVAL_MS = 100
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _as_int(value, *, default: int) -> int:
    try:
        return int(value)
    except Exception:  # noqa: BLE001
        return int(default)


def _as_level(value, *, default: str) -> str:
    if isinstance(value, str) and value.strip().upper() in LOG_LEVELS:
        return value.strip().upper()
    return default


@dataclass(frozen=True)
class StorageConfig:
    db_path: str = "projtrack.db"
    key: str = "projects"


@dataclass(frozen=True)
class TimerConfig:
    tick_interval_ms: int = 1000


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"

    def numeric_level(self) -> int:
        return getattr(logging, self.level, logging.INFO)


@dataclass(frozen=True)
class AppConfig:
    storage: StorageConfig = field(default_factory=StorageConfig)
    timer: TimerConfig = field(default_factory=TimerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: Path | None) -> tuple[AppConfig, str]:
    """Load app config from a TOML file.

    Returns (config, warning). Warning is empty on success; on any problem
    the defaults are returned with a one-line explanation.
    """

    if path is None or not path.exists():
        return AppConfig(), ""

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except Exception as exc:  # noqa: BLE001
        return AppConfig(), f"{path.name} parse failed: {exc}"

    storage = data.get("storage") if isinstance(data.get("storage"), dict) else {}
    timer = data.get("timer") if isinstance(data.get("timer"), dict) else {}
    logging_ = data.get("logging") if isinstance(data.get("logging"), dict) else {}

    cfg = AppConfig(
        storage=StorageConfig(
            db_path=str(storage.get("db_path") or StorageConfig.db_path),
            key=str(storage.get("key") or StorageConfig.key),
        ),
        timer=TimerConfig(
            tick_interval_ms=max(
                MIN_TICK_INTERVAL_MS,
                _as_int(timer.get("tick_interval_ms"), default=TimerConfig.tick_interval_ms),
            ),
        ),
        logging=LoggingConfig(
            level=_as_level(logging_.get("level"), default=LoggingConfig.level),
        ),
    )
    return cfg, ""
