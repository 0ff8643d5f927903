#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import argparse
import asyncio
import logging
from pathlib import Path

from projtrack.config import LOG_LEVELS, AppConfig, LoggingConfig, load_config
from projtrack.services.project_service import ProjectService
from projtrack.services.stats_service import StatsService
from projtrack.services.timer_service import TimerService
from projtrack.storage.db import Database
from projtrack.storage.gateway import MemoryKeyValueStore, ProjectGateway, SqliteKeyValueStore
from projtrack.storage.repos import AppStateRepo

logger = logging.getLogger("projtrack")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="projtrack", description="Personal projects, tasks and time tracking."
    )
    parser.add_argument("--config", type=Path, default=Path("projtrack.toml"), help="TOML config file")
    parser.add_argument("--db", help="SQLite file (overrides [storage].db_path)")
    parser.add_argument("--memory", action="store_true", help="keep everything in memory")
    parser.add_argument("--log-level", choices=LOG_LEVELS, help="overrides [logging].level")
    return parser


def log_level(args: argparse.Namespace, config: AppConfig) -> int:
    # --log-level wins over [logging].level
    log_config = LoggingConfig(level=args.log_level) if args.log_level else config.logging
    return log_config.numeric_level()


def main(argv=None):
    args = build_parser().parse_args(argv)
    config, warning = load_config(args.config)

    logging.basicConfig(
        level=log_level(args, config),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if warning:
        logger.warning(warning)

    db = None
    if args.memory:
        store = MemoryKeyValueStore()
    else:
        db = Database(db_path=args.db or config.storage.db_path)
        db.init_schema()
        store = SqliteKeyValueStore(AppStateRepo(db))

    timer_service = TimerService(ProjectGateway(store, key=config.storage.key))
    asyncio.run(timer_service.load())

    # Tk needs a display; keep it out of --help
    from projtrack.ui.main_window import MainWindow

    app = MainWindow(
        timer_service,
        ProjectService(),
        StatsService(),
        tick_interval_ms=config.timer.tick_interval_ms,
    )
    try:
        app.run()
    finally:
        if db is not None:
            db.close()


if __name__ == "__main__":
    main()
