from __future__ import annotations

import argparse
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication
from loguru import logger

from app.viewmodels.board_vm import DEFAULT_REVEAL_DELAY_MS, BoardVM
from app.views.main_window import MainWindow
from app.views.reveal_timer import QtRevealScheduler
from core.models import DEFAULT_NAME
from core.services.door_registry import DEFAULT_MONTH
from infrastructure.image_service import ImageService
from infrastructure.logging import init_logging
from infrastructure.persistence_gateway import PersistenceGateway
from infrastructure.settings import JsonSettings


BASE_DIR = Path(__file__).parent


def _parse_args(argv: list[str]) -> tuple[argparse.Namespace, list[str]]:
    parser = argparse.ArgumentParser(prog="advent-board", description="Advent calendar board")
    parser.add_argument(
        "location",
        nargs="?",
        default=None,
        help="startup location: /<code>, /editmode/<code>, /editmode or a full URL",
    )
    parser.add_argument("--settings", default=str(BASE_DIR / "settings.json"))
    parser.add_argument("--log-dir", default=None)
    # Unknown args are left for Qt (e.g. -platform)
    return parser.parse_known_args(argv)


def _load_settings(path: str) -> JsonSettings:
    try:
        return JsonSettings(path)
    except FileNotFoundError as ex:
        logger.warning("{}; using built-in defaults", ex)
    except ValueError as ex:
        logger.error("settings file is not usable ({}): {}", path, ex)
    return JsonSettings.defaults_only()


def main(argv: list[str] | None = None) -> int:
    args, qt_args = _parse_args(sys.argv[1:] if argv is None else argv)
    settings = _load_settings(args.settings)

    log_dir = args.log_dir or settings.get_str("logging.dir", "") or None
    month = settings.get_int("calendar.default_month", DEFAULT_MONTH)

    log_path = init_logging(log_dir, level=settings.get_str("logging.level", "INFO"))
    logger.info("Advent board starting | logs={} location={!r}", log_path, args.location)

    app = QApplication([sys.argv[0], *qt_args])

    scheduler = QtRevealScheduler()
    vm = BoardVM(
        PersistenceGateway(),
        scheduler,
        reveal_delay_ms=settings.get_int("reveal.delay_ms", DEFAULT_REVEAL_DELAY_MS),
        default_name=settings.get_str("calendar.default_name", DEFAULT_NAME),
        default_month=min(12, max(1, month)),
    )
    vm.load_location(args.location)

    img = ImageService(settings)
    win = MainWindow(vm=vm, image_service=img, scheduler=scheduler, log_dir=log_dir)
    win.show()

    code = app.exec()
    logger.info("Advent board exited with code {}", code)
    return code


def run() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    run()
