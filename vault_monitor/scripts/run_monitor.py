"""
Run the vault growth monitor.
"""
from __future__ import annotations

import argparse
import signal
import sys
import threading
from pathlib import Path
from typing import List, Optional

import yaml
from dotenv import load_dotenv
from loguru import logger
from pydantic import ValidationError

try:
    # When executed as a module: python -m vault_monitor.scripts.run_monitor
    from ..controllers.monitor_controller import MonitorConfig, VaultMonitorController
except ImportError:
    # When executed directly: python vault_monitor/scripts/run_monitor.py
    current_file = Path(__file__).resolve()
    package_root = current_file.parent.parent  # vault_monitor/
    repo_root = package_root.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))
    from vault_monitor.controllers.monitor_controller import MonitorConfig, VaultMonitorController

LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Vault growth monitor")
    parser.add_argument("--config", type=str, help="Optional YAML file overriding environment settings")
    parser.add_argument("--once", action="store_true", help="Run a single monitoring cycle and exit")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default="INFO",
        choices=LOG_LEVELS,
        help="Console log level",
    )
    parser.add_argument("--log-dir", type=str, default="logs", help="Directory for the rotating file log")
    parser.add_argument("--no-file-log", action="store_true", help="Disable the rotating file log")
    return parser.parse_args(argv)


def configure_logging(level: str, file_log: bool, log_dir: str = "logs") -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())
    if not file_log:
        return
    try:
        # Relative directories resolve against the working directory
        logs_dir = Path(log_dir).expanduser()
        logs_dir.mkdir(parents=True, exist_ok=True)
        log_path = logs_dir / "monitor.log"
        logger.add(
            str(log_path),
            rotation="10 MB",
            retention="10 days",
            compression="zip",
            enqueue=True,
            backtrace=False,
            diagnose=False,
            level="DEBUG",
        )
        logger.info("File logging enabled: {}", log_path)
    except OSError as e:
        logger.warning("Failed to configure file logging: {}", e)


def load_config(path: Optional[str]) -> MonitorConfig:
    config = MonitorConfig.from_env()
    if not path:
        return config
    cfg_path = Path(path)
    if not cfg_path.exists():
        raise SystemExit(f"Config not found: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise SystemExit(f"Config must be a mapping: {cfg_path}")
    try:
        return config.with_overrides(data)
    except ValidationError as e:
        raise SystemExit(f"Invalid config {cfg_path}: {e}")


def install_signal_handlers(stop_event: threading.Event) -> None:
    def _handle(signum, _frame) -> None:
        logger.info("Received signal {}; stopping after the current cycle", signum)
        stop_event.set()

    signal.signal(signal.SIGINT, _handle)
    signal.signal(signal.SIGTERM, _handle)


def main(argv: Optional[List[str]] = None) -> int:
    # Load environment variables from .env if present
    load_dotenv()
    args = parse_args(argv)
    configure_logging(args.log_level, not args.no_file_log, args.log_dir)

    config = load_config(args.config)
    controller = VaultMonitorController(config)
    controller.start()

    try:
        if args.once:
            controller.run_cycle()
        else:
            stop_event = threading.Event()
            install_signal_handlers(stop_event)
            logger.info("Monitor running. Press Ctrl+C to stop.")
            controller.run(stop_event)
    finally:
        controller.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
