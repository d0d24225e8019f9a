"""
Main entrypoint for bountycounter.

What it does:
- Loads settings from `config/config.yaml` (or `--config` / `BOUNTYCOUNTER_CONFIG`).
- Resolves the EVE game logs directory from `--logs-dir`, the environment, the
  config file or, failing those, an interactive prompt; a prompted path is saved.
- Starts the Prometheus metrics server when a port is configured.
- Starts the tail engine on the logs directory and runs the interactive console
  until the user quits.

Where it is used:
- `python -m bountycounter.main` or the `bountycounter` console script.
"""
import argparse
import logging
import os
from typing import Callable, Optional

from prometheus_client import start_http_server

from bountycounter.config.loader import Settings, load_settings, save_settings
from bountycounter.console import Console
from bountycounter.errors import ConfigError, LogsDirectoryError
from bountycounter.submit.client import WorkbenchClient
from bountycounter.tail.engine import TailEngine

DEFAULT_GAMELOGS_HINT = os.path.join("~", "Documents", "EVE", "logs", "Gamelogs")


def prompt_logs_directory(settings: Settings, config_path: Optional[str], input_fn: Callable[[str], str] = input) -> str:
    """Ask until an existing directory is given; persist it to the config file."""
    print(f"No usable logs directory configured (most likely: {DEFAULT_GAMELOGS_HINT}).")
    while True:
        path = os.path.expanduser(input_fn("Enter logs directory path: ").strip())
        if not path:
            print("Path cannot be empty. Please try again.")
            continue
        if not os.path.isdir(path):
            print(f"Directory '{path}' does not exist. Please enter a valid path.")
            continue
        settings.logs_directory = path
        save_settings(settings, config_path)
        logging.info(f"Configuration saved with logs directory {path}")
        return path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bountycounter", description="Count EVE Online bounties from game logs")
    parser.add_argument("--config", default=None, help="Path to config YAML")
    parser.add_argument("--logs-dir", default=None, help="EVE Gamelogs directory (overrides config)")
    parser.add_argument("--prometheus-port", type=int, default=None, help="Expose metrics on this port")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings(args.config) or Settings()
    except ConfigError as e:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
        logging.error(str(e))
        return 2
    logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(message)s")

    logs_dir = args.logs_dir or settings.logs_directory
    if not logs_dir or not os.path.isdir(os.path.expanduser(logs_dir)):
        logs_dir = prompt_logs_directory(settings, args.config)
    logging.info(f"Current logs directory: {logs_dir}")

    prom_port = args.prometheus_port or settings.prometheus_port or int(os.getenv("PROMETHEUS_PORT", "0"))
    if prom_port:
        try:
            start_http_server(prom_port)
            logging.info(f"Prometheus metrics server started on :{prom_port}")
        except OSError as e:
            logging.warning(f"Failed to start Prometheus server on :{prom_port}: {e}")

    try:
        engine = TailEngine(logs_dir)
        console = Console(engine, settings, client=WorkbenchClient(settings.api_base_url), config_path=args.config)
        engine.start()
    except LogsDirectoryError as e:
        logging.error(str(e))
        return 1
    try:
        console.run()
    except KeyboardInterrupt:
        pass
    finally:
        engine.stop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
