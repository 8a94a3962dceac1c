from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from browser_testing.app.configuration import get_driver_settings, load_runtime_config
from browser_testing.app.settings import DriverSettings
from browser_testing.automation.driver import (
    AutomationError,
    InvalidURLError,
    SeleniumDriver,
    available_clients,
    resolve_capabilities,
)

logger = logging.getLogger("browser_testing.cli")

_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="browser-testing", description="Remote browser session tools")
    parser.add_argument("--config", type=Path, help="INI file with [driver:<name>] sections")
    parser.add_argument("--driver", default="selenium", help="Driver name used to look up configuration")
    parser.add_argument("--log-file", type=Path, help="Also write logs to this file (rotated at 1 MiB)")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    caps_parser = subparsers.add_parser("capabilities", help="Print the capability document a new session would use")
    caps_parser.add_argument("--capabilities", type=_json_object, help="Explicit capability document (JSON object)")
    caps_parser.add_argument("--metadata", help="Text appended to the default user agent")

    probe_parser = subparsers.add_parser("probe", help="Start a session, inspect the page and end the session")
    probe_parser.add_argument("--remote-url", help="Base URL of the remote end, e.g. http://localhost:4444/wd/hub/")
    probe_parser.add_argument("--client", choices=sorted(available_clients()), help="Wire protocol to speak")
    probe_parser.add_argument("--capabilities", type=_json_object, help="Explicit capability document (JSON object)")
    probe_parser.add_argument("--metadata", help="Text appended to the default user agent")
    probe_parser.add_argument("--window-size", type=_window_size, help="Window size as WIDTHxHEIGHT")
    probe_parser.add_argument("--visit", help="URL to open before inspecting the page")
    probe_parser.add_argument("--screenshot", type=Path, help="Directory to save a screenshot into")

    settings_parser = subparsers.add_parser("settings", help="Print the effective driver settings")
    settings_parser.add_argument("--save", type=Path, help="Also write the settings to this JSON file")

    args = parser.parse_args(argv)

    _setup_logging(args.verbose, args.log_file)

    settings = get_driver_settings(args.driver)
    if args.config is not None:
        runtime_cfg = load_runtime_config(config_path=args.config, driver=args.driver)
        logger.debug("Loaded runtime config overrides: %s", runtime_cfg)
        runtime_cfg.apply_to_settings(settings)

    if args.command == "capabilities":
        return _handle_capabilities(args, settings.capabilities)
    if args.command == "probe":
        return _handle_probe(args)
    if args.command == "settings":
        return _handle_settings(args, settings)
    parser.print_help()
    return 1


def _setup_logging(verbose: bool, log_file: Optional[Path]) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format=_LOG_FORMAT)
    if log_file is None:
        return
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(log_file, maxBytes=1_048_576, backupCount=3, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logging.getLogger().addHandler(file_handler)
    except OSError:
        logger.exception("Failed to initialize file logging")


def _handle_capabilities(args: argparse.Namespace, configured: Optional[Dict[str, Any]]) -> int:
    document = resolve_capabilities(args.capabilities, configured, args.metadata)
    print(json.dumps(document, indent=2, sort_keys=True))
    return 0


def _handle_settings(args: argparse.Namespace, settings: DriverSettings) -> int:
    print(json.dumps(asdict(settings), indent=2, sort_keys=True))
    if args.save is not None:
        settings.save(args.save)
        logger.info("Saved settings to %s", args.save)
    return 0


def _handle_probe(args: argparse.Namespace) -> int:
    driver = SeleniumDriver(args.driver)
    try:
        session = driver.start_session(
            remote_url=args.remote_url,
            client=args.client,
            capabilities=args.capabilities,
            window_size=args.window_size,
            metadata=args.metadata,
        )
    except AutomationError as exc:
        logger.error("Unable to start session: %s", exc)
        return 2

    logger.info("Started session %s", session.id)
    try:
        if args.visit:
            driver.visit(session, args.visit)
        print(f"url\t{driver.current_url(session)}")
        print(f"title\t{driver.page_title(session)}")
        if not driver.blank_page(session):
            try:
                print(f"path\t{driver.current_path(session)}")
            except InvalidURLError:
                logger.info("Current URL has no path component")
        if args.screenshot is not None:
            path = driver.save_screenshot(session, args.screenshot)
            print(f"screenshot\t{path}")
    except AutomationError as exc:
        logger.error("Probe failed: %s", exc)
        return 3
    finally:
        driver.end_session(session)
    return 0


def _json_object(raw: str) -> Dict[str, Any]:
    try:
        value = json.loads(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid JSON: {exc}") from exc
    if not isinstance(value, dict):
        raise argparse.ArgumentTypeError("expected a JSON object")
    return value


def _window_size(raw: str) -> Dict[str, int]:
    width, sep, height = raw.lower().partition("x")
    try:
        if not sep:
            raise ValueError(raw)
        return {"width": int(width), "height": int(height)}
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected WIDTHxHEIGHT, got {raw!r}") from None


if __name__ == "__main__":
    sys.exit(main())
