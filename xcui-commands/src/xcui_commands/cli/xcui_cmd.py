from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple

from xcui_commands.commands import CommandDispatcher, GeneralCommands
from xcui_commands.config import CommandsConfig, load_config
from xcui_commands.context import DriverContext, ScreenInfoCache
from xcui_commands.errors import XcuiCommandError
from xcui_commands.remote.proxy import WdaProxy
from xcui_commands.runtime.device_time import IdeviceinfoTimeProvider
from xcui_commands.runtime.process import AsyncProcessRunner

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xcui-cmd",
        description="Run a single device command against a WebDriverAgent endpoint.",
    )
    parser.add_argument("--config", type=Path, default=None, help="YAML/JSON config file.")
    parser.add_argument("--wda-url", default=None, help="Base URL of the automation endpoint.")
    parser.add_argument("--session-id", default=None, help="Existing session id.")
    parser.add_argument("--udid", default=None, help="Device/simulator UDID.")
    parser.add_argument(
        "--real-device",
        action="store_true",
        default=None,
        help="Target a physical device instead of a simulator.",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: INFO).")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("device-time", help="Print the device date and time.")
    p.add_argument("--format", default=None, help="moment-style pattern.")

    sub.add_parser("window-rect", help="Print the window rect.")
    sub.add_parser("viewport-rect", help="Print the viewport rect in device pixels.")
    sub.add_parser("screen-info", help="Print the raw screen info.")

    p = sub.add_parser("background", help="Send the app to the background.")
    group = p.add_mutually_exclusive_group()
    group.add_argument("--seconds", type=float, default=None)
    group.add_argument("--timeout-ms", type=float, default=None)

    p = sub.add_parser("press-button", help="Press a hardware button.")
    p.add_argument("name")
    p.add_argument("--duration", type=float, default=None, help="Press duration in seconds.")

    p = sub.add_parser("siri", help="Send a voice command to Siri.")
    p.add_argument("text")
    return parser


def command_from_args(args: argparse.Namespace) -> Tuple[str, Dict[str, Any]]:
    if args.command == "device-time":
        return "mobile: getDeviceTime", {"format": args.format}
    if args.command == "window-rect":
        return "getWindowRect", {}
    if args.command == "viewport-rect":
        return "getViewportRect", {}
    if args.command == "screen-info":
        return "getScreenInfo", {}
    if args.command == "background":
        if args.timeout_ms is not None:
            return "background", {"timeout": args.timeout_ms}
        return "background", {"seconds": args.seconds}
    if args.command == "press-button":
        return "mobile: pressButton", {"name": args.name, "durationSeconds": args.duration}
    if args.command == "siri":
        return "mobile: siriCommand", {"text": args.text}
    raise ValueError(f"unexpected command: {args.command}")


def config_from_args(args: argparse.Namespace) -> CommandsConfig:
    cfg = load_config(args.config)
    overrides: Dict[str, Any] = {}
    if args.wda_url:
        overrides["wda_url"] = args.wda_url
    if args.session_id:
        overrides["session_id"] = args.session_id
    if args.udid:
        overrides["udid"] = args.udid
    if args.real_device:
        overrides["real_device"] = True
    if args.log_level:
        overrides["log_level"] = args.log_level.upper()
    return replace(cfg, **overrides)


async def run_command(
    cfg: CommandsConfig, name: str, cmd_args: Dict[str, Any], *, proxy: Optional[Any] = None
) -> Any:
    runner = AsyncProcessRunner(timeout_s=cfg.command_timeout_s)
    owned = proxy is None
    if proxy is None:
        proxy = WdaProxy(
            cfg.wda_url, session_id=cfg.session_id, timeout_s=cfg.command_timeout_s
        )
    ctx = DriverContext(
        proxy=ScreenInfoCache(proxy),
        process_runner=runner,
        device_time_provider=IdeviceinfoTimeProvider(runner) if cfg.real_device else None,
        udid=cfg.udid,
        real_device=cfg.real_device,
    )
    try:
        return await CommandDispatcher(GeneralCommands(ctx)).execute(name, cmd_args)
    finally:
        if owned:
            await proxy.aclose()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        cfg = config_from_args(args)
    except (XcuiCommandError, FileNotFoundError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=getattr(logging, cfg.log_level, logging.INFO),
        format="[%(levelname)s] %(name)s: %(message)s",
    )

    name, cmd_args = command_from_args(args)
    try:
        result = asyncio.run(run_command(cfg, name, cmd_args))
    except XcuiCommandError as e:
        logger.debug("command %s failed", name, exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result, ensure_ascii=False, indent=2, default=str))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
