#!/usr/bin/env python3
"""
chatsignal CLI - Main entry point.

Usage:
    chatsignal init                                          # Write default chatsignal.yaml
    chatsignal listen --endpoint URL --token TOKEN           # Print events as JSON lines
    chatsignal listen --endpoint URL --token TOKEN --events participantsAdded,participantsRemoved
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional, TextIO

from pydantic import BaseModel

from ..client import ChatNotificationClient
from ..core.credential import StaticTokenCredential
from ..core.errors import ChatSignalError
from ..core.events import DOMAIN_EVENTS, LIFECYCLE_EVENTS, EventKind
from ..core.options import DEFAULT_CONFIG_PATH, ClientOptions, load_options


def format_event(kind: EventKind, payload: Any = None) -> str:
    """Render one event as a JSON line."""
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="json", by_alias=True)
    return json.dumps({"event": kind.value, "payload": payload}, default=str, ensure_ascii=False)


def parse_events(value: Optional[str]) -> list[EventKind]:
    """Parse a comma-separated event list; all chat events when empty."""
    if not value:
        return sorted(DOMAIN_EVENTS, key=lambda kind: kind.value)
    return [EventKind.parse(name.strip()) for name in value.split(",") if name.strip()]


def cmd_init(args: argparse.Namespace) -> int:
    """Write a default configuration file."""
    config_path = Path(args.config)

    if config_path.exists() and not args.force:
        print(f"Error: {config_path} already exists. Use --force to overwrite.")
        return 1

    options = ClientOptions(redis_url=args.redis_url or "redis://localhost:6379")
    options.save(config_path)
    print(f"Created {config_path}")
    return 0


async def listen(
    client: ChatNotificationClient,
    events: list[EventKind],
    out: TextIO,
    stop_event: Optional[asyncio.Event] = None,
) -> None:
    """Start notifications and write every received event to out until stop_event is set."""
    def writer(kind: EventKind):
        def write(*args: Any) -> None:
            out.write(format_event(kind, *args) + "\n")
            out.flush()
        return write

    for kind in LIFECYCLE_EVENTS:
        client.on(kind, writer(kind))

    await client.start_realtime_notifications()
    try:
        for kind in events:
            if kind.is_domain:
                client.on(kind, writer(kind))
        await (stop_event or asyncio.Event()).wait()
    finally:
        await client.stop_realtime_notifications()


def cmd_listen(args: argparse.Namespace) -> int:
    """Listen for realtime chat events."""
    try:
        options = load_options(args.config) or ClientOptions()
        if args.redis_url:
            options.redis_url = args.redis_url
        events = parse_events(args.events)
        client = ChatNotificationClient(args.endpoint, StaticTokenCredential(args.token), options)
    except (ChatSignalError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    if not client.realtime_supported:
        print("Error: realtime notifications are not supported (configure redis_url)")
        return 1

    try:
        asyncio.run(listen(client, events, sys.stdout))
    except KeyboardInterrupt:
        pass
    except Exception as e:
        print(f"Error: {e}")
        return 1
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="chatsignal",
        description="chatsignal - realtime chat notification client"
    )
    parser.add_argument("--version", action="version", version="%(prog)s 0.1.0")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # init
    init_parser = subparsers.add_parser("init", help="Write default chatsignal.yaml")
    init_parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Config file path")
    init_parser.add_argument("--redis-url", help="Redis URL of the notification gateway")
    init_parser.add_argument("--force", "-f", action="store_true", help="Overwrite existing config")

    # listen
    listen_parser = subparsers.add_parser("listen", help="Print realtime events as JSON lines")
    listen_parser.add_argument("--endpoint", required=True, help="Communication resource endpoint")
    listen_parser.add_argument("--token", required=True, help="Access token")
    listen_parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Config file path")
    listen_parser.add_argument("--redis-url", help="Redis URL (overrides config)")
    listen_parser.add_argument("--events", help="Comma-separated event names (default: all chat events)")

    return parser


def app(args: Optional[List[str]] = None) -> int:
    """Main CLI application."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    logging.basicConfig(
        level=getattr(logging, str(parsed.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not parsed.command:
        parser.print_help()
        return 0

    commands = {
        "init": cmd_init,
        "listen": cmd_listen,
    }

    handler = commands.get(parsed.command)
    if handler:
        return handler(parsed)

    parser.print_help()
    return 1


def main() -> None:
    """Entry point for CLI."""
    sys.exit(app())


if __name__ == "__main__":
    main()
