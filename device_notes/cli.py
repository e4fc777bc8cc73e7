"""Command line entry point.

Usage:
    device-notes VM-1874-39
    device-notes VM-1874-39 "Laddstation: 99"
    device-notes VM-1874-39 "Laddstation: 99" --what-if -v
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Optional, Sequence

import requests
from pydantic import ValidationError

from device_notes import __version__
from device_notes.console import ask, confirm, is_interactive
from device_notes.controller import NotesController, format_outcome
from device_notes.core.config import Settings, get_settings
from device_notes.core.errors import DeviceLookupError, DeviceNotesError
from device_notes.services.auth import GraphSession, TokenProvider
from device_notes.services.devices import DeviceService
from device_notes.services.graph_client import GraphClient

logger = logging.getLogger("device_notes")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="device-notes",
        description="Show or set the notes field of a managed device.",
    )
    parser.add_argument("device_name", nargs="?", metavar="DeviceName", help="Display name of the device")
    parser.add_argument("notes", nargs="?", metavar="Notes", help="New note; omit to show the current one")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log each step to stderr")
    parser.add_argument("--what-if", action="store_true", help="Show what would change without writing")
    parser.add_argument(
        "--auth-flow",
        choices=["client_credentials", "device_code"],
        help="Sign-in flow (default: DEVICE_NOTES_AUTH_FLOW or client_credentials)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def acquire_session(settings: Settings) -> GraphSession:
    with requests.Session() as http:
        return TokenProvider(settings, http=http).acquire_session()


def run(
    args: argparse.Namespace,
    settings: Settings,
    session_factory: Optional[Callable[[Settings], GraphSession]] = None,
    confirm_fn: Callable[[str], bool] = confirm,
) -> str:
    device_name = args.device_name
    if not device_name and is_interactive():
        device_name = ask("DeviceName: ")
    if not device_name:
        raise DeviceLookupError("a device name is required")

    session = (session_factory or acquire_session)(settings)
    with GraphClient(session, settings) as client:
        controller = NotesController(DeviceService(client, settings), confirm_fn, what_if=args.what_if)
        outcome = controller.run(device_name, args.notes)
    return format_outcome(outcome)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    try:
        settings = get_settings()
        if args.auth_flow:
            settings = settings.model_copy(update={"auth_flow": args.auth_flow})
        print(run(args, settings))
    except KeyboardInterrupt:
        print("aborted", file=sys.stderr)
        return 130
    except ValidationError as exc:
        print(f"error: invalid configuration: {exc}", file=sys.stderr)
        return 1
    except DeviceNotesError as exc:
        logger.debug("run failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
