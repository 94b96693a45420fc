from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from ..print_job import PrintJobBuilder, PrintSettings
from ..profiles import PrinterProfile, PrinterProfileRegistry
from ..transport import RAW_PORT, NetworkConnection, SerialConnection, open_channel
from ..transport.channel import Channel


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="rasterpos: print images on ESC/POS thermal printers over TCP, LPD or serial."
    )
    parser.add_argument("path", nargs="?", help="Image to print (.png/.jpg/.gif/.bmp/.tif)")
    target = parser.add_mutually_exclusive_group()
    target.add_argument("--host", help="Printer or print server host name")
    target.add_argument("--serial", metavar="PATH", help="Serial port path (e.g. /dev/ttyUSB0)")
    target.add_argument("--output", metavar="FILE", help="Write the command stream to a file instead")
    parser.add_argument(
        "--port", type=int, default=RAW_PORT, help="TCP port (515 selects the LPD queue protocol)"
    )
    parser.add_argument("--queue", help="LPD queue name (default: profile queue)")
    parser.add_argument("--timeout", type=float, help="LPD acknowledgment timeout in seconds")
    parser.add_argument("--profile", help="Printer profile name (see --list-profiles)")
    parser.add_argument("--list-profiles", action="store_true", help="List known printer profiles and exit")
    parser.add_argument("--threshold", type=float, help="Luminance threshold between 0 and 1")
    parser.add_argument("--max-width", type=int, help="Maximum printable width in dots")
    parser.add_argument("--no-resize", action="store_true", help="Do not downscale large images")
    parser.add_argument("--no-cut", action="store_true", help="Do not cut the paper after printing")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log protocol details")
    return parser.parse_args(argv)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )


def list_profiles() -> int:
    registry = PrinterProfileRegistry.load()
    for profile in registry.profiles:
        if profile.description:
            print(f"{profile.name}\t{profile.description}")
        else:
            print(profile.name)
    return 0


def build_settings(args: argparse.Namespace) -> PrintSettings:
    settings = PrintSettings(
        max_width=args.max_width,
        threshold=args.threshold,
        resize=not args.no_resize,
    )
    if args.no_cut:
        settings.cut = False
    return settings


def open_target(args: argparse.Namespace, profile: PrinterProfile) -> Channel:
    timeout = args.timeout if args.timeout is not None else profile.ack_timeout
    if args.serial:
        return open_channel(SerialConnection(args.serial).open())
    connection = NetworkConnection.connect(args.host, args.port)
    return open_channel(connection, queue=args.queue or profile.queue, ack_timeout=timeout)


def print_to_file(path: str, chunks: List[bytes]) -> int:
    with open(path, "wb") as handle:
        for chunk in chunks:
            handle.write(chunk)
    return 0


def print_to_channel(args: argparse.Namespace, profile: PrinterProfile, chunks: List[bytes]) -> int:
    channel = open_target(args, profile)
    try:
        for chunk in chunks:
            channel.write(chunk)
    finally:
        channel.close()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)
    if args.list_profiles:
        return list_profiles()
    if not args.path:
        print("Missing image path. Use --help for usage.", file=sys.stderr)
        return 2
    if not (args.host or args.serial or args.output):
        print("Provide one of --host, --serial or --output. Use --help for usage.", file=sys.stderr)
        return 2
    try:
        profile = PrinterProfileRegistry.load().require(args.profile)
        chunks = PrintJobBuilder(profile, build_settings(args)).build_from_file(args.path)
        if args.output:
            return print_to_file(args.output, chunks)
        return print_to_channel(args, profile, chunks)
    except Exception as exc:
        print(str(exc), file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
