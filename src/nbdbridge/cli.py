"""Command-line interface for nbdbridge."""

import argparse
import logging
import sys

from nbdbridge import __version__, trampoline
from nbdbridge.errors import NbdBridgeError
from nbdbridge.logsetup import using_syslog

log = logging.getLogger("nbdbridge")

INFO_FLAGS = {"-h", "--help", "-V", "--version"}


def build_parser() -> argparse.ArgumentParser:
    """Build the parser used for --help, --version and usage text.

    The real command line is translated by nbdbridge.translate, since any
    s3backer plugin flag may appear among the options.
    """
    parser = argparse.ArgumentParser(
        prog="nbdbridge",
        description="Attach an s3backer bucket to a network block device via nbdkit and nbd-client",
        epilog="Any other --flag[=value] is passed to the s3backer nbdkit plugin as s3b_flag=value.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("-f", action="store_true", help="Run in the foreground")
    parser.add_argument("-d", action="store_true", help="Enable debug logging (implies -f)")
    parser.add_argument("--nbd", action="store_true", help="Accepted for compatibility; ignored")
    parser.add_argument(
        "--nbd-flag",
        metavar="FLAG",
        action="append",
        help="Extra nbdkit flag, inserted before the plugin name",
    )
    parser.add_argument(
        "--nbd-param",
        metavar="PARAM",
        action="append",
        help="Extra nbdkit parameter, appended after the bucket parameter",
    )
    parser.add_argument(
        "--nbd-client-flag",
        metavar="FLAG",
        action="append",
        help="Extra nbd-client flag, inserted before the device",
    )
    parser.add_argument("bucket", metavar="bucket[/subdir]", help="Bucket to serve")
    parser.add_argument("device", help="NBD device node, for example /dev/nbd0")
    return parser


def _leading_flags(args: list[str]) -> list[str]:
    flags = []
    for arg in args:
        if not arg.startswith("-") or arg == "--":
            break
        flags.append(arg)
    return flags


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()

    info = [arg for arg in _leading_flags(args) if arg in INFO_FLAGS]
    if info:
        parser.parse_args(info[:1])

    try:
        status = trampoline.run(args)
    except NbdBridgeError as e:
        if using_syslog():
            log.error("%s", e)
        else:
            print(f"Error: {e}", file=sys.stderr)
        return 1

    if status == trampoline.EXIT_USAGE:
        parser.print_usage(sys.stderr)
        return 1
    return status


def entrypoint() -> None:
    raise SystemExit(main())
