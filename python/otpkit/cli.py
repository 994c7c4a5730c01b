#!/usr/bin/env python3
"""
otpkit CLI - Command-line interface for one-time passwords.

Usage:
    otpkit new --account ACCOUNT [--issuer ISSUER] [--hotp] [--length LENGTH]
    otpkit uri --account ACCOUNT --secret SECRET [--issuer ISSUER] [...]
    otpkit code <uri> [--sync]
    otpkit check <uri> <code> [--window N] [--sync]
    otpkit remaining <uri>
    otpkit sync [--url URL]
    otpkit qr <uri> -o OUTPUT

Examples:
    # Enroll a new account
    otpkit new --account user@example.com --issuer Example

    # Current code for a key URI
    otpkit code "otpauth://totp/Example%3Auser?secret=JBSWY3DPEHPK3PXP&issuer=Example"

    # Accept codes one period early or late
    otpkit check "otpauth://totp/user?secret=JBSWY3DPEHPK3PXP" 123456 --window 1
"""

import argparse
import logging
import math
import os
import sys
from typing import Optional

from otpkit import __version__
from otpkit.drift import DEFAULT_DRIFT
from otpkit.errors import OTPError
from otpkit.generator import generate_from_key, time_remaining
from otpkit.key import DEFAULT_DIGITS, DEFAULT_PERIOD, AuthType, OtpKey
from otpkit.timesync import DEFAULT_SYNC_TIMEOUT, DEFAULT_TIME_URL, sync_time
from otpkit.uri import DEFAULT_SECRET_LENGTH, from_uri, generate_random_secret, to_uri
from otpkit.validator import check


def _time_url() -> str:
    return os.environ.get("OTPKIT_TIME_URL", DEFAULT_TIME_URL)


def _window(value: str) -> int:
    window = int(value)
    if window < 0:
        raise argparse.ArgumentTypeError(f"window must be non-negative, got {window}")
    return window


def cmd_new(args: argparse.Namespace) -> int:
    """Create a key with a random secret."""
    key = OtpKey(
        account=args.account,
        secret=generate_random_secret(args.length),
        auth_type=AuthType.HOTP if args.hotp else AuthType.TOTP,
        issuer=args.issuer,
        algorithm=args.algorithm,
        digits=args.digits,
        period=args.period,
    )

    print("Secret (Base32):", key.secret)
    print()
    print("Key URI:", to_uri(key))
    print()
    print("Add this secret to your authenticator app (Google Authenticator, Authy, etc.)")
    return 0


def cmd_uri(args: argparse.Namespace) -> int:
    """Build a key URI from its fields."""
    key = OtpKey(
        account=args.account,
        secret=args.secret,
        auth_type=AuthType.HOTP if args.hotp else AuthType.TOTP,
        issuer=args.issuer,
        algorithm=args.algorithm,
        digits=args.digits,
        counter=args.counter,
        period=args.period,
    )
    print(to_uri(key))
    return 0


def cmd_code(args: argparse.Namespace) -> int:
    """Print the current code for a key URI."""
    key = from_uri(args.uri)
    if args.sync:
        sync_time(url=_time_url())
    print(generate_from_key(key))
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Check a code against a key URI."""
    key = from_uri(args.uri)
    if args.sync:
        sync_time(url=_time_url())
    if check(key, args.code, args.window):
        print("valid")
        return 0
    print("invalid")
    return 1


def cmd_remaining(args: argparse.Namespace) -> int:
    """Print seconds until the TOTP code changes."""
    key = from_uri(args.uri)
    print(math.ceil(time_remaining(key)))
    return 0


def cmd_sync(args: argparse.Namespace) -> int:
    """Measure the local clock offset."""
    if not sync_time(url=args.url or _time_url(), timeout=args.timeout):
        print("Error: Time sync failed", file=sys.stderr)
        return 1
    print(f"Clock offset: {DEFAULT_DRIFT.offset:+.3f}s")
    return 0


def cmd_qr(args: argparse.Namespace) -> int:
    """Write a QR code for a key URI."""
    from otpkit.qr import render_png, render_svg

    key = from_uri(args.uri)
    if args.output.lower().endswith(".svg"):
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(render_svg(key))
    else:
        with open(args.output, "wb") as f:
            f.write(render_png(key))
    print(f"QR code written to {args.output}")
    return 0


def _add_key_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--account", required=True, help="Account identifier")
    parser.add_argument("--issuer", help="Service name")
    parser.add_argument("--hotp", action="store_true", help="Counter-based key (default: TOTP)")
    parser.add_argument("--algorithm", default="SHA1", help="SHA1, SHA256 or SHA512")
    parser.add_argument("--digits", type=int, default=DEFAULT_DIGITS, help="Code length")
    parser.add_argument("--period", type=int, default=DEFAULT_PERIOD, help="TOTP step in seconds")


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="otpkit",
        description="otpkit - TOTP/HOTP codes and key URIs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"otpkit {__version__}"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log time sync details")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # new command
    new_parser = subparsers.add_parser("new", help="Create a key with a random secret")
    _add_key_options(new_parser)
    new_parser.add_argument(
        "--length", type=int, default=DEFAULT_SECRET_LENGTH, help="Secret length in Base32 characters"
    )

    # uri command
    uri_parser = subparsers.add_parser("uri", help="Build a key URI")
    _add_key_options(uri_parser)
    uri_parser.add_argument("--secret", required=True, help="Base32 secret")
    uri_parser.add_argument("--counter", type=int, default=0, help="HOTP counter")

    # code command
    code_parser = subparsers.add_parser("code", help="Print the current code")
    code_parser.add_argument("uri", help="otpauth:// key URI")
    code_parser.add_argument("--sync", action="store_true", help="Sync clock first")

    # check command
    check_parser = subparsers.add_parser("check", help="Check a code")
    check_parser.add_argument("uri", help="otpauth:// key URI")
    check_parser.add_argument("code", help="Code to check")
    check_parser.add_argument("--window", type=_window, default=0, help="Sliding window")
    check_parser.add_argument("--sync", action="store_true", help="Sync clock first")

    # remaining command
    remaining_parser = subparsers.add_parser("remaining", help="Seconds until the code changes")
    remaining_parser.add_argument("uri", help="otpauth:// key URI")

    # sync command
    sync_parser = subparsers.add_parser("sync", help="Measure local clock offset")
    sync_parser.add_argument("--url", help="Time server (default: $OTPKIT_TIME_URL or google.com)")
    sync_parser.add_argument("--timeout", type=float, default=DEFAULT_SYNC_TIMEOUT, help="Timeout in seconds")

    # qr command
    qr_parser = subparsers.add_parser("qr", help="Write a QR code (PNG or SVG)")
    qr_parser.add_argument("uri", help="otpauth:// key URI")
    qr_parser.add_argument("-o", "--output", required=True, help="Output file (.png or .svg)")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.ERROR,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 0

    commands = {
        "new": cmd_new,
        "uri": cmd_uri,
        "code": cmd_code,
        "check": cmd_check,
        "remaining": cmd_remaining,
        "sync": cmd_sync,
        "qr": cmd_qr,
    }

    try:
        return commands[args.command](args)
    except OTPError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
