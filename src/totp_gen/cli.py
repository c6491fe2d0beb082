"""Command-line interface for totp-gen."""

import argparse
import json
import logging
import sys
from typing import Any, Dict, Optional, Sequence

from totp_gen import config
from totp_gen.base32 import decode_to_hex
from totp_gen.errors import OTPError
from totp_gen.factory import generate_backup_codes, random_base32
from totp_gen.hotp import generate_hotp
from totp_gen.totp import build_url, generate_totp


logger = logging.getLogger(__name__)


def _resolve(args: argparse.Namespace, settings: Dict[str, Any], key: str) -> Any:
    """Command-line value if given, else the configured one."""
    value = getattr(args, key, None)
    return settings[key] if value is None else value


def code_command(args: argparse.Namespace) -> int:
    """Handle the code command."""
    try:
        settings = config.load_config()
        code = generate_totp(
            args.secret,
            _resolve(args, settings, "algorithm"),
            _resolve(args, settings, "period"),
            digits=_resolve(args, settings, "digits"),
            initial_time=args.initial_time,
        )
        print(code)
        return 0
    except (OTPError, config.ConfigError) as e:
        print(f"✗ Failed to generate code: {e}", file=sys.stderr)
        return 1


def hotp_command(args: argparse.Namespace) -> int:
    """Handle the hotp command."""
    try:
        settings = config.load_config()
        code = generate_hotp(
            args.secret,
            args.counter,
            digits=_resolve(args, settings, "digits"),
            algorithm=_resolve(args, settings, "algorithm"),
        )
        print(code)
        return 0
    except (OTPError, config.ConfigError) as e:
        print(f"✗ Failed to generate code: {e}", file=sys.stderr)
        return 1


def secret_command(args: argparse.Namespace) -> int:
    """Handle the secret command."""
    try:
        print(random_base32(args.length))
        return 0
    except OTPError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1


def backup_command(args: argparse.Namespace) -> int:
    """Handle the backup command."""
    try:
        codes = generate_backup_codes(args.count, args.length)
    except OTPError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1
    for code in codes:
        print(code)
    return 0


def url_command(args: argparse.Namespace) -> int:
    """Handle the url command."""
    try:
        settings = config.load_config()
        issuer = _resolve(args, settings, "issuer")
        if issuer is None:
            print(
                "✗ No issuer given. Pass --issuer or run: totp-gen config set issuer <name>",
                file=sys.stderr,
            )
            return 1
        print(
            build_url(
                args.secret,
                args.id,
                issuer,
                algorithm=_resolve(args, settings, "algorithm"),
                digits=_resolve(args, settings, "digits"),
                period=_resolve(args, settings, "period"),
                counter=args.counter,
                initial_time=args.initial_time,
                window=args.window,
            )
        )
        return 0
    except config.ConfigError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1


def hex_command(args: argparse.Namespace) -> int:
    """Handle the hex command."""
    try:
        print(decode_to_hex(args.secret))
        return 0
    except OTPError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1


def config_command(args: argparse.Namespace) -> int:
    """Handle the config command."""
    try:
        if args.config_action == "set":
            config.set_value(args.key, args.value)
            print(f"✓ {args.key} = {args.value}")
        else:
            print(json.dumps(config.load_config(), indent=2))
            print(f"  (file: {config.get_config_path()})")
        return 0
    except config.ConfigError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1


def _add_otp_options(parser: argparse.ArgumentParser, period: bool = True) -> None:
    parser.add_argument(
        "--algorithm",
        "-a",
        default=None,
        help='HMAC hash algorithm (default: "SHA1")',
    )
    parser.add_argument(
        "--digits",
        "-d",
        type=int,
        default=None,
        help="Number of digits in the code (default: 6)",
    )
    if period:
        parser.add_argument(
            "--period",
            "-p",
            type=int,
            default=None,
            help="Time step in seconds (default: 30)",
        )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="totp-gen",
        description="TOTP/HOTP code generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Code command
    code_parser = subparsers.add_parser(
        "code",
        aliases=["now"],
        help="Generate the current TOTP code",
    )
    code_parser.add_argument("secret", help="Base32 secret")
    _add_otp_options(code_parser)
    code_parser.add_argument(
        "--initial-time",
        type=int,
        default=0,
        help="Unix time T0 for time steps (default: 0)",
    )
    code_parser.set_defaults(handler=code_command)

    # HOTP command
    hotp_parser = subparsers.add_parser(
        "hotp",
        help="Generate an HOTP code for a counter",
    )
    hotp_parser.add_argument("secret", help="Base32 secret")
    hotp_parser.add_argument("counter", type=int, help="Counter value")
    _add_otp_options(hotp_parser, period=False)
    hotp_parser.set_defaults(handler=hotp_command)

    # Secret command
    secret_parser = subparsers.add_parser(
        "secret",
        aliases=["new"],
        help="Generate a random base32 secret",
    )
    secret_parser.add_argument(
        "--length",
        "-l",
        type=int,
        default=32,
        help="Number of characters, rounded up to even (default: 32)",
    )
    secret_parser.set_defaults(handler=secret_command)

    # Backup command
    backup_parser = subparsers.add_parser(
        "backup",
        help="Generate one-time backup codes",
    )
    backup_parser.add_argument(
        "--count",
        "-c",
        type=int,
        default=10,
        help="Number of codes (default: 10)",
    )
    backup_parser.add_argument(
        "--length",
        "-l",
        type=int,
        default=10,
        help="Random bytes per code (default: 10)",
    )
    backup_parser.set_defaults(handler=backup_command)

    # URL command
    url_parser = subparsers.add_parser(
        "url",
        aliases=["uri"],
        help="Build an otpauth:// provisioning URL",
    )
    url_parser.add_argument("secret", help="Base32 secret")
    url_parser.add_argument("id", help="Account name shown in the authenticator")
    url_parser.add_argument("--issuer", "-i", default=None, help="Issuer name")
    _add_otp_options(url_parser)
    url_parser.add_argument("--counter", type=int, default=0, help="Initial counter (default: 0)")
    url_parser.add_argument(
        "--initial-time",
        type=int,
        default=0,
        help="Unix time T0 for time steps (default: 0)",
    )
    url_parser.add_argument("--window", type=int, default=1, help="Validation window (default: 1)")
    url_parser.set_defaults(handler=url_command)

    # Hex command
    hex_parser = subparsers.add_parser(
        "hex",
        help="Convert a base32 secret to hexadecimal",
    )
    hex_parser.add_argument("secret", help="Base32 secret")
    hex_parser.set_defaults(handler=hex_command)

    # Config command
    config_parser = subparsers.add_parser(
        "config",
        help="Show or change default settings",
    )
    config_sub = config_parser.add_subparsers(dest="config_action")
    config_sub.add_parser("show", help="Print the current settings")
    set_parser = config_sub.add_parser("set", help="Store a default setting")
    set_parser.add_argument("key", choices=sorted(config.DEFAULTS))
    set_parser.add_argument("value")
    config_parser.set_defaults(handler=config_command, config_action="show")

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not args.command:
        parser.print_help()
        return 1

    logger.debug("Running command %r", args.command)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
