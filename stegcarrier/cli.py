#!/usr/bin/env python3
"""
Stegcarrier Command Line Interface

Hide passphrase-protected secrets in images, WAV audio and video files,
and recover them again.

Usage:
    stegcarrier embed [OPTIONS]
    stegcarrier extract [OPTIONS]
    stegcarrier capacity [OPTIONS]
    stegcarrier info
    stegcarrier --version
    stegcarrier --help
"""

import argparse
import getpass
import json
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import DEFAULT_SETTINGS, MIN_KDF_ITERATIONS
from .envelope import CarrierKind, SecretEnvelope
from .errors import InvalidCarrier, StegCarrierError
from .media import SUPPORTED_FORMATS, detect_carrier_kind, is_supported_carrier, suggest_output
from .secret import Secret, SecretKind, TextSecret

logger = logging.getLogger(__name__)

KIND_CHOICES = ["auto"] + [kind.value for kind in CarrierKind]
SECRET_FILE_KINDS = [kind.value for kind in SecretKind if kind is not SecretKind.TEXT]


class StegCarrierCLI:
    """Main CLI application for stegcarrier."""

    def run(self, args: List[str]) -> int:
        """Run the CLI with given arguments."""
        parser = self.create_parser()
        parsed = parser.parse_args(args)

        logging.basicConfig(
            level=logging.DEBUG if parsed.verbose else logging.WARNING,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        )

        if hasattr(parsed, "func"):
            try:
                return parsed.func(parsed)
            except (StegCarrierError, ValueError, OSError) as e:
                message = e.message if isinstance(e, StegCarrierError) else str(e)
                logger.debug(f"Command {parsed.command} failed: {e!r}")
                print(f"Error: {message}", file=sys.stderr)
                return 1
        else:
            parser.print_help()
            return 0

    def create_parser(self) -> argparse.ArgumentParser:
        """Create the argument parser."""
        parser = argparse.ArgumentParser(
            prog="stegcarrier",
            description="Hide encrypted secrets in image, audio and video carriers",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
    stegcarrier embed --carrier photo.png --text "meet at noon" --output out.png
    stegcarrier embed --carrier song.wav --file scan.png --secret-kind image
    stegcarrier extract --carrier out.png
    stegcarrier capacity --carrier photo.png
    stegcarrier info
            """
        )

        parser.add_argument(
            "--version",
            action="version",
            version=f"stegcarrier v{__version__}"
        )
        parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

        subparsers = parser.add_subparsers(title="commands", dest="command")

        self.add_embed_command(subparsers)
        self.add_extract_command(subparsers)
        self.add_capacity_command(subparsers)
        self.add_info_command(subparsers)

        return parser

    @staticmethod
    def _add_carrier_arguments(cmd) -> None:
        cmd.add_argument("--carrier", "-c", required=True, help="Carrier file")
        cmd.add_argument("--kind", "-k", default="auto", choices=KIND_CHOICES,
                         help="Carrier type (default: detect from extension)")

    @staticmethod
    def _add_key_arguments(cmd) -> None:
        cmd.add_argument("--passphrase", "-p",
                         help="Passphrase (prompted for when omitted)")
        cmd.add_argument("--iterations", type=int, default=DEFAULT_SETTINGS.kdf_iterations,
                         help=f"PBKDF2 iterations, at least {MIN_KDF_ITERATIONS} "
                              f"(default: {DEFAULT_SETTINGS.kdf_iterations})")

    def add_embed_command(self, subparsers):
        """Add embed command to parser."""
        cmd = subparsers.add_parser("embed", help="Hide a secret in a carrier")
        self._add_carrier_arguments(cmd)
        secret = cmd.add_mutually_exclusive_group(required=True)
        secret.add_argument("--text", "-t", help="Text message to hide")
        secret.add_argument("--file", "-f", help="File to hide")
        cmd.add_argument("--secret-kind", choices=SECRET_FILE_KINDS,
                         help="Type of the file given with --file")
        cmd.add_argument("--output", "-o", help="Output file (default: embedded_<carrier name>)")
        self._add_key_arguments(cmd)
        cmd.set_defaults(func=self.handle_embed)

    def add_extract_command(self, subparsers):
        """Add extract command to parser."""
        cmd = subparsers.add_parser("extract", help="Recover a secret from a carrier")
        self._add_carrier_arguments(cmd)
        cmd.add_argument("--output", "-o",
                         help="Where to write a file secret (default: extracted_<type>.<ext>)")
        self._add_key_arguments(cmd)
        cmd.set_defaults(func=self.handle_extract)

    def add_capacity_command(self, subparsers):
        """Add capacity command to parser."""
        cmd = subparsers.add_parser("capacity", help="Show how much a carrier can hold")
        self._add_carrier_arguments(cmd)
        cmd.set_defaults(func=self.handle_capacity)

    def add_info_command(self, subparsers):
        """Add info command to parser."""
        cmd = subparsers.add_parser("info", help="List supported formats")
        cmd.add_argument("--json", action="store_true", help="Output as JSON")
        cmd.set_defaults(func=self.handle_info)

    # Helpers

    @staticmethod
    def _resolve_kind(args) -> CarrierKind:
        if args.kind != "auto":
            kind = CarrierKind.parse(args.kind)
            if not is_supported_carrier(args.carrier, kind):
                logger.warning(f"{args.carrier} does not have a typical {kind.value} extension")
            return kind
        kind = detect_carrier_kind(args.carrier)
        if kind is None:
            raise InvalidCarrier(
                f"Cannot detect carrier type of {args.carrier}; use --kind image|audio|video"
            )
        return kind

    @staticmethod
    def _passphrase(args, confirm: bool = False) -> str:
        if args.passphrase is not None:
            return args.passphrase
        passphrase = getpass.getpass("Passphrase: ")
        if confirm and passphrase != getpass.getpass("Repeat passphrase: "):
            raise ValueError("Passphrases do not match")
        return passphrase

    @staticmethod
    def _build_secret(args) -> Secret:
        timestamp = int(time.time())
        if args.text is not None:
            content = args.text.encode("utf-8")
            return TextSecret(content=content, size=len(content), timestamp=timestamp)
        if args.secret_kind is None:
            raise ValueError("--secret-kind is required with --file")
        content = Path(args.file).read_bytes()
        return Secret.create(args.secret_kind, content, size=len(content), timestamp=timestamp)

    # Command handlers

    def handle_embed(self, args):
        """Handle embed command."""
        kind = self._resolve_kind(args)
        secret = self._build_secret(args)
        carrier = Path(args.carrier).read_bytes()
        passphrase = self._passphrase(args, confirm=True)

        envelope = SecretEnvelope(kdf_iterations=args.iterations)
        output = envelope.embed(secret, passphrase, carrier, kind)

        if args.output:
            output_path = Path(args.output)
        else:
            name, _ = suggest_output(kind, args.carrier)
            output_path = Path(args.carrier).with_name(name)
        output_path.write_bytes(output)

        print(f"Embedded {secret.kind.value} secret ({len(secret.content)} bytes) in {args.carrier}")
        print(f"Written to {output_path}")
        return 0

    def handle_extract(self, args):
        """Handle extract command."""
        kind = self._resolve_kind(args)
        carrier = Path(args.carrier).read_bytes()
        passphrase = self._passphrase(args)

        envelope = SecretEnvelope(kdf_iterations=args.iterations)
        secret = envelope.extract(carrier, kind, passphrase)

        if isinstance(secret, TextSecret) and not args.output:
            print(secret.text)
            return 0

        output_path = Path(args.output or secret.suggested_filename())
        output_path.write_bytes(secret.content)
        print(f"Extracted {secret.kind.value} secret ({len(secret.content)} bytes)")
        print(f"Written to {output_path}")
        return 0

    def handle_capacity(self, args):
        """Handle capacity command."""
        kind = self._resolve_kind(args)
        carrier = Path(args.carrier).read_bytes()

        envelope = SecretEnvelope()
        capacity = envelope.capacity(carrier, kind)
        room = max(0, capacity - envelope.overhead())

        print(f"Carrier: {args.carrier} ({kind.value}, {len(carrier)} bytes)")
        print(f"Payload capacity: {capacity} bytes")
        print(f"Room for serialized secret: {room} bytes")
        return 0

    def handle_info(self, args):
        """Handle info command."""
        info = {
            "service": "stegcarrier",
            "version": __version__,
            "supported_carrier_formats": SUPPORTED_FORMATS["carrier"],
            "supported_secret_formats": SUPPORTED_FORMATS["secret"],
        }
        if args.json:
            print(json.dumps(info, indent=2))
            return 0

        print(f"stegcarrier v{__version__}")
        print("Carrier formats:")
        for kind, formats in info["supported_carrier_formats"].items():
            print(f"  {kind}: {', '.join(formats)}")
        print("Secret formats:")
        for kind, formats in info["supported_secret_formats"].items():
            listed = formats if isinstance(formats, str) else ", ".join(formats)
            print(f"  {kind}: {listed}")
        return 0


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    cli = StegCarrierCLI()
    sys.exit(cli.run(sys.argv[1:] if argv is None else argv))


if __name__ == "__main__":
    main()
