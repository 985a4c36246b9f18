#!/usr/bin/env python3
"""
SNCrypto Command Line Interface

Developer CLI over the key derivation service, for reproducing account
keys and checking values by hand.

Usage:
    sncrypto random-key [--bits N]
    sncrypto item-key [--split]
    sncrypto derive --salt SALT --cost N [--password P] [--length BITS]
    sncrypto compare A B
    sncrypto sha256 TEXT
    sncrypto hmac256 MESSAGE --key HEX
    sncrypto --version
    sncrypto --help
"""

import argparse
import getpass
import json
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from . import __version__
from .crypto.errors import SNCryptoError
from .crypto.primitives import SUPPORTED_BACKENDS
from .keys.config import KeyDerivationConfig
from .keys.derivation import KeyDerivationService


class SNCryptoCLI:
    """Main CLI application for SNCrypto."""

    def __init__(self, service: Optional[KeyDerivationService] = None):
        self.service = service

    def run(self, args: List[str]) -> int:
        """Run the CLI with given arguments."""
        parser = self.create_parser()
        parsed = parser.parse_args(args)

        logging.basicConfig(
            level=logging.DEBUG if parsed.verbose else logging.WARNING,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        )

        if not hasattr(parsed, 'func'):
            parser.print_help()
            return 0

        try:
            if self.service is None:
                self.service = KeyDerivationService(config=self.load_config(parsed))
            return parsed.func(parsed)
        except (SNCryptoError, OSError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    @staticmethod
    def load_config(args) -> KeyDerivationConfig:
        """Build configuration from --config and --backend."""
        config = KeyDerivationConfig.load(args.config) if args.config else KeyDerivationConfig.default()
        if args.backend:
            config = replace(config, backend=args.backend)
        return config

    def create_parser(self) -> argparse.ArgumentParser:
        """Create the argument parser."""
        parser = argparse.ArgumentParser(
            prog="sncrypto",
            description="SNCrypto key derivation CLI",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
    sncrypto random-key --bits 256
    sncrypto item-key --split
    sncrypto derive --password "correct horse" --salt a1b2c3d4 --cost 5000
    sncrypto compare deadbeef deadbeef
    sncrypto hmac256 "message" --key 000102030405
            """
        )

        parser.add_argument('--version', action='version',
                            version=f'SNCrypto v{__version__}')
        parser.add_argument('--backend', choices=SUPPORTED_BACKENDS,
                            help='Primitives backend (default: from config, else auto)')
        parser.add_argument('--config', '-c', help='JSON configuration file')
        parser.add_argument('--verbose', '-v', action='store_true',
                            help='Enable debug logging')

        subparsers = parser.add_subparsers(title='commands', dest='command')

        self.add_random_key_command(subparsers)
        self.add_item_key_command(subparsers)
        self.add_derive_command(subparsers)
        self.add_compare_command(subparsers)
        self.add_hash_commands(subparsers)

        return parser

    def add_random_key_command(self, subparsers):
        """Add random-key command to parser."""
        cmd = subparsers.add_parser('random-key', help='Generate a random hex key')
        cmd.add_argument('--bits', '-b', type=int, default=256,
                         help='Key size in bits (multiple of 8)')
        cmd.set_defaults(func=self.handle_random_key)

    def add_item_key_command(self, subparsers):
        """Add item-key command to parser."""
        cmd = subparsers.add_parser('item-key', help='Generate an item encryption key')
        cmd.add_argument('--split', '-s', action='store_true',
                         help='Print the two halves separately')
        cmd.set_defaults(func=self.handle_item_key)

    def add_derive_command(self, subparsers):
        """Add derive command to parser."""
        cmd = subparsers.add_parser('derive', help='Derive the account key set')
        cmd.add_argument('--password', '-p',
                         help='Passphrase (prompted for when omitted)')
        cmd.add_argument('--salt', '-s', required=True, help='Account salt')
        cmd.add_argument('--cost', '-n', type=int, required=True,
                         help='PBKDF2 iteration count')
        cmd.add_argument('--length', '-l', type=int,
                         help='PBKDF2 output length in bits (default: 768)')
        cmd.add_argument('--json', action='store_true', help='Output as JSON')
        cmd.set_defaults(func=self.handle_derive)

    def add_compare_command(self, subparsers):
        """Add compare command to parser."""
        cmd = subparsers.add_parser('compare', help='Compare two values in constant time')
        cmd.add_argument('a', help='First value')
        cmd.add_argument('b', help='Second value')
        cmd.set_defaults(func=self.handle_compare)

    def add_hash_commands(self, subparsers):
        """Add sha256 and hmac256 commands."""
        sha_cmd = subparsers.add_parser('sha256', help='SHA-256 of text')
        sha_cmd.add_argument('text', help='Text to hash')
        sha_cmd.set_defaults(func=self.handle_sha256)

        hmac_cmd = subparsers.add_parser('hmac256', help='HMAC-SHA-256 of text')
        hmac_cmd.add_argument('message', help='Message text')
        hmac_cmd.add_argument('--key', '-k', required=True, help='Hex encoded key')
        hmac_cmd.set_defaults(func=self.handle_hmac256)

    # Command handlers

    def handle_random_key(self, args) -> int:
        """Handle random-key command."""
        print(self.service.generate_random_key(args.bits))
        return 0

    def handle_item_key(self, args) -> int:
        """Handle item-key command."""
        key = self.service.generate_item_encryption_key()
        if args.split:
            first, second = self.service.split_key_in_half(key)
            print(first)
            print(second)
        else:
            print(key)
        return 0

    def handle_derive(self, args) -> int:
        """Handle derive command."""
        service = self.service
        if args.length is not None:
            config = replace(service.config, pbkdf2_length_bits=args.length)
            service = KeyDerivationService(primitives=service.primitives, config=config)

        password = args.password
        if password is None:
            password = getpass.getpass("Passphrase: ")

        keys = service.generate_symmetric_key_pair(password, args.salt, args.cost)
        if args.json:
            print(json.dumps(keys._asdict(), indent=2))
        else:
            for name, value in keys._asdict().items():
                print(f"{name}: {value}")
        return 0

    def handle_compare(self, args) -> int:
        """Handle compare command."""
        equal = self.service.timing_safe_equal(args.a, args.b)
        print("equal" if equal else "different")
        return 0 if equal else 1

    def handle_sha256(self, args) -> int:
        """Handle sha256 command."""
        print(self.service.sha256(args.text))
        return 0

    def handle_hmac256(self, args) -> int:
        """Handle hmac256 command."""
        print(self.service.hmac256(args.message, args.key))
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the ``sncrypto`` console script."""
    cli = SNCryptoCLI()
    return cli.run(sys.argv[1:] if argv is None else argv)


if __name__ == "__main__":
    sys.exit(main())
