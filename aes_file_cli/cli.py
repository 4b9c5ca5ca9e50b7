"""
Command Line Interface Module

    aes-file-cli (-e | -d) -i <inputfile> -o <outputfile> -p <password>

Any argument problem prints the usage line to stdout and exits with 1.
I/O failures exit with 1, cryptographic failures with 2.
"""

import sys
import time
import argparse
from typing import Optional, List

from . import __version__
from .core import encrypt_file, decrypt_file, get_encrypted_file_info
from .cipher import EncryptionError, DecryptionError
from .container import MalformedContainerError
from .key_derivation import KeyDerivationError, DEFAULT_HASH_ALGORITHM, DEFAULT_ITERATIONS
from .config import Config, ConfigError, load_config
from .utils import (
    FileIOError, format_iv, format_file_size, format_duration,
    print_error, print_success, print_warning, print_info, create_table
)


EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_CRYPTO_FAILURE = 2

PROG = 'aes-file-cli'
USAGE = f"Usage: {PROG} [-e | -d] -i <inputfile> -o <outputfile> -p <password>"

# Options that always consume the next argument, even one starting with "-".
VALUE_OPTIONS = ('-i', '-o', '-p')


class UsageError(Exception):
    """Raised when command line arguments are missing, repeated or conflicting."""
    pass


class CLIError(Exception):
    """Raised when a command fails; carries the process exit code."""

    def __init__(self, message: str, exit_code: int = EXIT_FAILURE):
        super().__init__(message)
        self.exit_code = exit_code


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting with status 2."""

    def error(self, message):
        raise UsageError(message)


class _StoreOnce(argparse.Action):
    """Store a non-empty value, refusing a second occurrence of the option."""

    def __call__(self, parser, namespace, values, option_string=None):
        if getattr(namespace, self.dest, None) is not None:
            raise UsageError(f"{option_string} given more than once")
        if not values:
            raise UsageError(f"{option_string} must not be empty")
        setattr(namespace, self.dest, values)


def _attach_option_values(args: List[str]) -> List[str]:
    """
    Join each -i/-o/-p with the following word as "-p=<value>".

    argparse would otherwise read a value such as "-secret" as an unknown
    option. Splitting on the first "=" leaves values containing "=" intact.
    """
    result = []
    words = iter(args)
    for word in words:
        if word in VALUE_OPTIONS:
            value = next(words, None)
            result.append(word if value is None else f"{word}={value}")
        else:
            result.append(word)
    return result


class AesFileCLI:
    """Main CLI application class."""

    def __init__(self):
        self.config: Optional[Config] = None
        self.verbose = False
        self.use_rich = True
        self.show_iv = True

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run the CLI application.

        Args:
            args: Command line arguments (default: sys.argv)

        Returns:
            Exit code
        """
        try:
            if args is None:
                args = sys.argv[1:]
            parsed_args = self._create_parser().parse_args(_attach_option_values(args))
        except UsageError as e:
            print(USAGE)
            print_error(str(e), use_rich=False)
            return EXIT_FAILURE
        except SystemExit as e:
            # --version
            return e.code if isinstance(e.code, int) else EXIT_SUCCESS

        self.use_rich = not parsed_args.no_rich
        self.verbose = parsed_args.verbose

        try:
            self._load_configuration(parsed_args)

            if parsed_args.mode == 'encrypt':
                return self._cmd_encrypt(parsed_args)
            return self._cmd_decrypt(parsed_args)

        except KeyboardInterrupt:
            print_error("Operation cancelled by user", self.use_rich)
            return EXIT_FAILURE
        except CLIError as e:
            print_error(str(e), self.use_rich)
            return e.exit_code
        except Exception as e:
            if self.verbose:
                import traceback
                traceback.print_exc()
            else:
                print_error(f"Unexpected error: {e}", self.use_rich)
            return EXIT_FAILURE

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create the argument parser."""
        parser = _ArgumentParser(
            prog=PROG,
            description='Encrypt or decrypt a file with AES-256-CBC and a password-derived key',
            epilog='Encrypted files are laid out as [IV:16][CIPHERTEXT].',
            add_help=False,
        )

        mode = parser.add_mutually_exclusive_group(required=True)
        mode.add_argument('-e', dest='mode', action='store_const', const='encrypt', help='Encrypt the input file')
        mode.add_argument('-d', dest='mode', action='store_const', const='decrypt', help='Decrypt the input file')

        parser.add_argument('-i', dest='input', metavar='<inputfile>', required=True, action=_StoreOnce,
                            help='Input file')
        parser.add_argument('-o', dest='output', metavar='<outputfile>', required=True, action=_StoreOnce,
                            help='Output file')
        parser.add_argument('-p', dest='password', metavar='<password>', required=True, action=_StoreOnce,
                            help='Password')

        parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose output')
        parser.add_argument('-q', '--quiet', action='store_true', help='Do not print the IV')
        parser.add_argument('--no-rich', action='store_true', help='Disable rich formatting')
        parser.add_argument('--config', help='Configuration file path')
        parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

        return parser

    def _load_configuration(self, args: argparse.Namespace) -> None:
        """Load configuration and apply output settings."""
        try:
            self.config = load_config(args.config)
        except ConfigError as e:
            if args.config:
                raise CLIError(str(e), EXIT_FAILURE)
            print_warning(f"Ignoring configuration: {e}", self.use_rich)
            self.config = Config(use_defaults=False, use_environment=False)

        self.verbose = self.verbose or bool(self.config.get('output.verbose', False))
        self.use_rich = self.use_rich and bool(self.config.get('output.color_output', True))
        self.show_iv = not args.quiet and bool(self.config.get('output.show_iv', True))

    def _cmd_encrypt(self, args: argparse.Namespace) -> int:
        """Handle encryption."""
        start = time.perf_counter()

        try:
            result = encrypt_file(args.input, args.output, args.password)
        except FileIOError as e:
            raise CLIError(str(e), EXIT_FAILURE)
        except KeyDerivationError as e:
            raise CLIError(f"Key derivation failed: {e}", EXIT_CRYPTO_FAILURE)
        except EncryptionError as e:
            raise CLIError(f"Encryption failed: {e}", EXIT_CRYPTO_FAILURE)

        if self.show_iv:
            print_info(f"Generated IV: {format_iv(result.iv)}", self.use_rich)

        if self.verbose:
            self._print_details(args.output, len(result.data), time.perf_counter() - start)

        print_success("Operation encryption completed successfully!", self.use_rich)
        return EXIT_SUCCESS

    def _cmd_decrypt(self, args: argparse.Namespace) -> int:
        """Handle decryption."""
        start = time.perf_counter()

        try:
            result = decrypt_file(args.input, args.output, args.password)
        except FileIOError as e:
            raise CLIError(str(e), EXIT_FAILURE)
        except MalformedContainerError as e:
            raise CLIError(str(e), EXIT_CRYPTO_FAILURE)
        except KeyDerivationError as e:
            raise CLIError(f"Key derivation failed: {e}", EXIT_CRYPTO_FAILURE)
        except DecryptionError as e:
            raise CLIError(f"Decryption failed: {e}", EXIT_CRYPTO_FAILURE)

        if self.show_iv:
            print_info(f"Extracted IV: {format_iv(result.iv)}", self.use_rich)

        if self.verbose:
            self._print_details(args.input, len(result.data), time.perf_counter() - start)

        print_success("Operation decryption completed successfully!", self.use_rich)
        return EXIT_SUCCESS

    def _print_details(self, encrypted_path: str, output_size: int, elapsed: float) -> None:
        """Print container details and timing in verbose mode."""
        info = get_encrypted_file_info(encrypted_path)

        rows = [
            ['Algorithm', info['algorithm']],
            ['KDF', f"{info['kdf']} ({DEFAULT_HASH_ALGORITHM}, {DEFAULT_ITERATIONS} iterations)"],
            ['Container size', format_file_size(info['file_size'])],
            ['Ciphertext blocks', info['blocks']],
            ['Output size', format_file_size(output_size)],
            ['Elapsed', format_duration(elapsed)],
        ]
        create_table(['Property', 'Value'], rows, self.use_rich)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    cli = AesFileCLI()
    return cli.run(argv)


if __name__ == '__main__':
    sys.exit(main())
