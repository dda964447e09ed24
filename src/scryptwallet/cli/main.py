"""Command-line entry point.

Usage:
    scryptwallet --chain evm
    scryptwallet --chain sol --cost-exponent 16
    scryptwallet-evm / scryptwallet-sol

Prompts for password, user salt and application salt (hidden) and the cost
exponent, prints the generated address, and writes the full secret export
string to the output file.

Exit codes: 0 success, 1 I/O failure, 2 invalid parameter, 3 resource limit
exceeded, 4 invalid key material, 130 interrupted.
"""

import argparse
import logging
import sys
from typing import Optional, Sequence, TextIO

from scryptwallet.cli.prompt import read_cost_exponent, read_secret, require_factors
from scryptwallet.cli.report import render_report, write_secret
from scryptwallet.config import get_settings
from scryptwallet.errors import WalletError
from scryptwallet.pipeline import generate_wallet

logger = logging.getLogger(__name__)

EXIT_IO_ERROR = 1
EXIT_INTERRUPTED = 130

CHAINS = {"evm": "EVM", "sol": "SOL"}


def configure_logging(verbose: bool = False) -> None:
    """Configure root logging once for the CLI process."""
    settings = get_settings()
    if verbose or settings.debug:
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def build_parser(default_chain: str = "evm") -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="scryptwallet",
        description="Deterministically generate a wallet from a password, "
        "user salt, application salt and scrypt cost exponent.",
    )
    parser.add_argument(
        "--chain",
        choices=sorted(CHAINS),
        default=default_chain,
        help="Target chain family (default: %(default)s)",
    )
    parser.add_argument(
        "-e",
        "--cost-exponent",
        type=int,
        default=None,
        help="scrypt cost exponent; N = 2^E (prompted for if omitted)",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="File receiving the secret export string (default from settings)",
    )
    parser.add_argument(
        "--no-write",
        action="store_true",
        help="Do not write the secret export string to a file",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def run(
    args: argparse.Namespace,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    """Run one wallet generation and return the process exit code."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    settings = get_settings()
    chain = CHAINS[args.chain]

    try:
        password = read_secret("Enter password: ", stdin, stdout)
        user_salt = read_secret("Enter user salt/passphrase (remember this!): ", stdin, stdout)
        application_salt = read_secret("Enter application salt (remember this!): ", stdin, stdout)

        cost_exponent = args.cost_exponent
        if cost_exponent is None:
            cost_exponent = read_cost_exponent(
                "Enter cost parameter (N, e.g., 14, 15, 16 - higher = more secure but slower): ",
                stdin,
                stdout,
            )

        require_factors(password, user_salt, application_salt)

        stdout.write("Generating secure wallet (this may take a moment)...\n")
        stdout.flush()

        result = generate_wallet(
            password,
            user_salt,
            application_salt,
            cost_exponent,
            chain=chain,
        )

    except KeyboardInterrupt:
        stdout.write("\n")
        return EXIT_INTERRUPTED
    except WalletError as e:
        logger.debug(f"Wallet generation failed: {type(e).__name__}")
        print(f"\nError: {e}", file=sys.stderr)
        return e.exit_code

    stdout.write(render_report(result) + "\n")

    if not args.no_write:
        path = args.output or settings.get_output_file(chain)
        try:
            write_secret(path, result.account.export)
        except OSError as e:
            print(f"\nError: could not write {path}: {e.strerror}", file=sys.stderr)
            return EXIT_IO_ERROR

    return 0


def main(argv: Optional[Sequence[str]] = None, default_chain: str = "evm") -> int:
    """Entry point for ``scryptwallet``."""
    args = build_parser(default_chain).parse_args(argv)
    configure_logging(args.verbose)
    return run(args)


def main_evm() -> int:
    """Entry point for ``scryptwallet-evm``."""
    return main(default_chain="evm")


def main_sol() -> int:
    """Entry point for ``scryptwallet-sol``."""
    return main(default_chain="sol")


if __name__ == "__main__":
    sys.exit(main())
