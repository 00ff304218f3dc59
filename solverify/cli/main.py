"""solverify CLI — recompile a verified contract from its explorer metadata.

Usage:
    solverify                          Verify the default contract (UNI token)
    solverify verify [<address>]       Fetch, normalize and recompile a contract
    solverify config                   Show current configuration

Examples:
    solverify verify 0x1f9840a85d5aF5bf1D1762F925BDADdC4201F984
    solverify verify 0x5ff137d4b0fdcd49dca30c7cf57e578a026d2789 --summary
    solverify verify 0x1234...abcd --chain polygon -o output.json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from solverify import __version__
from solverify.core.chains import CHAINS
from solverify.core.config import get_settings
from solverify.core.errors import VerificationError
from solverify.core.logging import setup_logging
from solverify.ingestion.solidity_compiler import CompilationResult


# ── Coloured output helpers ──────────────────────────────────────────────────

_RESET = "\033[0m"
_BOLD = "\033[1m"
_RED = "\033[91m"
_CYAN = "\033[96m"
_DIM = "\033[2m"


def _c(text: str, code: str) -> str:
    return f"{code}{text}{_RESET}"


# ── CLI argument parser ─────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="solverify",
        description="solverify — reproduce the compilation of a verified contract",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="store_true", help="Print version and exit")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only log warnings and errors")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every pipeline stage")
    parser.set_defaults(address=None, chain=None, summary=False, output=None)

    sub = parser.add_subparsers(dest="command")

    # ── verify ───────────────────────────────────────────────────────────────
    verify_p = sub.add_parser("verify", help="Fetch and recompile a contract")
    verify_p.add_argument("address", nargs="?", help="Contract address (default: UNI token)")
    verify_p.add_argument(
        "--chain",
        choices=sorted(CHAINS),
        help="Chain to fetch the contract from (default: from settings)",
    )
    verify_p.add_argument(
        "--summary",
        action="store_true",
        help="Print one line per compiled contract instead of the raw solc output",
    )
    verify_p.add_argument("--output", "-o", help="Write output to file instead of stdout")

    # ── config ───────────────────────────────────────────────────────────────
    sub.add_parser("config", help="Show current configuration")

    return parser


# ── Verify command ───────────────────────────────────────────────────────────


def _format_summary(result: CompilationResult) -> str:
    lines = [f"{_BOLD}Compiled with solc {result.version}{_RESET}"]
    for key in sorted(result.contracts):
        contract = result.contracts[key]
        size = len(contract.deployed_bytecode) // 2
        lines.append(f"  {_c(key, _CYAN)}  {_DIM}{size} bytes deployed{_RESET}")
    if result.warnings:
        lines.append(f"  {_DIM}{len(result.warnings)} warning(s){_RESET}")
    return "\n".join(lines)


async def _run_verify(args: argparse.Namespace) -> int:
    """Run the pipeline for one address and print the compiler output."""
    from solverify.pipeline.orchestrator import VerificationOrchestrator

    settings = get_settings()
    address = args.address or settings.default_address

    try:
        orchestrator = VerificationOrchestrator(chain=args.chain, settings=settings)
    except ValueError as exc:
        # Unknown chain from SOLVERIFY_DEFAULT_CHAIN; --chain is checked by argparse
        print(_c(f"error: {exc}", _RED), file=sys.stderr)
        return 1

    try:
        async with orchestrator:
            result = await orchestrator.verify(address)
    except VerificationError as exc:
        print(_c(exc.describe(), _RED), file=sys.stderr)
        return 1

    if args.summary:
        output = _format_summary(result)
    else:
        output = json.dumps(result.output, indent=2, sort_keys=True)

    if args.output:
        Path(args.output).write_text(output + "\n")
        print(f"  Written to {_c(args.output, _CYAN)}", file=sys.stderr)
    else:
        print(output)
    return 0


# ── Config command ───────────────────────────────────────────────────────────


def _run_config() -> int:
    """Print current settings (redacted)."""
    s = get_settings()
    print(f"\n{_BOLD}solverify Configuration{_RESET}\n")
    for field_name in sorted(type(s).model_fields.keys()):
        val = getattr(s, field_name, "")
        # Redact secrets
        if any(kw in field_name for kw in ("password", "secret", "key", "token")):
            val = "****" if val else "(not set)"
        print(f"  {_DIM}{field_name}:{_RESET}  {val}")
    print()
    return 0


# ── Entrypoint ───────────────────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"solverify {__version__}")
        return 0

    settings = get_settings()
    log_level = settings.log_level
    if args.quiet:
        log_level = "WARNING"
    elif args.verbose:
        log_level = "DEBUG"
    setup_logging(env=settings.app_env, log_level=log_level)

    if args.command == "config":
        return _run_config()

    # No command behaves like a bare `verify`
    return asyncio.run(_run_verify(args))


if __name__ == "__main__":
    sys.exit(main())
