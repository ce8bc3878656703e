"""
Command-line interface for the envguard tool.

This module orchestrates all other components and provides
the user-facing CLI commands:
- precommit
- ls
- explain
- help
"""

from __future__ import annotations

import sys
import argparse
import logging
from typing import List, Optional

from .config import (
    MANIFEST_FILENAME,
    TOOL_VERSION,
    get_config_path,
    get_log_level,
)
from .errors import EnvGuardError, ProtectionError
from .lister import EnvFileLister
from .manifest import GuardManifest
from .precommit import GuardWarning, Precommit
from .rules import Verdict


# ---------------------------------------------------------------------------
# Color output helpers
# ---------------------------------------------------------------------------


class Colors:
    """ANSI color codes for terminal output."""
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    RESET = "\033[0m"
    BOLD = "\033[1m"


def colored(text: str, color: str) -> str:
    """Return colored text for terminal output."""
    return f"{color}{text}{Colors.RESET}"


def print_error(msg: str, help: Optional[str] = None) -> None:
    """Print error message, and its hint, to stderr."""
    print(colored(f"✗ {msg}", Colors.RED), file=sys.stderr)
    if help:
        print(colored(f"  {help}", Colors.RED), file=sys.stderr)


def print_success(msg: str) -> None:
    """Print success message."""
    print(colored(f"✓ {msg}", Colors.GREEN))


def print_warning(warning: GuardWarning) -> None:
    """Print a guard warning and its hint to stderr."""
    print(colored(f"⚠ {warning.message}", Colors.YELLOW), file=sys.stderr)
    if warning.help:
        print(colored(f"  {warning.help}", Colors.YELLOW), file=sys.stderr)


# ---------------------------------------------------------------------------
# CLI context
# ---------------------------------------------------------------------------


class CLIContext:
    """Shared context for CLI commands."""

    def __init__(self, config_path: Optional[str], verbose: bool, quiet: bool):
        self.config_path = config_path
        self.verbose = verbose
        self.quiet = quiet

        # Lazy-loaded
        self._manifest: Optional[GuardManifest] = None

    def manifest(self, directory: str) -> GuardManifest:
        """Load the project manifest lazily, defaults when there is none."""
        if self._manifest is None:
            self._manifest = GuardManifest.discover(directory, self.config_path)
        return self._manifest

    def guard(self, args: argparse.Namespace, install: bool = False) -> Precommit:
        """Build a guard from the manifest, with command-line flags on top."""
        manifest = self.manifest(args.directory)
        return Precommit(
            directory=args.directory,
            install=install,
            env_file=args.env_file or manifest.env_file,
            exclude=[*manifest.exclude, *(args.exclude_env_file or [])],
            ignore_file=manifest.ignore_file,
        )

    def log(self, msg: str) -> None:
        """Log message if not quiet."""
        if not self.quiet:
            print(msg)


def configure_logging(verbose: bool) -> None:
    if verbose:
        level = logging.DEBUG
    else:
        level = logging.getLevelNamesMapping().get(get_log_level(), logging.WARNING)

    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


# ---------------------------------------------------------------------------
# Command implementations
# ---------------------------------------------------------------------------


def cmd_precommit(ctx: CLIContext, args: argparse.Namespace) -> int:
    """
    Fail if any env file about to be committed is neither encrypted nor ignored.
    """
    guard = ctx.guard(args, install=args.install)

    try:
        result = guard.run()
    except ProtectionError as e:
        for warning in e.warnings:
            print_warning(warning)
        print_error(e.message, e.help)
        return 1

    for warning in result.warnings:
        print_warning(warning)

    if not ctx.quiet:
        print_success(result.success_message)
    return 0


def cmd_ls(ctx: CLIContext, args: argparse.Namespace) -> int:
    """
    List env files, most recently modified first.
    """
    manifest = ctx.manifest(args.directory)
    lister = EnvFileLister(
        args.directory,
        args.env_file or manifest.env_file,
        [*manifest.exclude, *(args.exclude_env_file or [])],
    )

    for path in lister.run():
        print(path)

    return 0


VERDICT_DESCRIPTIONS = {
    Verdict.SKIPPED_EXCLUDED: (Colors.BLUE, "not checked (excluded, not staged, or not an env file)"),
    Verdict.IGNORED: (Colors.GREEN, "protected (gitignored)"),
    Verdict.IGNORED_SHOULD_NOT_BE: (Colors.YELLOW, "gitignored, but should be committed"),
    Verdict.EXEMPT: (Colors.GREEN, "exempt (example or vault file)"),
    Verdict.ENCRYPTED: (Colors.GREEN, "protected (encrypted)"),
    Verdict.UNPROTECTED: (Colors.RED, "NOT protected (encrypt or gitignore it)"),
}


def cmd_explain(ctx: CLIContext, args: argparse.Namespace) -> int:
    """
    Explain how the precommit check treats a single file.
    """
    guard = ctx.guard(args)
    verdict = guard.explain(args.path)

    color, description = VERDICT_DESCRIPTIONS[verdict]
    ctx.log(f"{colored('File:', Colors.BOLD)} {args.path}")
    ctx.log(f"{colored('Verdict:', Colors.BOLD)} {colored(verdict.value, color)}")
    ctx.log(f"  {description}")

    return 1 if verdict is Verdict.UNPROTECTED else 0


def cmd_help(ctx: Optional[CLIContext], args: argparse.Namespace) -> int:
    """
    Show help message.
    """
    help_text = f"""
{colored('envguard', Colors.BOLD)} — keep plaintext .env files out of git

{colored('USAGE:', Colors.CYAN)}
  envguard [options] <command> [command options]

{colored('DESCRIPTION:', Colors.CYAN)}
  envguard is a pre-commit check. Every .env* file that the next commit
  would include must be either encrypted or gitignored; .env.keys must
  always be gitignored. The first unprotected file fails the commit.

{colored('COMMANDS:', Colors.CYAN)}
  precommit [DIR]           Check env files (add --install to install the git hook)
  ls [DIR]                  List env files, newest first
  explain PATH [DIR]        Show how a single file would be treated
  help                      Show this help message

{colored('COMMAND OPTIONS:', Colors.CYAN)}
  -f, --env-file GLOB       Env file pattern (repeatable, default: .env*)
  -ef, --exclude-env-file GLOB
                            Pattern to leave out (repeatable)

{colored('GLOBAL OPTIONS:', Colors.CYAN)}
  -c, --config PATH         Path to manifest file
                            (default: DIR/{MANIFEST_FILENAME}, if present)
  -v, --verbose             Enable debug logging
  -q, --quiet               Suppress non-error output
  -h, --help                Show this help message and exit

{colored('ENVIRONMENT:', Colors.CYAN)}
  ENVGUARD_CONFIG           Manifest path, same as --config
  ENVGUARD_LOG_LEVEL        Log level when --verbose is not given

{colored('EXAMPLES:', Colors.CYAN)}
  envguard precommit
  envguard precommit --install
  envguard ls apps/api
  envguard explain .env.production

{colored('VERSION:', Colors.CYAN)}
  {TOOL_VERSION}
"""
    print(help_text)
    return 0


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def _add_pattern_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-f", "--env-file",
        action="append",
        help="Env file pattern to look for",
    )
    parser.add_argument(
        "-ef", "--exclude-env-file",
        action="append",
        help="Pattern to leave out",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="envguard",
        description="Keep plaintext .env files out of git",
        add_help=False,
    )

    # Global options
    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Path to manifest file",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )
    parser.add_argument(
        "-h", "--help",
        action="store_true",
        help="Show help message",
    )

    # Subcommands
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # precommit command
    precommit_parser = subparsers.add_parser("precommit", help="Check env files before committing")
    precommit_parser.add_argument("directory", nargs="?", default=".", help="Directory to check")
    precommit_parser.add_argument("-i", "--install", action="store_true", help="Install the git pre-commit hook")
    _add_pattern_options(precommit_parser)

    # ls command
    ls_parser = subparsers.add_parser("ls", help="List env files")
    ls_parser.add_argument("directory", nargs="?", default=".", help="Directory to list")
    _add_pattern_options(ls_parser)

    # explain command
    explain_parser = subparsers.add_parser("explain", help="Explain how a file is treated")
    explain_parser.add_argument("path", help="File path, relative to the directory")
    explain_parser.add_argument("directory", nargs="?", default=".", help="Directory to check")
    _add_pattern_options(explain_parser)

    # help command
    subparsers.add_parser("help", help="Show help message")

    return parser


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Show help if requested or no command
    if args.help or not args.command:
        return cmd_help(None, args)

    configure_logging(args.verbose)

    # Build context
    ctx = CLIContext(
        config_path=args.config or get_config_path(),
        verbose=args.verbose,
        quiet=args.quiet,
    )

    # Dispatch to command
    commands = {
        "precommit": cmd_precommit,
        "ls": cmd_ls,
        "explain": cmd_explain,
        "help": cmd_help,
    }

    cmd_func = commands.get(args.command)
    if not cmd_func:
        print_error(f"Unknown command: {args.command}")
        return 1

    try:
        return cmd_func(ctx, args)
    except KeyboardInterrupt:
        print_error("Interrupted")
        return 130
    except EnvGuardError as e:
        print_error(e.message, e.help)
        return 1
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
