"""
BitCodeFixer — command-line entry point.

Commands:
  fix FILE      Fix the diagnostics of one file
  fix-all       Fix every TypeScript/JavaScript file with diagnostics
  commit        Generate a commit message for the staged changes and commit
  doctor        Show configuration and tool availability
"""

import argparse
import asyncio
import logging
import shutil
import sys
from pathlib import Path
from typing import Optional

from bitcodefixer import __version__
from bitcodefixer.config.settings import Config, resolve_config
from bitcodefixer.core.ai.base import BaseAIProvider
from bitcodefixer.core.ai.openai_provider import OpenAIProvider
from bitcodefixer.core.commit_assistant import CommitAssistant
from bitcodefixer.core.errors import BitCodeFixerError
from bitcodefixer.core.fixer import FixOrchestrator
from bitcodefixer.services.diagnostics_service import (
    CompositeDiagnostics,
    DiagnosticsSource,
    ESLintDiagnostics,
    StaticDiagnostics,
    TypeScriptDiagnostics,
)
from bitcodefixer.services.file_service import DEFAULT_EXCLUDE, DEFAULT_INCLUDE, FileService
from bitcodefixer.services.git_service import GitService
from bitcodefixer.ui.colors import (
    BOLD,
    BRIGHT_MAGENTA,
    ELECTRIC_CYAN,
    GREEN,
    MID_GRAY,
    RED,
    colorize,
)

logger = logging.getLogger(__name__)


def _success(text: str) -> None:
    print(colorize(f"✓ {text}", GREEN))


def _failure(text: str) -> None:
    print(colorize(f"✗ {text}", RED), file=sys.stderr)


def _progress(percent: int) -> None:
    print(colorize(f"[{percent:3d}%]", MID_GRAY), flush=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _base_dir(args) -> Path:
    return Path(args.dir).expanduser().resolve() if args.dir else Path.cwd().resolve()


def _load_config(args) -> Config:
    return resolve_config().with_model(args.model)


def _create_provider(config: Config) -> Optional[BaseAIProvider]:
    try:
        return OpenAIProvider(config.to_provider_config())
    except ValueError as e:
        _failure(f"{e}. Set openai.apiKey in ~/.codefixrc.json or OPENAI_API_KEY.")
        return None


def _create_diagnostics(args, base_dir: Path) -> DiagnosticsSource:
    if args.diagnostics:
        return StaticDiagnostics.from_file(Path(args.diagnostics), base_dir=base_dir)
    sources = []
    if args.linter in ("eslint", "all"):
        sources.append(ESLintDiagnostics(base_dir))
    if args.linter in ("tsc", "all"):
        sources.append(TypeScriptDiagnostics(base_dir))
    return CompositeDiagnostics(sources)


def _create_fixer(args) -> Optional[FixOrchestrator]:
    base_dir = _base_dir(args)
    provider = _create_provider(_load_config(args))
    if provider is None:
        return None
    return FixOrchestrator(
        provider=provider,
        documents=FileService(base_dir),
        diagnostics=_create_diagnostics(args, base_dir),
    )


# =====================================================================
#  COMMANDS
# =====================================================================

def cmd_fix(args) -> int:
    """Fix the current file."""
    try:
        fixer = _create_fixer(args)
        if fixer is None:
            return 1
        path = Path(args.file)
        if not path.is_absolute():
            path = _base_dir(args) / path
        if not path.is_file():
            _failure(f"No such file: {args.file}")
            return 1

        print(colorize("Fixing code with AI...", ELECTRIC_CYAN))
        fixed = asyncio.run(fixer.fix_file(path, on_progress=_progress))
    except (BitCodeFixerError, OSError, ValueError) as e:
        _failure(f"Failed to fix code: {e}")
        return 1

    if not fixed:
        print("No errors found in the current file")
        return 0
    _success("Code fixed successfully!")
    return 0


def cmd_fix_all(args) -> int:
    """Fix every matching workspace file."""
    try:
        fixer = _create_fixer(args)
    except BitCodeFixerError as e:
        _failure(str(e))
        return 1
    if fixer is None:
        return 1

    workspace = fixer.documents

    def report(path: Path, error: Optional[str]) -> None:
        name = workspace.relative(path)
        if error is None:
            print(f"  {colorize('fixed', GREEN)}  {name}")
        else:
            print(f"  {colorize('failed', RED)} {name}: {error}")

    print(colorize(f"Scanning {workspace.base_dir} for {args.include}", ELECTRIC_CYAN))
    result = asyncio.run(fixer.fix_all(args.include, args.exclude or None, on_file=report))
    _success(f"Fixed {result.fixed_count} files successfully!")
    return 0


def cmd_commit(args) -> int:
    """Generate a commit message and commit the staged changes."""
    config = _load_config(args)
    provider = _create_provider(config)
    if provider is None:
        return 1

    assistant = CommitAssistant(GitService(_base_dir(args)), provider)
    print(colorize("Generating commit message...", ELECTRIC_CYAN))
    try:
        message = asyncio.run(assistant.run(on_progress=_progress, edit=not args.no_edit))
    except BitCodeFixerError as e:
        _failure(str(e))
        return 1

    logger.debug(f"Committed with message: {message}")
    _success("Commit created successfully!")
    return 0


def cmd_doctor(args) -> int:
    """Check configuration and external tools."""
    config = _load_config(args)
    print(f"\n{colorize('BitCodeFixer Doctor', ELECTRIC_CYAN, BOLD)}")
    print("=" * 40)
    print(f"Config file : {config.source or colorize('not found (using environment/defaults)', MID_GRAY)}")
    print(f"API base    : {config.api_base}")
    print(f"Model       : {colorize(config.model, BRIGHT_MAGENTA)}")

    ok = True
    if config.has_api_key:
        _success("API key configured")
    else:
        _failure("API key missing")
        ok = False

    if GitService.git_installed():
        _success("git found")
    else:
        _failure("git not found")
        ok = False

    if shutil.which("npx"):
        _success("npx found (eslint / tsc diagnostics)")
    else:
        print(colorize("○ npx not found; use --diagnostics FILE", MID_GRAY))

    return 0 if ok else 1


# =====================================================================
#  ARGUMENT PARSING
# =====================================================================

def _add_diagnostics_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--diagnostics",
        type=str,
        help="JSON file with diagnostics exported by an editor or language server",
    )
    parser.add_argument(
        "--linter",
        choices=("eslint", "tsc", "all"),
        default="all",
        help="Diagnostics to collect when --diagnostics is not given (default: all)",
    )


def _create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="bitcodefixer",
        description="AI-powered ESLint and TypeScript error fixer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  bitcodefixer fix src/app.ts
  bitcodefixer fix-all --linter eslint
  bitcodefixer commit
""",
    )
    parser.add_argument("--version", action="version", version=f"bitcodefixer {__version__}")
    parser.add_argument("--dir", type=str, help="Workspace / repository directory")
    parser.add_argument("--model", type=str, help="Override the model from config")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parser_fix = subparsers.add_parser("fix", help="Fix errors in one file")
    parser_fix.add_argument("file", help="File to fix")
    _add_diagnostics_args(parser_fix)

    parser_all = subparsers.add_parser("fix-all", help="Fix errors in all workspace files")
    parser_all.add_argument("--include", default=DEFAULT_INCLUDE, help=f"Files to scan (default: {DEFAULT_INCLUDE})")
    parser_all.add_argument("--exclude", default=DEFAULT_EXCLUDE, help=f"Files to skip (default: {DEFAULT_EXCLUDE})")
    _add_diagnostics_args(parser_all)

    parser_commit = subparsers.add_parser("commit", help="AI commit message for staged changes")
    parser_commit.add_argument(
        "--no-edit",
        action="store_true",
        help="Commit without opening the editor on the generated message",
    )

    subparsers.add_parser("doctor", help="Check configuration and tools")

    return parser


def main(argv=None):
    """Main entry point with subcommand routing."""
    parser = _create_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command == "fix":
        return cmd_fix(args)
    elif args.command == "fix-all":
        return cmd_fix_all(args)
    elif args.command == "commit":
        return cmd_commit(args)
    elif args.command == "doctor":
        return cmd_doctor(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
