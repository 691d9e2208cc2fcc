"""Command line interface for liscaf."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Sequence

from . import __version__
from .config import DEFAULT_TEMPLATE_BASE, ScaffoldConfig
from .errors import ConfigurationError, GitError, SourceReadError
from .scaffold import ProjectScaffolder

Prompt = Callable[[str], str]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="liscaf",
        description="Create a new project from a template repository by renaming it",
    )
    parser.add_argument("name", help="New project name, e.g. my-cool-app")
    parser.add_argument(
        "source",
        nargs="?",
        default="",
        help="Template repository URL (https://, ssh://, git@...) or local directory",
    )
    parser.add_argument(
        "--template-base",
        default=DEFAULT_TEMPLATE_BASE,
        help=f"Name used throughout the template (default: {DEFAULT_TEMPLATE_BASE})",
    )
    parser.add_argument(
        "-d",
        "--destination",
        type=Path,
        help="Where to write the project; an existing directory is merged into (default: ./<name>)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show planned changes without writing files or initialising git",
    )
    parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Assume yes to all prompts (non-interactive)",
    )
    parser.add_argument(
        "--no-git-init",
        dest="init_repository",
        action="store_false",
        help="Do not initialise a git repository in the new project",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _confirm(ask: Prompt, question: str, *, default: bool = True) -> bool:
    suffix = "[Y/n]" if default else "[y/N]"
    answer = ask(f"{question} {suffix} ").strip().lower()
    if not answer:
        return default
    return answer in {"y", "yes"}


def _ask(ask: Prompt, question: str, placeholder: str) -> str:
    return ask(f"{question} (e.g. {placeholder}): ").strip()


def _interview(ask: Prompt, name: str, source: str, base: str) -> tuple[str, str, str] | None:
    """Let the user keep or edit each value; ``None`` means they declined."""

    if not _confirm(ask, f"Use new project name '{name}'?"):
        name = _ask(ask, "Enter new project name", "my-cool-app")

    if not source:
        source = _ask(ask, "Enter template repository URL or directory", "https://github.com/owner/repo")
    elif not _confirm(ask, f"Use template source '{source}'?"):
        source = _ask(ask, "Enter template repository URL or directory", "https://github.com/owner/repo")

    if not _confirm(ask, f"Replace occurrences of '{base}'?"):
        base = _ask(ask, "Enter template base name to replace", DEFAULT_TEMPLATE_BASE)

    if not _confirm(ask, f"Proceed to scaffold '{name}' from '{source}' replacing '{base}'?"):
        return None
    return name, source, base


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def main(argv: Sequence[str] | None = None, *, ask: Prompt = input) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    name, source, base = args.name, args.source, args.template_base
    if args.yes:
        if not source:
            parser.error("SOURCE is required when running non-interactively")
    else:
        try:
            answers = _interview(ask, name, source, base)
        except (EOFError, KeyboardInterrupt):
            print("\nAborted.", file=sys.stderr)
            return 1
        if answers is None:
            print("Aborted by user.")
            return 0
        name, source, base = answers

    try:
        config = ScaffoldConfig.from_name(
            name,
            source=source,
            template_base=base,
            destination=args.destination,
            dry_run=args.dry_run,
            init_repository=args.init_repository,
        )
        report = ProjectScaffolder().run(config)
    except ConfigurationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except (SourceReadError, GitError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    sys.stdout.write(report.render())
    if not report.ok:
        print(f"{len(report.failures)} writes failed", file=sys.stderr)
        return 1
    if config.dry_run:
        print("Dry run: nothing was written.")
    else:
        print(f"Project written to {config.destination}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
