"""CLI - Command line interface for Resume Critic."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv
from rich.console import Console
from rich.prompt import Prompt

from .client import AnalysisClient
from .config import CritiqueConfig, Severity, has_errors, load_config, read_raw_config, validate_config
from .controller import View, ViewController
from .observability import AnalysisObserver
from .preparer import SUPPORTED_MIME_TYPES, DocumentFile, DocumentPreparer
from .render import ResultsRenderer

console = Console()

EXIT_OK = 0
EXIT_ANALYSIS_FAILED = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="resume-critic",
        description="Resume Critic - AI critique of a resume for a target role",
    )
    parser.add_argument("file", help="Resume to analyze (PDF or image)")
    parser.add_argument("--role", "-r", help="Target job role (one of the configured roles)")
    parser.add_argument(
        "--config", "-c",
        default="config/config.yaml",
        help="Path to configuration file",
    )
    parser.add_argument("--model", "-m", help="Override the configured model")
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet mode (no status or log output)",
    )
    return parser


def build_controller(config: CritiqueConfig, renderer: ResultsRenderer, quiet: bool = False) -> ViewController:
    observer = AnalysisObserver(verbose=config.verbose and not quiet)
    preparer = DocumentPreparer(max_dimension=config.max_image_dimension, jpeg_quality=config.jpeg_quality)
    client = AnalysisClient(
        api_key=config.api_key,
        model=config.model,
        timeout=config.request_timeout,
        observer=observer,
    )

    def show_status(message: str) -> None:
        if message and not quiet:
            console.print(message, style="dim")

    return ViewController(preparer, client, renderer=renderer, observer=observer, on_status=show_status)


def choose_role(requested: Optional[str], roles: List[str]) -> Optional[str]:
    if requested:
        matches = [r for r in roles if r.lower() == requested.strip().lower()]
        if not matches:
            console.print(f"Unknown role: {requested}. Expected one of: {', '.join(roles)}", style="red")
            return None
        return matches[0]
    return Prompt.ask("Target role", choices=roles, console=console)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    # Load environment variables from .env file
    load_dotenv(find_dotenv(usecwd=True))

    args = build_parser().parse_args(argv)

    try:
        raw_config = read_raw_config(args.config)
    except (OSError, ValueError) as e:
        console.print(f"Cannot load config {args.config}: {e}", style="red")
        return EXIT_CONFIG
    if args.model:
        raw_config["model"] = args.model

    issues = validate_config(raw_config)
    for issue in issues:
        style = "red" if issue.severity == Severity.ERROR else "yellow"
        console.print(f"[{issue.severity.value}] {issue.field}: {issue.message}", style=style, markup=False)
    if has_errors(issues):
        return EXIT_CONFIG

    config = load_config(args.config)
    if args.model:
        config.model = args.model

    path = Path(args.file)
    if not path.is_file():
        console.print(f"File not found: {path}", style="red")
        return EXIT_ANALYSIS_FAILED
    document = DocumentFile.from_path(path)
    if document.mime_type not in SUPPORTED_MIME_TYPES:
        console.print(f"Unsupported file type {document.mime_type}. Use a PDF or an image.", style="red")
        return EXIT_ANALYSIS_FAILED

    role = choose_role(args.role, config.roles)
    if not role:
        return EXIT_CONFIG

    renderer = ResultsRenderer(console)
    controller = build_controller(config, renderer, quiet=args.quiet)
    controller.navigate(View.UPLOAD)

    asyncio.run(controller.submit(document, role))

    if controller.state.last_error:
        renderer.render_error(controller.state.last_error)
        if controller.state.last_error_retryable:
            console.print("Resubmit to retry.", style="dim")
        return EXIT_ANALYSIS_FAILED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
