"""Laravel configurator pipeline.

Runs the one-shot configuration of a freshly created Laravel skeleton:

1. COLLECT  -- ask the operator for the application details.
2. ASSEMBLE -- build the ordered step list from the answers.
3. EXECUTE  -- announce and perform each step, stopping at the first failure.
4. FINALIZE -- delete the installer file, whatever happened before.

Usage::

    python -m laravel_configurator
    python -m laravel_configurator --root ./my-app --dry-run
"""

from __future__ import annotations

import asyncio
import sys
import time
from collections.abc import Sequence
from pathlib import Path
from types import TracebackType
from typing import Protocol

from rich.panel import Panel
from rich.progress import Progress, TaskID

from .collector import Prompter, RichPrompter, collect_config
from .config import InstallerConfig, Settings
from .errors import ConfiguratorError, InstallationCancelled
from .runner import CommandRunner, SubprocessRunner
from .steps import Step, StepContext, assemble
from .templates import TemplateRenderer
from .utils import (
    console,
    create_progress,
    format_duration,
    print_error,
    print_header,
    print_success,
    print_summary_table,
    print_warning,
)

# ---------------------------------------------------------------------------
# Progress reporting
# ---------------------------------------------------------------------------


class ProgressReporter(Protocol):
    """Receives the label of each step before it runs."""

    def update(self, label: str) -> None:
        ...

    def advance(self) -> None:
        ...


class RichProgressReporter:
    """``ProgressReporter`` driving a single Rich progress task."""

    def __init__(self, progress: Progress, total: int) -> None:
        self.progress = progress
        self.task_id: TaskID = progress.add_task("Starting...", total=total)

    def update(self, label: str) -> None:
        self.progress.update(self.task_id, description=label)

    def advance(self) -> None:
        self.progress.advance(self.task_id)


# ---------------------------------------------------------------------------
# Executor
# ---------------------------------------------------------------------------


async def execute(steps: Sequence[Step], reporter: ProgressReporter) -> None:
    """Run *steps* strictly in order.

    Each step is announced, its label pushed to *reporter*, and then
    performed.  The first ``ConfiguratorError`` propagates unchanged and no
    later step runs.
    """
    for step in steps:
        label = step.announce()
        reporter.update(label)
        await step.perform()
        reporter.advance()


# ---------------------------------------------------------------------------
# Finalizer
# ---------------------------------------------------------------------------


class Finalizer:
    """Deletes the installer file when the guarded block exits.

    Used as a context manager around the whole run so the deletion happens on
    success, failure, cancellation and uncaught exceptions alike.  Cleanup
    runs at most once and never raises.
    """

    def __init__(self, installer_path: str | Path | None) -> None:
        self.installer_path = Path(installer_path) if installer_path else None
        self.done = False

    def __enter__(self) -> "Finalizer":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        self.cleanup()
        return False

    def cleanup(self) -> None:
        if self.done:
            return
        self.done = True
        if self.installer_path is None:
            return
        try:
            self.installer_path.unlink(missing_ok=True)
        except OSError as exc:
            print_warning(f"Could not delete installer {self.installer_path}: {exc}")


# ---------------------------------------------------------------------------
# Top-level run
# ---------------------------------------------------------------------------


def _describe(config: InstallerConfig) -> dict[str, str]:
    composer = config.composer
    return {
        "Application": config.application_name,
        "Package": composer.name,
        "Description": composer.description or "-",
        "License": composer.license,
        "Authors": ", ".join(f"{a.name} <{a.email}>" for a in composer.authors) or "-",
        "Base files": ", ".join(item.value for item in config.base_files) or "none",
        "Tools": ", ".join(item.value for item in config.tools) or "none",
        "Move tinker": "yes" if config.move_tinker else "no",
        "Remove frontend": "yes" if config.remove_frontend else "no",
    }


async def run_installer(
    settings: Settings,
    prompter: Prompter,
    runner: CommandRunner,
    renderer: TemplateRenderer | None = None,
) -> int:
    """Collect answers, run the pipeline and delete the installer.

    Returns:
        ``0`` when the pipeline completed or the operator cancelled, ``1``
        when a step failed.
    """
    # a dry run never deletes the installer
    with Finalizer(None if settings.dry_run else settings.installer_path):
        console.print(
            Panel(
                f"[bold bright_cyan]Laravel Configurator[/bold bright_cyan]\n"
                f"Project : {settings.root.resolve()}",
                title="[bold]Setup[/bold]",
                border_style="bright_cyan",
            )
        )

        try:
            print_header("Configuration")
            config = collect_config(prompter)
            print_summary_table(_describe(config), title="Configuration")
            if not prompter.confirm("Proceed with installation?", default=True):
                print_warning("Installation cancelled.")
                return 0
        except InstallationCancelled:
            console.print()
            print_warning("Installation cancelled.")
            return 0

        context = StepContext(
            root=settings.root,
            runner=runner,
            renderer=renderer or TemplateRenderer(),
            template_base_url=settings.template_base_url,
            composer=settings.composer,
        )
        steps = assemble(config, context)

        if settings.dry_run:
            print_summary_table(
                {str(index): step.announce() for index, step in enumerate(steps, 1)},
                title="Planned steps",
            )
            return 0

        print_header("Installation")
        started = time.monotonic()
        try:
            with create_progress() as progress:
                await execute(steps, RichProgressReporter(progress, len(steps)))
        except ConfiguratorError as exc:
            print_error(f"Installation failed: {exc}")
            return 1

        print_success(
            f"{config.application_name} configured in "
            f"{format_duration(time.monotonic() - started)} ({len(steps)} steps)."
        )
        return 0


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

_PACKAGE_DIR = Path(__file__).resolve().parent


def default_installer_path(script: str | None = None) -> Path | None:
    """Return the file to delete when no ``--installer-path`` is given.

    That is the script being run (``sys.argv[0]``), unless it lives inside
    this package, as ``__main__.py`` does under ``python -m``.  Such a run
    deletes nothing.
    """
    if not script:
        return None
    path = Path(script)
    if _PACKAGE_DIR in path.resolve().parents:
        return None
    return path


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``python -m laravel_configurator``."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="laravel-configurator",
        description="Configure a freshly created Laravel application",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  laravel-configurator\n"
            "  laravel-configurator --root ./my-app\n"
            "  laravel-configurator --dry-run\n"
        ),
    )
    parser.add_argument("--root", default=None, help="Project root (default: current directory)")
    parser.add_argument("--template-url", default=None, help="Base URL of the template files")
    parser.add_argument("--composer", default=None, help="Composer executable (default: composer)")
    parser.add_argument(
        "--installer-path",
        default=None,
        help=(
            "File deleted when the installer finishes (default: the running "
            "script; nothing is deleted under python -m laravel_configurator)"
        ),
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the planned steps without changing the project",
    )

    args = parser.parse_args(argv)

    settings = Settings.from_env(
        root=Path(args.root) if args.root else None,
        template_base_url=args.template_url,
        composer=args.composer,
        installer_path=(
            Path(args.installer_path)
            if args.installer_path
            else default_installer_path(sys.argv[0])
        ),
        dry_run=args.dry_run or None,
    )

    runner = SubprocessRunner(fetch_timeout=settings.fetch_timeout)
    sys.exit(asyncio.run(run_installer(settings, RichPrompter(), runner)))


if __name__ == "__main__":
    main()
