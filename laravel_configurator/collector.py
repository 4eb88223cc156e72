"""Interactive collection of the installer configuration.

The collector asks every question in a fixed order through a ``Prompter`` and
returns one immutable ``InstallerConfig``.  Invalid answers are reported and
asked again; they never escape this module.  The only way out without a
configuration is ``InstallationCancelled`` (Ctrl-C or end of input).
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Protocol

from rich.prompt import Confirm, Prompt

from .config import (
    Author,
    BaseFile,
    ComposerConfig,
    InstallerConfig,
    Tool,
    validate_application_name,
    validate_composer_name,
    validate_email,
    validate_homepage,
    validate_required,
)
from .errors import InstallationCancelled
from .utils import console, print_warning

Validator = Callable[[str], "str | None"]


class Prompter(Protocol):
    """Terminal interaction used by the collector."""

    def text(
        self, label: str, *, default: str | None = None, validator: Validator | None = None
    ) -> str:
        ...

    def multiselect(
        self, label: str, options: Sequence[str], *, default: Sequence[str]
    ) -> list[str]:
        ...

    def confirm(self, label: str, *, default: bool = True) -> bool:
        ...


class RichPrompter:
    """``Prompter`` built on ``rich.prompt``.

    Multi-select questions take a comma-separated answer; ``all`` and ``none``
    are accepted as shortcuts.
    """

    def _ask(self, ask: Callable[[], object]):
        try:
            return ask()
        except (KeyboardInterrupt, EOFError) as exc:
            raise InstallationCancelled() from exc

    def text(
        self, label: str, *, default: str | None = None, validator: Validator | None = None
    ) -> str:
        kwargs: dict[str, object] = {"console": console}
        if default is not None:
            kwargs["default"] = default

        while True:
            value = str(self._ask(lambda: Prompt.ask(label, **kwargs)) or "").strip()
            error = validator(value) if validator else None
            if error is None:
                return value
            print_warning(error)

    def multiselect(
        self, label: str, options: Sequence[str], *, default: Sequence[str]
    ) -> list[str]:
        console.print(f"  [dim]Options: {', '.join(options)}[/dim]")
        default_answer = "all" if list(default) == list(options) else ", ".join(default)

        while True:
            answer = str(
                self._ask(lambda: Prompt.ask(label, default=default_answer, console=console))
            )
            selected, unknown = parse_selection(answer, options)
            if not unknown:
                return selected
            print_warning(f"Unknown option(s): {', '.join(unknown)}")

    def confirm(self, label: str, *, default: bool = True) -> bool:
        return bool(self._ask(lambda: Confirm.ask(label, default=default, console=console)))


def parse_selection(answer: str, options: Sequence[str]) -> tuple[list[str], list[str]]:
    """Split a comma-separated answer into (selected in option order, unknown)."""
    normalized = answer.strip().lower()
    if normalized == "all":
        return list(options), []
    if normalized in ("", "none"):
        return [], []

    lookup = {option.lower(): option for option in options}
    chosen: set[str] = set()
    unknown: list[str] = []
    for item in normalized.split(","):
        item = item.strip()
        if not item:
            continue
        if item in lookup:
            chosen.add(lookup[item])
        else:
            unknown.append(item)
    return [option for option in options if option in chosen], unknown


def _collect_authors(prompter: Prompter) -> tuple[Author, ...]:
    authors: list[Author] = []
    while True:
        authors.append(
            Author(
                name=prompter.text("Author name", validator=validate_required),
                email=prompter.text("Author email", validator=validate_email),
                role=prompter.text("Author role", default="Developer", validator=validate_required),
                homepage=prompter.text("Author homepage", validator=validate_homepage),
            )
        )
        if not prompter.confirm("Add another author?", default=False):
            return tuple(authors)


def collect_config(prompter: Prompter) -> InstallerConfig:
    """Ask every question and return the completed configuration.

    Raises:
        InstallationCancelled: If the operator aborts a prompt.
    """
    application_name = prompter.text(
        "Application name", validator=validate_application_name
    )

    base_file_options = [item.value for item in BaseFile]
    base_files = prompter.multiselect(
        "Base files to create", base_file_options, default=base_file_options
    )

    tool_options = [item.value for item in Tool]
    tools = prompter.multiselect("Tools to install", tool_options, default=tool_options)

    composer = ComposerConfig(
        name=prompter.text("Composer package name", validator=validate_composer_name),
        description=prompter.text("Composer description", default=""),
        license=prompter.text("License", default="MIT", validator=validate_required),
        authors=_collect_authors(prompter),
    )

    move_tinker = prompter.confirm("Move laravel/tinker to require-dev?", default=True)
    remove_frontend = prompter.confirm("Remove frontend scaffolding?", default=True)

    return InstallerConfig(
        application_name=application_name,
        base_files=tuple(BaseFile(item) for item in base_files),
        tools=tuple(Tool(item) for item in tools),
        composer=composer,
        move_tinker=move_tinker,
        remove_frontend=remove_frontend,
    )
