"""Step protocol and the context every step factory receives."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from ..config import InstallerConfig
from ..errors import FileSystemError
from ..runner import CommandRunner, run_checked
from ..templates import TemplateRenderer


class Step(Protocol):
    """One unit of the installation pipeline.

    ``announce`` is fast and side-effect free apart from returning the label
    shown in the progress indicator.  ``perform`` does the actual work and
    raises a ``ConfiguratorError`` subclass on failure.  A step runs at most
    once.
    """

    name: str

    def announce(self) -> str:
        ...

    async def perform(self) -> None:
        ...


@dataclass(frozen=True)
class StepContext:
    """Collaborators shared by all steps of one run."""

    root: Path
    runner: CommandRunner
    renderer: TemplateRenderer
    template_base_url: str
    composer: str = "composer"

    def path(self, relative: str) -> Path:
        return self.root / relative

    def template_url(self, filename: str) -> str:
        return f"{self.template_base_url.rstrip('/')}/{filename}"

    async def composer_require(self, packages: list[str], *, dev: bool = False) -> None:
        argv = [self.composer, "require", *packages]
        if dev:
            argv.append("--dev")
        argv.append("--no-interaction")
        await run_checked(self.runner, argv, cwd=self.root)

    async def composer_run(self, *args: str) -> None:
        await run_checked(
            self.runner, [self.composer, *args, "--no-interaction"], cwd=self.root
        )

    async def fetch_template(self, filename: str, destination: str | None = None) -> None:
        await self.runner.fetch(
            self.template_url(filename), self.path(destination or filename)
        )


StepFactory = Callable[[InstallerConfig, StepContext], Step]
StepPredicate = Callable[[InstallerConfig], bool]


@dataclass(frozen=True)
class StepDescriptor:
    """Catalog entry: when a step is included and how it is built."""

    name: str
    predicate: StepPredicate
    factory: StepFactory


def always(config: InstallerConfig) -> bool:
    return True


@contextmanager
def filesystem_errors(path: Path, action: str) -> Iterator[None]:
    """Translate ``OSError`` raised inside the block into ``FileSystemError``."""
    try:
        yield
    except OSError as exc:
        reason = exc.strerror or str(exc)
        raise FileSystemError(path, f"Cannot {action} ({reason})") from exc
