"""Steps that replace a project file with the template repository's copy."""

from __future__ import annotations

from dataclasses import dataclass

from ..config import InstallerConfig
from .base import StepContext


@dataclass
class FetchTemplateStep:
    """Download ``filename`` from the template repository, overwriting it locally."""

    config: InstallerConfig
    context: StepContext
    name: str
    filename: str

    def announce(self) -> str:
        return f"Configuring {self.filename}"

    async def perform(self) -> None:
        await self.context.fetch_template(self.filename)


def configure_gitignore(config: InstallerConfig, context: StepContext) -> FetchTemplateStep:
    return FetchTemplateStep(config, context, name="configure-gitignore", filename=".gitignore")


def configure_phpunit(config: InstallerConfig, context: StepContext) -> FetchTemplateStep:
    return FetchTemplateStep(config, context, name="configure-phpunit", filename="phpunit.xml")
