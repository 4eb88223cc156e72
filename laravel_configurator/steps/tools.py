"""Steps that add packages through composer.

Each optional tool is described by a ``ToolPlan``; one generic step executes
any plan.  Composer itself decides how a package already present in
``require`` moves to ``require-dev``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..config import InstallerConfig, Tool
from .base import StepContext


@dataclass(frozen=True)
class ToolPlan:
    """What installing one tool involves.

    Attributes:
        label: Human-readable tool name for the progress indicator.
        packages: Packages required in one composer call.
        dev: Whether ``packages`` go to ``require-dev``.
        config_file: Template file fetched after installation, if any.
        plugins: Composer plugins allowed before requiring ``packages``.
        phpstan_companions: Dev packages added only when PHPStan is selected.
    """

    label: str
    packages: tuple[str, ...]
    dev: bool = True
    config_file: str | None = None
    plugins: tuple[str, ...] = field(default_factory=tuple)
    phpstan_companions: tuple[str, ...] = field(default_factory=tuple)


TOOL_PLANS: dict[Tool, ToolPlan] = {
    Tool.PINT: ToolPlan(
        label="Laravel Pint",
        packages=("laravel/pint",),
        config_file="pint.json",
    ),
    Tool.PHPSTAN: ToolPlan(
        label="PHPStan",
        packages=("larastan/larastan",),
        config_file="phpstan.neon",
    ),
    Tool.PHPCODESNIFFER: ToolPlan(
        label="PHP_CodeSniffer",
        packages=("squizlabs/php_codesniffer",),
        config_file="phpcs.xml",
    ),
    Tool.INFECTION: ToolPlan(
        label="Infection",
        packages=("infection/infection",),
        config_file="infection.json5",
        plugins=("infection/extension-installer",),
    ),
    Tool.PSL: ToolPlan(
        label="PHP Standard Library",
        packages=("azjezz/psl",),
        dev=False,
        phpstan_companions=("php-standard-library/phpstan-extension",),
    ),
    Tool.SAFE: ToolPlan(
        label="Safe",
        packages=("thecodingmachine/safe",),
        dev=False,
        phpstan_companions=("thecodingmachine/phpstan-safe-rule",),
    ),
}


@dataclass
class InstallToolStep:
    config: InstallerConfig
    context: StepContext
    tool: Tool

    @property
    def name(self) -> str:
        return f"install-{self.tool.value}"

    @property
    def plan(self) -> ToolPlan:
        return TOOL_PLANS[self.tool]

    def announce(self) -> str:
        return f"Installing {self.plan.label}"

    async def perform(self) -> None:
        plan = self.plan
        for plugin in plan.plugins:
            await self.context.composer_run(
                "config", "--no-plugins", f"allow-plugins.{plugin}", "true"
            )

        await self.context.composer_require(list(plan.packages), dev=plan.dev)

        if plan.phpstan_companions and self.config.has_tool(Tool.PHPSTAN):
            await self.context.composer_require(list(plan.phpstan_companions), dev=True)

        if plan.config_file:
            await self.context.fetch_template(plan.config_file)


def install_tool(tool: Tool):
    """Return a step factory installing *tool*."""

    def factory(config: InstallerConfig, context: StepContext) -> InstallToolStep:
        return InstallToolStep(config, context, tool)

    factory.__name__ = f"install_{tool.value}"
    return factory


@dataclass
class MoveTinkerStep:
    config: InstallerConfig
    context: StepContext
    name: str = "move-tinker"

    def announce(self) -> str:
        return "Moving laravel/tinker to require-dev"

    async def perform(self) -> None:
        await self.context.composer_require(["laravel/tinker"], dev=True)
