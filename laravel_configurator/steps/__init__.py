"""Step catalog and pipeline assembly.

``STEP_CATALOG`` is the fixed, ordered table of every step the installer knows
about.  Assembling a pipeline is a single filter-then-map pass over it, so the
same configuration always yields the same steps in the same order::

    from laravel_configurator.steps import assemble

    steps = assemble(config, context)
    [step.name for step in steps]
    # ['rename-application', 'configure-gitignore', 'configure-phpunit',
    #  'configure-composer', ...]
"""

from __future__ import annotations

from ..config import BaseFile, InstallerConfig, Tool
from .base import Step, StepContext, StepDescriptor, always
from .files import (
    CreateChangelogStep,
    CreateReadmeStep,
    RemoveFrontendStep,
    RenameApplicationStep,
)
from .manifest import ConfigureComposerStep
from .remote import configure_gitignore, configure_phpunit
from .tools import MoveTinkerStep, install_tool


def _tool_selected(tool: Tool):
    def predicate(config: InstallerConfig) -> bool:
        return config.has_tool(tool)

    return predicate


def _base_file_selected(base_file: BaseFile):
    def predicate(config: InstallerConfig) -> bool:
        return config.has_base_file(base_file)

    return predicate


STEP_CATALOG: tuple[StepDescriptor, ...] = (
    StepDescriptor("rename-application", always, RenameApplicationStep),
    StepDescriptor("configure-gitignore", always, configure_gitignore),
    StepDescriptor("configure-phpunit", always, configure_phpunit),
    StepDescriptor("configure-composer", always, ConfigureComposerStep),
    StepDescriptor("create-changelog", _base_file_selected(BaseFile.CHANGELOG), CreateChangelogStep),
    StepDescriptor("create-readme", _base_file_selected(BaseFile.README), CreateReadmeStep),
    *(
        StepDescriptor(f"install-{tool.value}", _tool_selected(tool), install_tool(tool))
        for tool in Tool
    ),
    StepDescriptor("move-tinker", lambda config: config.move_tinker, MoveTinkerStep),
    StepDescriptor("remove-frontend", lambda config: config.remove_frontend, RemoveFrontendStep),
)


def step_names(config: InstallerConfig) -> list[str]:
    """Names of the steps ``assemble`` would build, without building them."""
    return [entry.name for entry in STEP_CATALOG if entry.predicate(config)]


def assemble(config: InstallerConfig, context: StepContext) -> list[Step]:
    """Build the ordered pipeline for *config*."""
    return [
        entry.factory(config, context)
        for entry in STEP_CATALOG
        if entry.predicate(config)
    ]


__all__ = [
    "STEP_CATALOG",
    "Step",
    "StepContext",
    "StepDescriptor",
    "assemble",
    "step_names",
]
