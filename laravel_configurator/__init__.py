"""Laravel configurator -- one-shot setup of a fresh Laravel skeleton.

Collects the application details from the operator, then runs an ordered,
conditionally assembled list of steps (rename the app, fetch standard config
files, install quality tooling, rewrite ``composer.json``, strip frontend
scaffolding) and deletes the installer once done.

Quick usage::

    from laravel_configurator import Settings, run_installer
    from laravel_configurator.collector import RichPrompter
    from laravel_configurator.runner import SubprocessRunner

    exit_code = await run_installer(Settings(), RichPrompter(), SubprocessRunner())
"""

from laravel_configurator.config import InstallerConfig, Settings
from laravel_configurator.pipeline import Finalizer, execute, run_installer
from laravel_configurator.steps import assemble, step_names

__all__ = [
    "Finalizer",
    "InstallerConfig",
    "Settings",
    "assemble",
    "execute",
    "run_installer",
    "step_names",
]
