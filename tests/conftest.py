"""Shared pytest fixtures for the Laravel configurator test suite.

Provides reusable fixtures for:
- A minimal Laravel skeleton in a temporary directory
- Configuration records with sensible defaults
- A recording fake command runner (no subprocesses, no network)
- A recording progress reporter
- A scripted prompter replaying operator answers
"""

from __future__ import annotations

import json
import textwrap
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest

from laravel_configurator.config import (
    Author,
    BaseFile,
    ComposerConfig,
    InstallerConfig,
    Tool,
)
from laravel_configurator.errors import FetchError, InstallationCancelled
from laravel_configurator.runner import CommandResult
from laravel_configurator.steps import StepContext
from laravel_configurator.templates import TemplateRenderer


TEMPLATE_BASE_URL = "https://templates.test/laravel"


# ---------------------------------------------------------------------------
# Laravel skeleton
# ---------------------------------------------------------------------------

SKELETON_COMPOSER: dict[str, Any] = {
    "$schema": "https://getcomposer.org/schema.json",
    "name": "laravel/laravel",
    "type": "project",
    "description": "The skeleton application for the Laravel framework.",
    "keywords": ["laravel", "framework"],
    "license": "MIT",
    "require": {
        "php": "^8.2",
        "laravel/framework": "^11.9",
        "laravel/tinker": "^2.9",
    },
    "require-dev": {
        "fakerphp/faker": "^1.23",
        "phpunit/phpunit": "^11.0.1",
    },
    "autoload": {
        "psr-4": {
            "App\\": "app/",
            "Database\\Factories\\": "database/factories/",
            "Database\\Seeders\\": "database/seeders/",
        }
    },
    "autoload-dev": {"psr-4": {"Tests\\": "tests/"}},
    "scripts": {
        "post-autoload-dump": [
            "Illuminate\\Foundation\\ComposerScripts::postAutoloadDump",
            "@php artisan package:discover --ansi",
        ],
        "test": "phpunit",
    },
    "extra": {"laravel": {"dont-discover": []}},
    "config": {
        "optimize-autoloader": True,
        "preferred-install": "dist",
        "sort-packages": True,
        "allow-plugins": {"pestphp/pest-plugin": True, "php-http/discovery": True},
    },
    "minimum-stability": "stable",
    "prefer-stable": True,
}

SKELETON_FILES: dict[str, str] = {
    ".env": "APP_NAME=Laravel\nAPP_ENV=local\nDB_CONNECTION=sqlite\n# DB_DATABASE=laravel\n",
    ".env.example": "APP_NAME=Laravel\nAPP_ENV=local\nDB_CONNECTION=sqlite\n# DB_DATABASE=laravel\n",
    "config/app.php": "<?php\n\nreturn [\n    'name' => env('APP_NAME', 'Laravel'),\n];\n",
    "config/cache.php": (
        "<?php\n\nreturn [\n"
        "    'prefix' => env('CACHE_PREFIX', Str::slug(env('APP_NAME', 'laravel'), '_').'_cache_'),\n"
        "];\n"
    ),
    "config/database.php": (
        "<?php\n\nreturn [\n"
        "    'database' => env('DB_DATABASE', 'laravel'),\n"
        "    'prefix' => env('REDIS_PREFIX', Str::slug(env('APP_NAME', 'laravel'), '_').'_database_'),\n"
        "];\n"
    ),
    "config/session.php": (
        "<?php\n\nreturn [\n"
        "    'cookie' => env('SESSION_COOKIE', Str::slug(env('APP_NAME', 'laravel'), '_').'_session'),\n"
        "];\n"
    ),
    "package.json": '{\n    "private": true,\n    "type": "module"\n}\n',
    "package-lock.json": "{}\n",
    "postcss.config.js": "export default {};\n",
    "tailwind.config.js": "export default {};\n",
    "vite.config.js": "export default {};\n",
    "resources/css/app.css": "@tailwind base;\n",
    "resources/js/app.js": "import './bootstrap';\n",
    "resources/js/bootstrap.js": "import axios from 'axios';\n",
    "resources/views/welcome.blade.php": "<html></html>\n",
    "routes/web.php": textwrap.dedent(
        """\
        <?php

        use Illuminate\\Support\\Facades\\Route;

        Route::get('/', function () {
            return view('welcome');
        });
        """
    ),
}


@pytest.fixture
def skeleton_dir(tmp_path: Path) -> Path:
    """Temporary Laravel skeleton with the files the steps touch."""
    root = tmp_path / "laravel-app"
    for relative, content in SKELETON_FILES.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    (root / "composer.json").write_text(
        json.dumps(SKELETON_COMPOSER, indent=4), encoding="utf-8"
    )
    yield root


# ---------------------------------------------------------------------------
# Configuration records
# ---------------------------------------------------------------------------

def _build_config(**overrides: Any) -> InstallerConfig:
    composer_overrides = overrides.pop("composer", {})
    composer = ComposerConfig(
        **{
            "name": "acme/my-app",
            "description": "An application for Acme.",
            "license": "MIT",
            "authors": (
                Author(
                    name="Jane Doe",
                    email="jane@acme.io",
                    role="Developer",
                    homepage="https://acme.io",
                ),
            ),
            **composer_overrides,
        }
    )
    values: dict[str, Any] = {
        "application_name": "MyApp",
        "base_files": tuple(BaseFile),
        "tools": tuple(Tool),
        "composer": composer,
        "move_tinker": True,
        "remove_frontend": True,
    }
    values.update(overrides)
    return InstallerConfig(**values)


@pytest.fixture
def make_config() -> Callable[..., InstallerConfig]:
    """Factory building an ``InstallerConfig``; keyword arguments override defaults."""
    return _build_config


@pytest.fixture
def full_config() -> InstallerConfig:
    """Configuration with every optional step selected."""
    return _build_config()


@pytest.fixture
def minimal_config() -> InstallerConfig:
    """Configuration that selects no optional step."""
    return _build_config(
        application_name="Acme",
        base_files=(),
        tools=(),
        move_tinker=False,
        remove_frontend=False,
    )


# ---------------------------------------------------------------------------
# Fake runner
# ---------------------------------------------------------------------------

class FakeRunner:
    """``CommandRunner`` that records calls instead of spawning processes.

    Attributes:
        calls: Every argv passed to :meth:`run`.
        fetches: Every ``(url, destination)`` passed to :meth:`fetch`.
        events: Both of the above, interleaved in call order.
        fail_on: Substring of a joined argv that makes :meth:`run` exit 1.
        fetch_fail_on: URL suffix that makes :meth:`fetch` raise ``FetchError``.
    """

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.fetches: list[tuple[str, Path]] = []
        self.events: list[str] = []
        self.cwds: list[Path | None] = []
        self.fail_on: str | None = None
        self.fetch_fail_on: str | None = None

    async def run(self, argv: list[str], *, cwd: Path | None = None) -> CommandResult:
        self.calls.append(list(argv))
        self.cwds.append(cwd)
        joined = " ".join(argv)
        self.events.append(f"run {joined}")
        if self.fail_on is not None and self.fail_on in joined:
            return CommandResult(tuple(argv), 1, "", "Your requirements could not be resolved")
        return CommandResult(tuple(argv), 0, "", "")

    async def fetch(self, url: str, destination: Path) -> None:
        self.fetches.append((url, destination))
        self.events.append(f"fetch {url}")
        if self.fetch_fail_on is not None and url.endswith(self.fetch_fail_on):
            raise FetchError(url, "HTTP 404")
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(f"# fetched from {url}\n", encoding="utf-8")

    @property
    def required_packages(self) -> list[str]:
        """Packages named in every ``composer require`` call, in order."""
        packages: list[str] = []
        for argv in self.calls:
            if len(argv) > 1 and argv[1] == "require":
                packages.extend(arg for arg in argv[2:] if not arg.startswith("--"))
        return packages


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def step_context(skeleton_dir: Path, fake_runner: FakeRunner) -> StepContext:
    """Step context rooted at the skeleton, wired to the fake runner."""
    return StepContext(
        root=skeleton_dir,
        runner=fake_runner,
        renderer=TemplateRenderer(),
        template_base_url=TEMPLATE_BASE_URL,
        composer="composer",
    )


# ---------------------------------------------------------------------------
# Progress reporter
# ---------------------------------------------------------------------------

class RecordingReporter:
    """``ProgressReporter`` that keeps every label and advance."""

    def __init__(self) -> None:
        self.labels: list[str] = []
        self.advanced = 0

    def update(self, label: str) -> None:
        self.labels.append(label)

    def advance(self) -> None:
        self.advanced += 1


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


# ---------------------------------------------------------------------------
# Scripted prompter
# ---------------------------------------------------------------------------

class ScriptedPrompter:
    """``Prompter`` replaying a fixed list of answers.

    Text answers that fail their validator are recorded in ``errors`` and the
    next answer is consumed, mimicking a re-prompt.  Running out of answers
    raises ``InstallationCancelled`` like end-of-input would.
    """

    def __init__(self, answers: Sequence[Any]) -> None:
        self.answers = list(answers)
        self.labels: list[str] = []
        self.errors: list[str] = []

    def _next(self, label: str) -> Any:
        self.labels.append(label)
        if not self.answers:
            raise InstallationCancelled()
        return self.answers.pop(0)

    def text(self, label, *, default=None, validator=None) -> str:
        while True:
            answer = self._next(label)
            value = default if answer is None else answer
            error = validator(value) if validator else None
            if error is None:
                return value
            self.errors.append(error)

    def multiselect(self, label, options, *, default) -> list[str]:
        answer = self._next(label)
        chosen = list(default) if answer is None else list(answer)
        return [option for option in options if option in chosen]

    def confirm(self, label, *, default=True) -> bool:
        answer = self._next(label)
        return default if answer is None else bool(answer)


def _full_answers(*, proceed: bool = True) -> list[Any]:
    """Answers for a complete run that keeps every default selection."""
    return [
        "MyApp",            # application name
        None,               # base files (default: all)
        None,               # tools (default: all)
        "acme/my-app",      # composer name
        "An application for Acme.",
        None,               # license (default MIT)
        "Jane Doe",
        "jane@acme.io",
        None,               # role (default Developer)
        "https://acme.io",
        False,              # add another author?
        None,               # move tinker (default yes)
        None,               # remove frontend (default yes)
        proceed,            # proceed with installation?
    ]


@pytest.fixture
def full_answers() -> Callable[..., list[Any]]:
    """Factory returning the answers of a complete default run."""
    return _full_answers


@pytest.fixture
def scripted_prompter() -> Callable[[Sequence[Any]], ScriptedPrompter]:
    """Factory building a ``ScriptedPrompter`` from a list of answers."""
    return ScriptedPrompter
