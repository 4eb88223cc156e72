"""Steps that only touch local project files.

A missing target file is not an error for the rename and document steps: the
skeleton may already have been trimmed by hand.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass

from ..config import InstallerConfig
from ..utils import replace_in_file
from .base import StepContext, filesystem_errors
from .manifest import script_summaries

FRONTEND_FILES = (
    "package.json",
    "package-lock.json",
    "postcss.config.js",
    "tailwind.config.js",
    "vite.config.js",
    "resources/views/welcome.blade.php",
)

FRONTEND_DIRECTORIES = (
    "resources/css",
    "resources/js",
)

API_VERSION = "1.0.0"


def rename_replacements(config: InstallerConfig) -> dict[str, dict[str, str]]:
    """Return ``{relative path: {placeholder: replacement}}`` for the rename step."""
    name = config.application_name
    slug = config.application_slug

    env_file = {
        "APP_NAME=Laravel": f"APP_NAME={name}",
        "DB_DATABASE=laravel": f"DB_DATABASE={slug}",
    }
    app_name_prefix = {
        "env('APP_NAME', 'laravel')": f"env('APP_NAME', '{slug}')",
    }

    return {
        ".env": env_file,
        ".env.example": env_file,
        "config/app.php": {
            "env('APP_NAME', 'Laravel')": f"env('APP_NAME', '{name}')",
        },
        "config/cache.php": app_name_prefix,
        "config/database.php": {
            "env('DB_DATABASE', 'laravel')": f"env('DB_DATABASE', '{slug}')",
            **app_name_prefix,
        },
        "config/session.php": app_name_prefix,
    }


@dataclass
class RenameApplicationStep:
    config: InstallerConfig
    context: StepContext
    name: str = "rename-application"

    def announce(self) -> str:
        return f"Renaming application to {self.config.application_name}"

    async def perform(self) -> None:
        for relative, replacements in rename_replacements(self.config).items():
            path = self.context.path(relative)
            with filesystem_errors(path, "rewrite file"):
                replace_in_file(path, replacements)


@dataclass
class CreateChangelogStep:
    config: InstallerConfig
    context: StepContext
    name: str = "create-changelog"

    def announce(self) -> str:
        return "Creating CHANGELOG.md"

    async def perform(self) -> None:
        path = self.context.path("CHANGELOG.md")
        with filesystem_errors(path, "write changelog"):
            await self.context.renderer.render_to_file(
                "CHANGELOG.md.j2", path, {"package_name": self.config.composer.name}
            )


@dataclass
class CreateReadmeStep:
    config: InstallerConfig
    context: StepContext
    name: str = "create-readme"

    def announce(self) -> str:
        return "Creating README.md"

    async def perform(self) -> None:
        composer = self.config.composer
        path = self.context.path("README.md")
        with filesystem_errors(path, "write readme"):
            await self.context.renderer.render_to_file(
                "README.md.j2",
                path,
                {
                    "application_name": self.config.application_name,
                    "package_name": composer.name,
                    "description": composer.description,
                    "license": composer.license,
                    "authors": composer.authors,
                    "scripts": script_summaries(self.config),
                },
            )


@dataclass
class RemoveFrontendStep:
    config: InstallerConfig
    context: StepContext
    name: str = "remove-frontend"

    def announce(self) -> str:
        return "Removing frontend scaffolding"

    async def perform(self) -> None:
        for relative in FRONTEND_FILES:
            path = self.context.path(relative)
            with filesystem_errors(path, "delete file"):
                path.unlink(missing_ok=True)

        for relative in FRONTEND_DIRECTORIES:
            path = self.context.path(relative)
            if path.is_dir():
                with filesystem_errors(path, "delete directory"):
                    shutil.rmtree(path)

        keep = self.context.path("resources/views/.gitkeep")
        with filesystem_errors(keep, "write file"):
            keep.parent.mkdir(parents=True, exist_ok=True)
            keep.write_text("", encoding="utf-8")

        routes = self.context.path("routes/web.php")
        with filesystem_errors(routes, "write route file"):
            await self.context.renderer.render_to_file(
                "web.php.j2",
                routes,
                {"application_name": self.config.application_name, "version": API_VERSION},
            )
