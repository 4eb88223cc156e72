"""Rewrite of the project's ``composer.json``.

The step owns ``name``, ``description``, ``license``, ``authors`` and the
generated part of ``scripts``.  Every other key is carried over unchanged (or
given composer's default when absent) and the output keeps composer's
conventional key order.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..config import InstallerConfig, Tool
from ..errors import ManifestParseError
from ..utils import load_json, save_json
from .base import StepContext, filesystem_errors

MANIFEST_FILE = "composer.json"

# Keys written in this order; the value is the default used when absent.
# ``None`` marks keys filled from the configuration.
MANIFEST_LAYOUT: tuple[tuple[str, Any], ...] = (
    ("$schema", "https://getcomposer.org/schema.json"),
    ("name", None),
    ("type", "project"),
    ("description", None),
    ("license", None),
    ("authors", None),
    ("require", {}),
    ("require-dev", {}),
    ("autoload", {}),
    ("autoload-dev", {}),
    ("scripts", None),
    ("extra", {}),
    ("config", {}),
    ("minimum-stability", "stable"),
    ("prefer-stable", True),
)

SCRIPT_DESCRIPTIONS: dict[str, str] = {
    "lint": "Check code style with Pint",
    "lint:fix": "Fix code style with Pint",
    "lint:dirty": "Check code style of uncommitted files",
    "lint:dirty:fix": "Fix code style of uncommitted files",
    "sniff": "Check coding standard with PHP_CodeSniffer",
    "sniff:fix": "Fix coding standard violations",
    "analyze:phpstan": "Run PHPStan static analysis",
    "test": "Run the test suite",
    "test:mutate": "Run Infection mutation testing",
    "code:check": "Run every configured check",
}


def generate_scripts(config: InstallerConfig) -> dict[str, str | list[str]]:
    """Build the ``scripts`` entries for the selected tools."""
    scripts: dict[str, str | list[str]] = {}
    check: list[str] = []

    if config.has_tool(Tool.PINT):
        scripts["lint"] = "pint --test"
        scripts["lint:fix"] = "pint"
        scripts["lint:dirty"] = "pint --test --dirty"
        scripts["lint:dirty:fix"] = "pint --dirty"
        check.append("@lint")

    if config.has_tool(Tool.PHPCODESNIFFER):
        scripts["sniff"] = "phpcs"
        scripts["sniff:fix"] = "phpcbf"
        check.append("@sniff")

    if config.has_tool(Tool.PHPSTAN):
        scripts["analyze:phpstan"] = "phpstan analyse --memory-limit=2G"
        check.append("@analyze:phpstan")

    scripts["test"] = "@php artisan test"
    check.append("@test")

    if config.has_tool(Tool.INFECTION):
        scripts["test:mutate"] = [
            "@putenv XDEBUG_MODE=coverage",
            "infection --threads=max --show-mutations",
        ]
        check.append("@test:mutate")

    scripts["code:check"] = check
    return scripts


def script_summaries(config: InstallerConfig) -> list[dict[str, str]]:
    """Return ``[{name, description}]`` for every generated script."""
    return [
        {"name": name, "description": SCRIPT_DESCRIPTIONS.get(name, "")}
        for name in generate_scripts(config)
    ]


def build_manifest(existing: dict[str, Any], config: InstallerConfig) -> dict[str, Any]:
    """Merge the configuration into an existing manifest.

    Generated scripts are written after pre-existing ones, so a generated key
    replaces an existing script of the same name.
    """
    composer = config.composer
    owned: dict[str, Any] = {
        "name": composer.name,
        "description": composer.description,
        "license": composer.license,
        "authors": [author.as_manifest_entry() for author in composer.authors],
        "scripts": {**(existing.get("scripts") or {}), **generate_scripts(config)},
    }

    manifest: dict[str, Any] = {}
    for key, default in MANIFEST_LAYOUT:
        if key in owned:
            manifest[key] = owned[key]
        else:
            manifest[key] = existing.get(key, default)

    for key, value in existing.items():
        if key not in manifest:
            manifest[key] = value
    return manifest


def read_manifest(path: Path) -> dict[str, Any]:
    """Load ``composer.json`` or raise ``ManifestParseError``."""
    try:
        data = load_json(path)
    except FileNotFoundError as exc:
        raise ManifestParseError(path, "file not found") from exc
    except json.JSONDecodeError as exc:
        raise ManifestParseError(path, f"invalid JSON ({exc.msg} at line {exc.lineno})") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestParseError(path, str(exc)) from exc

    if not isinstance(data, dict):
        raise ManifestParseError(path, "top-level value is not an object")
    if data.get("scripts") is not None and not isinstance(data["scripts"], dict):
        raise ManifestParseError(path, "'scripts' is not an object")
    return data


@dataclass
class ConfigureComposerStep:
    config: InstallerConfig
    context: StepContext
    name: str = "configure-composer"

    def announce(self) -> str:
        return "Configuring composer.json"

    async def perform(self) -> None:
        path = self.context.path(MANIFEST_FILE)
        manifest = build_manifest(read_manifest(path), self.config)
        with filesystem_errors(path, "write composer manifest"):
            save_json(manifest, path)
