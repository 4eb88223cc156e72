"""Laravel configurator configuration.

Two kinds of configuration live here:

* ``InstallerConfig`` -- the immutable record of the operator's answers.  It is
  built once by the collector and handed read-only to every step factory.
* ``Settings`` -- how the installer itself runs (project root, template
  source, composer binary).  Built from environment variables and CLI flags.

The prompt validators are plain functions returning an error message (or
``None`` when the value is acceptable) so the collector can re-prompt with the
message; the pydantic models reuse the same functions to reject invalid
records constructed in code.
"""

from __future__ import annotations

import os
import re
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError

DEFAULT_TEMPLATE_BASE_URL = (
    "https://raw.githubusercontent.com/laravel-configurator/templates/main"
)

COMPOSER_NAME_PATTERN = re.compile(
    r"^[a-z0-9]([_.-]?[a-z0-9]+)*/[a-z0-9](([_.]|-{1,2})?[a-z0-9]+)*$"
)

_email_adapter = TypeAdapter(EmailStr)
_url_adapter = TypeAdapter(HttpUrl)


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class BaseFile(str, Enum):
    """Documents that can be generated in the project root."""

    CHANGELOG = "CHANGELOG"
    README = "README"


class Tool(str, Enum):
    """Optional quality tooling, in catalog order."""

    PINT = "pint"
    PHPSTAN = "phpstan"
    PHPCODESNIFFER = "phpcodesniffer"
    INFECTION = "infection"
    PSL = "psl"
    SAFE = "safe"


# ---------------------------------------------------------------------------
# Prompt validators
# ---------------------------------------------------------------------------


def pascal_case_letters(value: str) -> str:
    """Drop every non-letter and upper-case the first remaining letter."""
    letters = re.sub(r"[^A-Za-z]", "", value)
    return letters[:1].upper() + letters[1:]


def validate_application_name(value: str) -> str | None:
    if not value or pascal_case_letters(value) != value:
        return "The application name must contain only letters and be written in PascalCase (e.g. MyApp)."
    return None


def validate_composer_name(value: str) -> str | None:
    if not COMPOSER_NAME_PATTERN.match(value or ""):
        return "The package name must look like vendor/package, in lowercase (e.g. acme/my-app)."
    return None


def validate_email(value: str) -> str | None:
    try:
        _email_adapter.validate_python(value)
    except PydanticValidationError:
        return f"'{value}' is not a valid email address."
    return None


def validate_homepage(value: str) -> str | None:
    try:
        url = _url_adapter.validate_python(value)
    except PydanticValidationError:
        return f"'{value}' is not a valid URL."
    if url.scheme != "https":
        return "The homepage must be an https:// URL."
    return None


def validate_required(value: str) -> str | None:
    if not (value or "").strip():
        return "A value is required."
    return None


def _raise_on_error(message: str | None, value: Any) -> Any:
    if message is not None:
        raise ValueError(message)
    return value


# ---------------------------------------------------------------------------
# Configuration record
# ---------------------------------------------------------------------------


class Author(BaseModel):
    """A single entry of the composer ``authors`` list."""

    model_config = ConfigDict(frozen=True)

    name: str
    email: str
    role: str = Field(default="Developer")
    homepage: str

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return _raise_on_error(validate_required(value), value)

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        return _raise_on_error(validate_email(value), value)

    @field_validator("homepage")
    @classmethod
    def _check_homepage(cls, value: str) -> str:
        return _raise_on_error(validate_homepage(value), value)

    def as_manifest_entry(self) -> dict[str, str]:
        """Return the author in composer's key order."""
        return {
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "homepage": self.homepage,
        }


class ComposerConfig(BaseModel):
    """Package metadata written into ``composer.json``."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = Field(default="")
    license: str = Field(default="MIT")
    authors: tuple[Author, ...] = Field(default_factory=tuple)

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return _raise_on_error(validate_composer_name(value), value)


class InstallerConfig(BaseModel):
    """Immutable snapshot of every answer collected from the operator.

    ``base_files`` and ``tools`` are normalised to catalog order and
    de-duplicated, so two records built from the same selections compare
    equal regardless of the order the operator typed them in.
    """

    model_config = ConfigDict(frozen=True)

    application_name: str
    base_files: tuple[BaseFile, ...] = Field(default=tuple(BaseFile))
    tools: tuple[Tool, ...] = Field(default=tuple(Tool))
    composer: ComposerConfig
    move_tinker: bool = Field(default=True)
    remove_frontend: bool = Field(default=True)

    @field_validator("application_name")
    @classmethod
    def _check_application_name(cls, value: str) -> str:
        return _raise_on_error(validate_application_name(value), value)

    @field_validator("base_files")
    @classmethod
    def _order_base_files(cls, value: tuple[BaseFile, ...]) -> tuple[BaseFile, ...]:
        return tuple(item for item in BaseFile if item in value)

    @field_validator("tools")
    @classmethod
    def _order_tools(cls, value: tuple[Tool, ...]) -> tuple[Tool, ...]:
        return tuple(item for item in Tool if item in value)

    @property
    def application_slug(self) -> str:
        """Lower-cased application name used for databases and prefixes."""
        return self.application_name.lower()

    def has_tool(self, tool: Tool) -> bool:
        return tool in self.tools

    def has_base_file(self, base_file: BaseFile) -> bool:
        return base_file in self.base_files


# ---------------------------------------------------------------------------
# Run settings
# ---------------------------------------------------------------------------


class Settings(BaseModel):
    """How the installer runs.

    Instances are created once by the CLI entry point and passed to
    ``run_installer``.  Every field can be overridden by an ``LC_*``
    environment variable or a command-line flag.
    """

    root: Path = Field(default=Path("."), description="Laravel project root")
    template_base_url: str = Field(default=DEFAULT_TEMPLATE_BASE_URL)
    composer: str = Field(default="composer", description="Composer executable")
    installer_path: Path | None = Field(
        default=None, description="File deleted once the installer finishes"
    )
    fetch_timeout: float = Field(default=30.0, ge=1, description="HTTP timeout in seconds")
    dry_run: bool = Field(default=False)

    @classmethod
    def from_env(cls, **overrides: Any) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            LC_ROOT, LC_TEMPLATE_URL, LC_COMPOSER, LC_FETCH_TIMEOUT.

        Keyword *overrides* whose value is not ``None`` win over the
        environment.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("LC_ROOT"):
            kwargs["root"] = Path(os.environ["LC_ROOT"])
        if os.environ.get("LC_TEMPLATE_URL"):
            kwargs["template_base_url"] = os.environ["LC_TEMPLATE_URL"]
        if os.environ.get("LC_COMPOSER"):
            kwargs["composer"] = os.environ["LC_COMPOSER"]
        if os.environ.get("LC_FETCH_TIMEOUT"):
            kwargs["fetch_timeout"] = float(os.environ["LC_FETCH_TIMEOUT"])

        kwargs.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**kwargs)
