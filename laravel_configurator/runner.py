"""External process runner.

Steps never spawn processes or open network connections themselves; they go
through a ``CommandRunner`` so the pipeline can be exercised with a fake
runner that records invocations.  Downloading a template file is treated as a
special kind of command: it either succeeds silently or raises ``FetchError``.

Commands are awaited without a timeout.  A composer process that never exits
keeps the installer waiting.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import httpx

from .errors import FetchError, FileSystemError, ProcessError
from .utils import run_command


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a single external command."""

    argv: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner(Protocol):
    """Narrow interface over subprocess execution and template download."""

    async def run(self, argv: list[str], *, cwd: Path | None = None) -> CommandResult:
        ...

    async def fetch(self, url: str, destination: Path) -> None:
        ...


async def run_checked(
    runner: CommandRunner, argv: list[str], *, cwd: Path | None = None
) -> CommandResult:
    """Run *argv* and raise ``ProcessError`` if it exits non-zero."""
    result = await runner.run(argv, cwd=cwd)
    if not result.ok:
        raise ProcessError(list(result.argv), result.returncode, result.stderr)
    return result


class SubprocessRunner:
    """``CommandRunner`` backed by asyncio subprocesses and ``httpx``."""

    def __init__(self, fetch_timeout: float = 30.0) -> None:
        self.fetch_timeout = fetch_timeout

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our timeout."""
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.fetch_timeout, connect=10.0),
            follow_redirects=True,
        )

    async def run(self, argv: list[str], *, cwd: Path | None = None) -> CommandResult:
        returncode, stdout, stderr = await run_command(argv, cwd=cwd)
        return CommandResult(
            argv=tuple(argv), returncode=returncode, stdout=stdout, stderr=stderr
        )

    async def fetch(self, url: str, destination: Path) -> None:
        """Download *url* and write the body verbatim to *destination*.

        Raises:
            FetchError: On transport errors or a non-2xx response.
            FileSystemError: If the destination cannot be written.
        """
        try:
            async with self._client() as client:
                response = await client.get(url)
                response.raise_for_status()
                content = response.content
        except httpx.HTTPStatusError as exc:
            raise FetchError(url, f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise FetchError(url, str(exc) or type(exc).__name__) from exc

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(content)
        except OSError as exc:
            raise FileSystemError(destination, f"Cannot write downloaded file ({exc.strerror})") from exc
