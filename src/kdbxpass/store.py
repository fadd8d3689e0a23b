"""Secret store sinks.

This module defines the SecretStore protocol that the exporter writes
through, and PassStore, which persists into the ``pass`` password store
by running ``pass insert`` once per write.

Third parties can implement the protocol without importing kdbxpass.
An in-memory implementation for tests lives in kdbxpass.testing.
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable

from .exceptions import StoreWriteError

logger = logging.getLogger(__name__)


@runtime_checkable
class SecretStore(Protocol):
    """Protocol for secret store sinks.

    A write stores ``payload`` under ``path``, overwriting or merging
    according to the store's own semantics. Writes are synchronous; the
    exporter never retries them.
    """

    def write(self, path: str, payload: bytes) -> None:
        """Store payload bytes under path.

        Args:
            path: "/"-separated store path
            payload: Bytes to store

        Raises:
            StoreWriteError: If the store rejects the write
        """
        ...


@dataclass(frozen=True, slots=True)
class PassStoreConfig:
    """Configuration for the ``pass`` store.

    Attributes:
        command: Executable to run (name on PATH or absolute path)
        store_dir: Password store directory. None uses PASSWORD_STORE_DIR
            from the environment, or pass's own default.
        force: Overwrite existing secrets without prompting
    """

    command: str = "pass"
    store_dir: Path | None = field(
        default_factory=lambda: (
            Path(os.environ["PASSWORD_STORE_DIR"])
            if os.environ.get("PASSWORD_STORE_DIR")
            else None
        )
    )
    force: bool = True

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not self.command:
            raise ValueError("pass command must not be empty")


class PassStore:
    """Writes secrets with ``pass insert --multiline``.

    The payload is passed on stdin, so binary attachments are stored
    byte-for-byte. A non-zero exit status or a failure to start the
    command is reported as StoreWriteError.

    Example:
        >>> store = PassStore()
        >>> store.write("Personal/Bank", b"secret123\\n")
    """

    def __init__(self, config: PassStoreConfig | None = None) -> None:
        self._config = config or PassStoreConfig()

    @property
    def config(self) -> PassStoreConfig:
        """Get the store configuration."""
        return self._config

    def _command(self, path: str) -> list[str]:
        cmd = [self._config.command, "insert", "--multiline"]
        if self._config.force:
            cmd.append("--force")
        cmd.append(path)
        return cmd

    def _env(self) -> dict[str, str]:
        env = dict(os.environ)
        if self._config.store_dir is not None:
            env["PASSWORD_STORE_DIR"] = str(self._config.store_dir)
        return env

    def write(self, path: str, payload: bytes) -> None:
        """Insert payload under path, blocking until pass exits.

        Raises:
            StoreWriteError: If pass can't be started or exits non-zero
        """
        try:
            result = subprocess.run(
                self._command(path),
                input=payload,
                capture_output=True,
                env=self._env(),
                check=False,
            )
        except OSError as e:
            raise StoreWriteError(path, f"cannot run {self._config.command!r}: {e}") from e

        output = result.stdout.decode("utf-8", errors="replace").strip()
        if output:
            logger.debug("pass output for %s: %s", path, output)

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            detail = f"{self._config.command} exited with status {result.returncode}"
            if stderr:
                detail = f"{detail}: {stderr}"
            raise StoreWriteError(path, detail)

    def __repr__(self) -> str:
        return f"PassStore(command={self._config.command!r}, store_dir={self._config.store_dir})"
