"""Request-scoped temporary files handed to and from the encoder."""

from __future__ import annotations

import logging
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class StagedFile:
    input_path: Path
    output_path: Path

    def paths(self) -> tuple[Path, Path]:
        return self.input_path, self.output_path


class StagingArea:
    """Allocates uniquely named staged files and deletes them on exit.

    Nothing touches the filesystem until ``allocate`` is called, and
    ``cleanup`` removes every allocated path whether or not it was written.
    Use it as a context manager so cleanup runs on every exit path.
    """

    def __init__(self, directory: str | Path, *, input_suffix: str = ".m4a") -> None:
        self._directory = Path(directory)
        self._input_suffix = input_suffix
        self._allocated: List[StagedFile] = []

    @property
    def allocated(self) -> List[StagedFile]:
        return list(self._allocated)

    def allocate(self, output_suffix: str) -> StagedFile:
        token = f"{time.time_ns()}-{secrets.token_hex(4)}"
        staged = StagedFile(
            input_path=self._directory / f"input-{token}{self._input_suffix}",
            output_path=self._directory / f"output-{token}{output_suffix}",
        )
        self._allocated.append(staged)
        return staged

    def cleanup(self) -> None:
        while self._allocated:
            staged = self._allocated.pop()
            for path in staged.paths():
                _unlink_quietly(path)

    def __enter__(self) -> "StagingArea":
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.cleanup()
        return None


def _unlink_quietly(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.debug("relay.staging.unlink_failed", extra={"path": str(path), "error": repr(exc)})


__all__ = ["StagedFile", "StagingArea"]
