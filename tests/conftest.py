"""
Shared fixtures for audio-relay tests.
"""

import random
import sys
import textwrap
from pathlib import Path
from typing import Callable

import pytest


def make_audio_bytes(size: int, *, seed: int = 7) -> bytes:
    """Bytes shaped like an M4A file: ftyp box followed by noise."""
    header = b"\x00\x00\x00\x20ftypM4A \x00\x00\x02\x00M4A mp42isom\x00\x00\x00\x00"
    rng = random.Random(seed)
    body = bytes(rng.getrandbits(8) for _ in range(max(size - len(header), 0)))
    return (header + body)[:size]


@pytest.fixture
def audio_factory() -> Callable[..., bytes]:
    return make_audio_bytes


@pytest.fixture
def audio_bytes() -> bytes:
    return make_audio_bytes(9000)


@pytest.fixture
def staging_dir(tmp_path: Path) -> Path:
    path = tmp_path / "staging"
    path.mkdir()
    return path


@pytest.fixture
def fake_ffmpeg(tmp_path: Path) -> Callable[[str], str]:
    """Write an executable shell script standing in for ffmpeg.

    The script receives the encoder argument contract, so ``$2`` is the input
    path and ``$8`` the output path.
    """
    if sys.platform == "win32":
        pytest.skip("shell-script encoder stand-in requires a POSIX shell")

    def _write(body: str, name: str = "ffmpeg") -> str:
        script = tmp_path / "bin" / name
        script.parent.mkdir(exist_ok=True)
        script.write_text("#!/bin/sh\n" + textwrap.dedent(body).lstrip())
        script.chmod(0o755)
        return str(script)

    return _write


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: unit tests")
    config.addinivalue_line("markers", "slow: tests that spawn subprocesses")
