import sys
from pathlib import Path
from typing import Callable

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from chip8.engine import Engine  # noqa: E402
from chip8.machine import MachineState  # noqa: E402
from chip8.resolution import Resolution  # noqa: E402


def assemble(*words: int) -> bytes:
    """Pack 16-bit instruction words big-endian."""
    return b"".join(word.to_bytes(2, "big") for word in words)


@pytest.fixture
def state() -> MachineState:
    return MachineState(Resolution.CHIP8)


@pytest.fixture
def engine() -> Engine:
    return Engine(rng=np.random.default_rng(1234))


@pytest.fixture
def strict_engine() -> Engine:
    return Engine(rng=np.random.default_rng(1234), strict=True)


@pytest.fixture
def machine(state: MachineState, engine: Engine) -> Callable[..., MachineState]:
    """Load instruction words at the entry point and return the state."""

    def _load(*words: int, resolution: Resolution = Resolution.CHIP8) -> MachineState:
        state.initialize(resolution, assemble(*words))
        return state

    return _load


@pytest.fixture
def asm() -> Callable[..., bytes]:
    return assemble
