from pathlib import Path
from typing import Final, Optional, Tuple, Union

import numpy as np
from logger import log
from numpy.typing import NDArray
from returns.result import Failure, Result, Success

from chip8.constants import ENTRY_POINT, MAX_PROGRAM_SIZE
from chip8.machine import ProgramImage


class Rom:
    """
    A raw CHIP-8 program image.

    CHIP-8 programs carry no header: the file is copied byte for byte to
    memory starting at $200, so the only check is that it fits.
    """

    MAX_SIZE: Final[int] = MAX_PROGRAM_SIZE
    LOAD_ADDRESS: Final[int] = ENTRY_POINT

    def __init__(self) -> None:
        self.file: str = ""
        self.data: NDArray[np.uint8] = np.zeros(0, dtype=np.uint8)

    def __repr__(self) -> str:
        return f"<Rom file={self.file!r} size={len(self.data)} bytes>"

    def __len__(self) -> int:
        return len(self.data)

    def __bytes__(self) -> bytes:
        return self.data.tobytes()

    @property
    def name(self) -> str:
        return Path(self.file).stem if self.file else "<memory>"

    @classmethod
    def from_bytes(cls, data: ProgramImage) -> Result["Rom", str]:
        """
        Validate a program image held in memory.

        Accepts the same image types as `MachineState.initialize`. An empty
        image is refused; `initialize` takes one to set up a blank machine.

        Returns:
            Result containing either a Rom instance or an error string.
        """
        if isinstance(data, np.ndarray):
            if data.dtype != np.uint8 or data.ndim != 1:
                return Failure(f"Expected a 1-D uint8 array, got {data.dtype} with shape {data.shape}")
        elif not isinstance(data, (bytes, bytearray, memoryview)):
            return Failure(f"Expected a program image, got {type(data).__name__}")

        if len(data) == 0:
            return Failure("ROM is empty")

        if len(data) > cls.MAX_SIZE:
            return Failure(f"ROM too large: {len(data)} bytes, maximum {cls.MAX_SIZE}")

        if len(data) % 2:
            log.debug(f"ROM has odd length ({len(data)} bytes), last instruction is truncated")

        obj = cls()
        obj.data = np.frombuffer(bytes(data), dtype=np.uint8).copy()
        return Success(obj)

    @classmethod
    def from_file(cls, filepath: Union[Path, str]) -> Result["Rom", str]:
        """
        Load a program image from a file path.

        Returns:
            Result containing either a Rom instance or an error string.
        """
        try:
            with open(filepath, "rb") as f:
                data = f.read()
        except OSError as e:
            return Failure(f"Failed to read file {filepath}: {e}")

        def attach_file(rom: "Rom") -> "Rom":
            rom.file = str(filepath)
            return rom

        return cls.from_bytes(data).map(attach_file)

    @classmethod
    def is_valid_file(cls, filepath: Union[Path, str]) -> Tuple[bool, Optional[str]]:
        """
        Check if a file can be loaded as a program.

        Returns:
            (is_valid, error_message); error_message is None when valid.
        """
        result = cls.from_file(filepath)
        if isinstance(result, Success):
            return True, None
        return False, result.failure()
