from typing import Final, Optional


class Chip8Error(Exception):
    """Base exception for all CHIP-8 interpreter errors."""

    pass


class LoadError(Chip8Error):
    """The program image cannot be placed in memory."""

    def __init__(self, message: str, size: Optional[int] = None):
        self.size: Final[Optional[int]] = size
        super().__init__(message)


class ExecutionFault(Chip8Error):
    """
    An instruction could not be carried out (stack overflow/underflow,
    unknown instruction word, write into the reserved font region).
    """

    def __init__(self, message: str, pc: Optional[int] = None, word: Optional[int] = None):
        self.pc: Optional[int] = pc
        self.word: Optional[int] = word
        super().__init__(message)

    def __str__(self) -> str:
        message = super().__str__()
        if self.pc is None:
            return message
        if self.word is None:
            return f"${self.pc:03X}: {message}"
        return f"${self.pc:03X} [{self.word:04X}]: {message}"
