from chip8.constants import ENTRY_POINT, MAX_PROGRAM_SIZE, MEMORY_SIZE
from chip8.engine import Engine
from chip8.errors import Chip8Error, ExecutionFault, LoadError
from chip8.instruction import Instruction, Op, decode
from chip8.interpreter import Interpreter
from chip8.machine import MachineState
from chip8.resolution import Resolution
from chip8.rom import Rom

__all__ = [
    "ENTRY_POINT",
    "MAX_PROGRAM_SIZE",
    "MEMORY_SIZE",
    "Chip8Error",
    "Engine",
    "ExecutionFault",
    "Instruction",
    "Interpreter",
    "LoadError",
    "MachineState",
    "Op",
    "Resolution",
    "Rom",
    "decode",
]
