from dataclasses import dataclass, field
from typing import Final, Union

import numpy as np
from bitarray import bitarray  # type: ignore
from logger import log as _logger
from numpy.typing import NDArray

from chip8.constants import (
    ADDRESS_MASK,
    ENTRY_POINT,
    FONT_ADDRESS,
    FONT_SET,
    KEY_COUNT,
    MAX_PROGRAM_SIZE,
    MEMORY_SIZE,
    REGISTER_COUNT,
    STACK_SIZE,
)
from chip8.errors import ExecutionFault, LoadError
from chip8.resolution import Resolution

ProgramImage = Union[bytes, bytearray, memoryview, NDArray[np.uint8]]

_FONT: Final[NDArray[np.uint8]] = np.array(FONT_SET, dtype=np.uint8)


def _empty_keys() -> bitarray:
    keys = bitarray(KEY_COUNT)
    keys.setall(0)
    return keys


def _empty_framebuffer(resolution: Resolution) -> NDArray[np.uint8]:
    return np.zeros((resolution.height, resolution.width), dtype=np.uint8)


@dataclass(eq=False)
class MachineState:
    """
    Complete mutable state of the virtual CPU.

    Layout:
      - $000-$1FF: reserved, font glyphs for 0-F at $000
      - $200-$FFF: program image and working memory
    """

    resolution: Resolution = Resolution.CHIP8
    memory: NDArray[np.uint8] = field(default_factory=lambda: np.zeros(MEMORY_SIZE, dtype=np.uint8))
    V: NDArray[np.uint8] = field(default_factory=lambda: np.zeros(REGISTER_COUNT, dtype=np.uint8))
    I: int = 0
    pc: int = ENTRY_POINT
    stack: NDArray[np.uint16] = field(default_factory=lambda: np.zeros(STACK_SIZE, dtype=np.uint16))
    sp: int = 0  # occupied stack slots
    delay_timer: int = 0
    sound_timer: int = 0
    framebuffer: NDArray[np.uint8] = field(init=False)
    keys: bitarray = field(default_factory=_empty_keys)
    key_presses: bitarray = field(default_factory=_empty_keys)  # released -> pressed since the wait began
    waiting_for_key: bool = False

    def __post_init__(self) -> None:
        self.framebuffer = _empty_framebuffer(self.resolution)
        self.memory[FONT_ADDRESS : FONT_ADDRESS + len(_FONT)] = _FONT

    def __repr__(self) -> str:
        return (
            f"<MachineState {self.resolution.name} PC=${self.pc:03X} I=${self.I:04X} "
            f"SP={self.sp} DT={self.delay_timer} ST={self.sound_timer} "
            f"V=[{' '.join(f'{int(v):02X}' for v in self.V)}]>"
        )

    # Lifecycle

    def initialize(self, resolution: Resolution, program: ProgramImage) -> None:
        """
        Reset every region and place `program` at the entry point.

        Raises:
            LoadError: if the program does not fit between the entry point
                and the end of memory. The current state is left as it was.
        """
        image = np.frombuffer(bytes(program), dtype=np.uint8)
        if len(image) > MAX_PROGRAM_SIZE:
            raise LoadError(
                f"Program too large: {len(image)} bytes, at most {MAX_PROGRAM_SIZE} fit at ${ENTRY_POINT:03X}",
                size=len(image),
            )

        self.resolution = resolution
        self.memory = np.zeros(MEMORY_SIZE, dtype=np.uint8)
        self.memory[FONT_ADDRESS : FONT_ADDRESS + len(_FONT)] = _FONT
        self.memory[ENTRY_POINT : ENTRY_POINT + len(image)] = image
        self.V = np.zeros(REGISTER_COUNT, dtype=np.uint8)
        self.I = 0
        self.pc = ENTRY_POINT
        self.stack = np.zeros(STACK_SIZE, dtype=np.uint16)
        self.sp = 0
        self.delay_timer = 0
        self.sound_timer = 0
        self.framebuffer = _empty_framebuffer(resolution)
        self.keys = _empty_keys()
        self.key_presses = _empty_keys()
        self.waiting_for_key = False

        _logger.info(f"Machine initialized: {resolution}, program {len(image)} bytes at ${ENTRY_POINT:03X}")

    # Display / audio sinks

    @property
    def width(self) -> int:
        return self.resolution.width

    @property
    def height(self) -> int:
        return self.resolution.height

    @property
    def screen(self) -> NDArray[np.uint8]:
        """Read-only (height, width) view of the framebuffer, values 0 or 1."""
        view = self.framebuffer.view()
        view.flags.writeable = False
        return view

    @property
    def sound_active(self) -> bool:
        return self.sound_timer > 0

    # Input

    def set_key(self, index: int, pressed: bool) -> None:
        if not 0 <= index < KEY_COUNT:
            raise ValueError(f"Invalid key index {index}, expected 0-{KEY_COUNT - 1}")
        if pressed and not self.keys[index]:
            self.key_presses[index] = 1
        self.keys[index] = bool(pressed)

    def press(self, index: int) -> None:
        self.set_key(index, True)

    def release(self, index: int) -> None:
        self.set_key(index, False)

    def is_pressed(self, index: int) -> bool:
        return bool(self.keys[index & 0xF])

    def begin_key_wait(self) -> None:
        """Start listening for a new key press; keys already held do not count."""
        self.key_presses.setall(0)
        self.waiting_for_key = True

    def take_key_press(self) -> int:
        """
        Lowest key pressed since `begin_key_wait`, or -1 when none was.
        A returned press ends the wait.
        """
        try:
            key = self.key_presses.index(1)
        except ValueError:
            return -1
        self.key_presses.setall(0)
        self.waiting_for_key = False
        return key

    # Timers

    def tick_timers(self) -> None:
        """One 60 Hz tick: both timers count down to zero and stay there."""
        if self.delay_timer > 0:
            self.delay_timer -= 1
        if self.sound_timer > 0:
            self.sound_timer -= 1

    # Memory

    def read_byte(self, address: int) -> int:
        return int(self.memory[address & ADDRESS_MASK])

    def write_byte(self, address: int, value: int) -> None:
        addr = address & ADDRESS_MASK
        if addr < ENTRY_POINT:
            raise ExecutionFault(f"Write to reserved address ${addr:03X}")
        self.memory[addr] = value & 0xFF

    def read_word(self, address: int) -> int:
        """Big-endian 16-bit read."""
        return (self.read_byte(address) << 8) | self.read_byte(address + 1)

    # Stack

    def push(self, address: int) -> None:
        if self.sp >= STACK_SIZE:
            raise ExecutionFault(f"Stack overflow (depth {self.sp})")
        self.stack[self.sp] = address & 0xFFFF
        self.sp += 1

    def pop(self) -> int:
        if self.sp <= 0:
            raise ExecutionFault("Stack underflow")
        self.sp -= 1
        return int(self.stack[self.sp])
