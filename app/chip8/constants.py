from typing import Final, Tuple

MEMORY_SIZE: Final[int] = 0x1000  # 4 KB
ADDRESS_MASK: Final[int] = MEMORY_SIZE - 1
ENTRY_POINT: Final[int] = 0x200  # programs are loaded (and start) here
MAX_PROGRAM_SIZE: Final[int] = MEMORY_SIZE - ENTRY_POINT

REGISTER_COUNT: Final[int] = 0x10
FLAG_REGISTER: Final[int] = 0xF  # VF
STACK_SIZE: Final[int] = 0x10
KEY_COUNT: Final[int] = 0x10

INSTRUCTION_SIZE: Final[int] = 2  # bytes per instruction word
TIMER_HZ: Final[int] = 60

FONT_ADDRESS: Final[int] = 0x000
FONT_GLYPH_SIZE: Final[int] = 5
FONT_SET: Final[Tuple[int, ...]] = (
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
)
