from typing import Iterable, Optional

import numpy as np
from logger import log as _logger

from chip8.constants import (
    ADDRESS_MASK,
    ENTRY_POINT,
    FLAG_REGISTER,
    FONT_ADDRESS,
    FONT_GLYPH_SIZE,
    INSTRUCTION_SIZE,
    STACK_SIZE,
)
from chip8.errors import ExecutionFault
from chip8.instruction import Instruction, Op, decode
from chip8.machine import MachineState


class Engine:
    """
    Fetch-decode-execute for one instruction per `step`.

    The engine owns no machine state; it mutates the `MachineState` passed
    in. Execution faults (stack overflow/underflow, unknown words, writes
    into the font region) are logged and skipped, or raised as
    `ExecutionFault` when `strict` is set. A raised fault leaves the
    program counter on the faulting instruction.
    """

    def __init__(self, rng: Optional[np.random.Generator] = None, strict: bool = False) -> None:
        self.rng: np.random.Generator = rng if rng is not None else np.random.default_rng()
        self.strict: bool = strict

    def _fault(self, state: MachineState, instruction: Instruction, message: str) -> None:
        if self.strict:
            raise ExecutionFault(message, pc=state.pc, word=instruction.word)
        _logger.warning(f"${state.pc:03X} [{instruction.word:04X}] {message}, skipped")

    def _write_block(self, state: MachineState, instruction: Instruction, values: Iterable[int]) -> None:
        """Store `values` at I, I+1, ... dropping bytes that would land in the font region."""
        targets = [((state.I + offset) & ADDRESS_MASK, value) for offset, value in enumerate(values)]
        reserved = [addr for addr, _ in targets if addr < ENTRY_POINT]
        if reserved:
            self._fault(state, instruction, f"Write to reserved address ${reserved[0]:03X}")
        for addr, value in targets:
            if addr >= ENTRY_POINT:
                state.write_byte(addr, value)

    def _draw(self, state: MachineState, instruction: Instruction) -> None:
        """XOR-blit an N-row sprite from I; pixels wrap around both edges."""
        height, width = state.framebuffer.shape
        origin_x = int(state.V[instruction.x]) % width
        origin_y = int(state.V[instruction.y]) % height
        collision = 0

        for row in range(instruction.n):
            sprite_byte = state.read_byte(state.I + row)
            y = (origin_y + row) % height
            for bit in range(8):
                if sprite_byte & (0x80 >> bit):
                    x = (origin_x + bit) % width
                    if state.framebuffer[y, x]:
                        collision = 1
                    state.framebuffer[y, x] ^= 1

        state.V[FLAG_REGISTER] = collision

    def step(self, state: MachineState) -> Instruction:
        """Execute the instruction at PC and return it."""
        instruction = decode(state.read_word(state.pc))
        V = state.V
        x, y, kk, nnn = instruction.x, instruction.y, instruction.kk, instruction.nnn
        vx, vy = int(V[x]), int(V[y])
        pc = state.pc + INSTRUCTION_SIZE

        match instruction.op:
            case Op.CLS:
                state.framebuffer.fill(0)

            case Op.RET:
                if state.sp == 0:
                    self._fault(state, instruction, "Return with empty stack")
                else:
                    pc = state.pop()

            case Op.CALL:
                if state.sp >= STACK_SIZE:
                    self._fault(state, instruction, f"Call to ${nnn:03X} overflows the stack")
                else:
                    state.push(pc)
                    pc = nnn

            case Op.JP:
                pc = nnn

            case Op.JP_V0:
                pc = nnn + int(V[0])

            case Op.SE_BYTE:
                if vx == kk:
                    pc += INSTRUCTION_SIZE

            case Op.SNE_BYTE:
                if vx != kk:
                    pc += INSTRUCTION_SIZE

            case Op.SE_REG:
                if vx == vy:
                    pc += INSTRUCTION_SIZE

            case Op.SNE_REG:
                if vx != vy:
                    pc += INSTRUCTION_SIZE

            case Op.LD_BYTE:
                V[x] = kk

            case Op.ADD_BYTE:
                V[x] = (vx + kk) & 0xFF

            case Op.LD_REG:
                V[x] = vy

            case Op.OR:
                V[x] = vx | vy

            case Op.AND:
                V[x] = vx & vy

            case Op.XOR:
                V[x] = vx ^ vy

            # Flag ops write the result first and VF last, so VF holds the flag when X is F.
            case Op.ADD_REG:
                total = vx + vy
                V[x] = total & 0xFF
                V[FLAG_REGISTER] = 1 if total > 0xFF else 0

            case Op.SUB:
                V[x] = (vx - vy) & 0xFF
                V[FLAG_REGISTER] = 1 if vx > vy else 0

            case Op.SUBN:
                V[x] = (vy - vx) & 0xFF
                V[FLAG_REGISTER] = 1 if vy > vx else 0

            case Op.SHR:
                V[x] = vx >> 1
                V[FLAG_REGISTER] = vx & 0x01

            case Op.SHL:
                V[x] = (vx << 1) & 0xFF
                V[FLAG_REGISTER] = (vx >> 7) & 0x01

            case Op.LD_I:
                state.I = nnn

            case Op.RND:
                V[x] = int(self.rng.integers(0, 256)) & kk

            case Op.DRW:
                self._draw(state, instruction)

            case Op.SKP:
                if state.is_pressed(vx):
                    pc += INSTRUCTION_SIZE

            case Op.SKNP:
                if not state.is_pressed(vx):
                    pc += INSTRUCTION_SIZE

            case Op.LD_VX_DT:
                V[x] = state.delay_timer

            case Op.LD_VX_K:
                if not state.waiting_for_key:
                    state.begin_key_wait()
                key = state.take_key_press()
                if key < 0:
                    return instruction  # poll again on the next step
                V[x] = key

            case Op.LD_DT_VX:
                state.delay_timer = vx

            case Op.LD_ST_VX:
                state.sound_timer = vx

            case Op.ADD_I_VX:
                state.I = (state.I + vx) & 0xFFFF

            case Op.LD_F_VX:
                state.I = FONT_ADDRESS + (vx & 0xF) * FONT_GLYPH_SIZE

            case Op.LD_B_VX:
                self._write_block(state, instruction, (vx // 100, (vx // 10) % 10, vx % 10))

            case Op.LD_MEM_VX:
                self._write_block(state, instruction, (int(v) for v in V[: x + 1]))

            case Op.LD_VX_MEM:
                for offset in range(x + 1):
                    V[offset] = state.read_byte(state.I + offset)

            case Op.UNKNOWN:
                self._fault(state, instruction, "Unknown instruction")

        state.pc = pc & ADDRESS_MASK
        return instruction

    def run(self, state: MachineState, steps: int) -> int:
        """Execute `steps` instructions back to back; returns how many ran."""
        executed = 0
        for _ in range(steps):
            self.step(state)
            executed += 1
        return executed
