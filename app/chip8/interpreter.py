from collections import deque
from typing import Any, Callable, Dict, Optional

import numpy as np
from logger import log as _logger
from numpy.typing import NDArray

from chip8.engine import Engine
from chip8.errors import Chip8Error, ExecutionFault
from chip8.instruction import Instruction, Op
from chip8.machine import MachineState, ProgramImage
from chip8.resolution import Resolution
from chip8.rom import Rom


class Interpreter:
    """
    Bundles a `MachineState` with an `Engine` for drivers.

    Events (register with `@interpreter.on(name)`):
      - before_step(pc)
      - after_step(instruction)
      - draw(screen)                   after CLS / DRW
      - unknown_instruction(instruction)
      - halted(fault)

    The interpreter never ticks timers on its own; `run_frame` is the one
    helper that interleaves steps with a timer tick, at the caller's request.
    """

    def __init__(
        self,
        resolution: Resolution = Resolution.CHIP8,
        seed: Optional[int] = None,
        strict: bool = False,
    ) -> None:
        self.resolution: Resolution = resolution
        self.state: MachineState = MachineState(resolution)
        self.engine: Engine = Engine(rng=np.random.default_rng(seed), strict=strict)
        self.halted: bool = False
        self._program: bytes = b""
        self._events: Dict[str, deque[Callable[..., Any]]] = {}

    def on(self, event_name: str):
        def decorator(func: Callable):
            self._events.setdefault(event_name, deque()).append(func)
            return func

        return decorator

    def _emit(self, event_name: str, *args: Any, **kwargs: Any) -> None:
        """Emit an event to all registered callbacks."""
        for callback in self._events.get(event_name, ()):
            if not callable(callback):
                raise Chip8Error(f"Callback {callback!r} is not callable")
            callback(*args, **kwargs)

    # Program loading

    def load(self, program: ProgramImage) -> None:
        """Initialize the machine with `program`; raises LoadError if it does not fit."""
        self.state.initialize(self.resolution, program)
        self._program = bytes(program)
        self.halted = False

    def load_rom(self, rom: Rom) -> None:
        _logger.info(f"Loading {rom.name} ({len(rom)} bytes) at ${rom.LOAD_ADDRESS:03X}")
        self.load(bytes(rom))

    def reset(self) -> None:
        """Restart the last loaded program from a clean machine."""
        self.load(self._program)

    # Execution

    def step(self) -> Optional[Instruction]:
        """Run one instruction. Returns None while halted."""
        if self.halted:
            return None

        self._emit("before_step", self.state.pc)
        try:
            instruction = self.engine.step(self.state)
        except ExecutionFault as fault:
            self.halted = True
            _logger.error(f"Interpreter halted: {fault}")
            self._emit("halted", fault)
            raise

        if instruction.op is Op.UNKNOWN:
            self._emit("unknown_instruction", instruction)
        elif instruction.op in (Op.CLS, Op.DRW):
            self._emit("draw", self.state.screen)
        self._emit("after_step", instruction)
        return instruction

    def tick(self) -> None:
        self.state.tick_timers()

    def run_frame(self, instructions_per_frame: int) -> int:
        """
        Run one timer frame: up to `instructions_per_frame` steps, then one
        timer tick. Returns the number of instructions executed.
        """
        executed = 0
        for _ in range(instructions_per_frame):
            if self.step() is None:
                break
            executed += 1
        self.tick()
        return executed

    # Input / output

    def press(self, key: int) -> None:
        self.state.press(key)

    def release(self, key: int) -> None:
        self.state.release(key)

    @property
    def screen(self) -> NDArray[np.uint8]:
        return self.state.screen

    @property
    def sound_active(self) -> bool:
        return self.state.sound_active
