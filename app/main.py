#!/usr/bin/env python3
import os
import sys
from pathlib import Path
from types import TracebackType
from typing import Dict, Optional, Tuple, Type, TypeVar

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import numpy as np
import pygame
from __version__ import __version_string__ as __version__
from chip8.errors import ExecutionFault, LoadError
from chip8.interpreter import Interpreter
from chip8.resolution import Resolution
from chip8.rom import Rom
from logger import console
from logger import log as _log
from numpy.typing import NDArray
from resources import roms_path
from returns.result import Failure, Success
from rich.traceback import install
from util.config import Config, load_config, seed_from
from util.timer import FrameClock

SAMPLE_RATE: int = 44100

E = TypeVar("E", bound=BaseException)


def _extract_exc_info(e: E) -> Tuple[Type[E], E, Optional[TracebackType]]:
    return (type(e), e, e.__traceback__)


def build_keymap(cfg: Config) -> Dict[int, int]:
    """pygame key code -> logical keypad index."""
    keymap: Dict[int, int] = {}
    for logical, name in cfg["keyboard"].items():
        try:
            keymap[pygame.key.key_code(name)] = int(logical, 16)
        except ValueError:
            _log.warning(f"Unknown key name {name!r} for keypad {logical.upper()}, ignored")
    return keymap


def render(
    surface: pygame.Surface,
    screen: NDArray[np.uint8],
    scale: int,
    palette: NDArray[np.uint8],
) -> None:
    """Upscale the (height, width) framebuffer and blit it onto `surface`."""
    pixels = palette[screen]  # (h, w, 3)
    pixels = np.repeat(np.repeat(pixels, scale, axis=0), scale, axis=1)
    pygame.surfarray.blit_array(surface, pixels.swapaxes(0, 1))


def make_beep(frequency: int) -> Optional[pygame.mixer.Sound]:
    """One period-aligned square wave buffer, looped while the sound timer runs."""
    try:
        pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1)
    except pygame.error as e:
        _log.warning(f"Audio unavailable: {e}")
        return None

    samples_per_period = max(SAMPLE_RATE // frequency, 2)
    period = np.where(np.arange(samples_per_period) < samples_per_period // 2, 1, -1)
    wave = (np.tile(period, max(SAMPLE_RATE // 10 // samples_per_period, 1)) * 0x1FFF).astype(np.int16)
    channels = pygame.mixer.get_init()[2]
    if channels > 1:
        wave = np.repeat(wave[:, None], channels, axis=1)
    return pygame.sndarray.make_sound(np.ascontiguousarray(wave))


def run(rom_path: Path) -> int:
    cfg = load_config()
    general = cfg["general"]

    match Rom.from_file(rom_path):
        case Success(rom):
            pass
        case Failure(error):
            _log.error(f"Cannot load ROM: {error}")
            return 1

    resolution = Resolution.from_name(general["resolution"])
    interpreter = Interpreter(resolution, seed=seed_from(cfg), strict=general["strict"])
    try:
        interpreter.load_rom(rom)
    except LoadError as e:
        _log.error(f"Cannot load ROM: {e}", exc_info=_extract_exc_info(e))
        return 1

    scale = general["scale"]
    ipf = general["instructions_per_frame"]
    palette = np.array([cfg["display"]["background"], cfg["display"]["foreground"]], dtype=np.uint8)

    pygame.init()
    window = pygame.display.set_mode((resolution.width * scale, resolution.height * scale))
    pygame.display.set_caption(f"CHIP-8 {__version__} - {rom.name}")
    keymap = build_keymap(cfg)
    beep = make_beep(cfg["sound"]["frequency"]) if cfg["sound"]["enable"] else None
    beeping = False

    dirty = True

    @interpreter.on("draw")
    def _on_draw(_screen: NDArray[np.uint8]) -> None:
        nonlocal dirty
        dirty = True

    clock = FrameClock(general["fps"])
    clock.start()
    _log.info(f"Running {rom.name}: {resolution}, {ipf} instructions per frame at {general['fps']} Hz")

    running = True
    exit_code = 0
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_F5:
                _log.info("Reset")
                interpreter.reset()
                dirty = True
            elif event.type in (pygame.KEYDOWN, pygame.KEYUP) and event.key in keymap:
                interpreter.state.set_key(keymap[event.key], event.type == pygame.KEYDOWN)

        try:
            for _ in range(clock.advance()):
                interpreter.run_frame(ipf)
        except ExecutionFault as e:
            _log.error(f"Execution stopped: {e}", exc_info=_extract_exc_info(e))
            running = False
            exit_code = 2

        if beep is not None and interpreter.sound_active != beeping:
            beeping = interpreter.sound_active
            if beeping:
                beep.play(loops=-1)
            else:
                beep.stop()

        if dirty:
            render(window, interpreter.screen, scale, palette)
            pygame.display.flip()
            dirty = False

        pygame.time.wait(int(clock.time_until_next() * 1000))

    pygame.quit()
    return exit_code


def main() -> int:
    install(console=console)
    args = [arg for arg in sys.argv[1:] if not arg.startswith("--")]
    if len(args) != 1:
        console.print("usage: main.py <rom> [--debug]")
        return 2
    _log.info(f"Starting CHIP-8 interpreter {__version__}")
    rom_path = Path(args[0])
    if not rom_path.exists() and (roms_path / rom_path).exists():
        rom_path = roms_path / rom_path

    valid, msg = Rom.is_valid_file(rom_path)
    if not valid:
        _log.error(f"Invalid ROM file: {msg}")
        return 1
    return run(rom_path)


if __name__ == "__main__":
    sys.exit(main())
