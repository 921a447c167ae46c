from __future__ import annotations

import tomllib
from copy import deepcopy
from pathlib import Path
from typing import Any, List, Mapping, MutableMapping, Optional, TypedDict

from chip8.constants import TIMER_HZ
from chip8.resolution import Resolution
from logger import log as _log
from resources import config_file


class GeneralConfig(TypedDict):
    instructions_per_frame: int
    fps: int
    scale: int
    resolution: str
    strict: bool
    seed: int


class DisplayConfig(TypedDict):
    foreground: List[int]
    background: List[int]


class SoundConfig(TypedDict):
    enable: bool
    frequency: int


class Config(TypedDict):
    general: GeneralConfig
    display: DisplayConfig
    sound: SoundConfig
    keyboard: dict[str, str]


# Hex keypad        Keyboard
#   1 2 3 C          1 2 3 4
#   4 5 6 D          Q W E R
#   7 8 9 E          A S D F
#   A 0 B F          Z X C V
DEFAULT_KEYMAP: dict[str, str] = {
    "1": "1", "2": "2", "3": "3", "C": "4",
    "4": "q", "5": "w", "6": "e", "D": "r",
    "7": "a", "8": "s", "9": "d", "E": "f",
    "A": "z", "0": "x", "B": "c", "F": "v",
}  # fmt: skip

DEFAULT_CONFIG: Config = {
    "general": {
        "instructions_per_frame": 10,
        "fps": TIMER_HZ,
        "scale": 10,
        "resolution": "chip8",
        "strict": False,
        "seed": -1,
    },
    "display": {"foreground": [255, 255, 255], "background": [0, 0, 0]},
    "sound": {"enable": True, "frequency": 440},
    "keyboard": DEFAULT_KEYMAP,
}


def _deep_merge(
    target: MutableMapping[str, Any],
    overrides: Mapping[str, Any],
) -> MutableMapping[str, Any]:
    for key, value in overrides.items():
        if isinstance(target.get(key), dict) and isinstance(value, dict):
            _deep_merge(target[key], value)
        else:
            target[key] = value
    return target


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _is_color(value: Any) -> bool:
    return (
        isinstance(value, list)
        and len(value) == 3
        and all(isinstance(c, int) and not isinstance(c, bool) and 0 <= c <= 255 for c in value)
    )


def _validate_config(cfg: Config) -> None:
    general = cfg["general"]
    for name in ("instructions_per_frame", "fps", "scale"):
        if not _is_positive_int(general[name]):
            raise ValueError(f"general.{name} must be a positive integer")

    Resolution.from_name(general["resolution"])

    if not isinstance(general["strict"], bool):
        raise ValueError("general.strict must be a boolean")

    if not isinstance(general["seed"], int) or isinstance(general["seed"], bool):
        raise ValueError("general.seed must be an integer (-1 for a random seed)")

    for name in ("foreground", "background"):
        if not _is_color(cfg["display"][name]):
            raise ValueError(f"display.{name} must be [r, g, b] with components 0-255")

    if not isinstance(cfg["sound"]["enable"], bool):
        raise ValueError("sound.enable must be a boolean")

    if not _is_positive_int(cfg["sound"]["frequency"]):
        raise ValueError("sound.frequency must be a positive integer")

    for key, name in cfg["keyboard"].items():
        if len(key) != 1 or key.upper() not in "0123456789ABCDEF":
            raise ValueError(f"keyboard.{key} is not a hex keypad key (0-F)")
        if not isinstance(name, str) or not name:
            raise ValueError(f"keyboard.{key} must be a key name")


def seed_from(cfg: Config) -> Optional[int]:
    seed = cfg["general"]["seed"]
    return None if seed < 0 else seed


def load_config(path: Optional[Path] = None) -> Config:
    path = config_file if path is None else path
    if not path.exists():
        return deepcopy(DEFAULT_CONFIG)

    config = deepcopy(DEFAULT_CONFIG)

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)

        _deep_merge(config, data)
        _validate_config(config)

    except (OSError, tomllib.TOMLDecodeError, ValueError, TypeError, KeyError) as e:
        _log.error(f"Failed to load config: {e}", exc_info=(type(e), e, e.__traceback__))
        return deepcopy(DEFAULT_CONFIG)

    return config
