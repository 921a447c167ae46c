import sys

import main
from chip8.constants import MAX_PROGRAM_SIZE


def test_usage_without_rom(monkeypatch):
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    monkeypatch.setattr(sys, "argv", ["main.py"])
    assert main.main() == 2


def test_oversized_rom_is_rejected_before_running(tmp_path, monkeypatch):
    rom = tmp_path / "big.ch8"
    rom.write_bytes(bytes(MAX_PROGRAM_SIZE + 1))
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    monkeypatch.setattr(sys, "argv", ["main.py", str(rom)])
    monkeypatch.setattr(main, "run", lambda path: 0)
    assert main.main() == 1


def test_missing_rom_is_rejected(tmp_path, monkeypatch):
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    monkeypatch.setattr(sys, "argv", ["main.py", str(tmp_path / "missing.ch8")])
    monkeypatch.setattr(main, "run", lambda path: 0)
    assert main.main() == 1


def test_valid_rom_is_run(tmp_path, monkeypatch):
    rom = tmp_path / "ok.ch8"
    rom.write_bytes(b"\x12\x00")
    seen = []
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    monkeypatch.setattr(sys, "argv", ["main.py", str(rom)])
    monkeypatch.setattr(main, "run", lambda path: seen.append(path) or 0)
    assert main.main() == 0
    assert seen == [rom]
