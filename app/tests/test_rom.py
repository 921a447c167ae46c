import numpy as np
from chip8.constants import ENTRY_POINT, MAX_PROGRAM_SIZE
from chip8.resolution import Resolution
from chip8.rom import Rom
from returns.result import Failure, Success


def test_from_bytes():
    result = Rom.from_bytes(b"\x00\xe0\x12\x00")
    assert isinstance(result, Success)
    rom = result.unwrap()
    assert len(rom) == 4
    assert bytes(rom) == b"\x00\xe0\x12\x00"
    assert rom.data.dtype == np.uint8
    assert rom.name == "<memory>"


def test_from_bytes_accepts_every_program_image_type():
    for image in (
        b"\x00\xe0",
        bytearray(b"\x00\xe0"),
        memoryview(b"\x00\xe0"),
        np.array([0x00, 0xE0], dtype=np.uint8),
    ):
        rom = Rom.from_bytes(image).unwrap()
        assert bytes(rom) == b"\x00\xe0", type(image)


def test_rom_and_machine_accept_the_same_images(state):
    image = np.array([0x6A, 0x02], dtype=np.uint8)
    state.initialize(Resolution.CHIP8, bytes(Rom.from_bytes(image).unwrap()))
    assert state.read_word(ENTRY_POINT) == 0x6A02

    state.initialize(Resolution.CHIP8, b"")
    assert isinstance(Rom.from_bytes(b""), Failure)


def test_from_bytes_rejects_bad_input():
    assert isinstance(Rom.from_bytes("not bytes"), Failure)  # type: ignore[arg-type]
    assert isinstance(Rom.from_bytes(np.zeros(4, dtype=np.uint16)), Failure)
    assert isinstance(Rom.from_bytes(np.zeros((2, 2), dtype=np.uint8)), Failure)
    assert "empty" in Rom.from_bytes(b"").failure()
    assert "too large" in Rom.from_bytes(bytes(MAX_PROGRAM_SIZE + 1)).failure()


def test_largest_program_is_accepted():
    assert isinstance(Rom.from_bytes(bytearray(MAX_PROGRAM_SIZE)), Success)


def test_from_file(tmp_path):
    path = tmp_path / "pong.ch8"
    path.write_bytes(b"\x6a\x02\x6b\x0c")
    rom = Rom.from_file(path).unwrap()
    assert rom.file == str(path)
    assert rom.name == "pong"
    assert list(rom.data) == [0x6A, 0x02, 0x6B, 0x0C]


def test_from_missing_file(tmp_path):
    result = Rom.from_file(tmp_path / "missing.ch8")
    assert isinstance(result, Failure)
    assert "Failed to read file" in result.failure()


def test_is_valid_file(tmp_path):
    good = tmp_path / "good.ch8"
    good.write_bytes(b"\x00\xe0")
    bad = tmp_path / "bad.ch8"
    bad.write_bytes(bytes(MAX_PROGRAM_SIZE + 2))

    assert Rom.is_valid_file(good) == (True, None)
    ok, error = Rom.is_valid_file(bad)
    assert not ok and "too large" in error


def test_rom_data_is_independent_of_source():
    source = bytearray(b"\x60\x01")
    rom = Rom.from_bytes(source).unwrap()
    source[0] = 0xFF
    assert rom.data[0] == 0x60
