import pytest
from chip8.resolution import Resolution


def test_dimensions():
    assert (Resolution.CHIP8.width, Resolution.CHIP8.height) == (64, 32)
    assert (Resolution.ETTI.width, Resolution.ETTI.height) == (64, 48)
    assert Resolution.ETTI.pixels == 64 * 48


def test_packed_round_trip():
    assert Resolution.CHIP8.packed == 0x4020
    assert Resolution.from_packed(0x4030) is Resolution.ETTI


def test_unsupported_packed_value():
    with pytest.raises(ValueError, match="0x8040"):
        Resolution.from_packed(0x8040)


def test_from_name_is_case_insensitive():
    assert Resolution.from_name("chip8") is Resolution.CHIP8
    assert Resolution.from_name(" ETTI ") is Resolution.ETTI
    with pytest.raises(ValueError):
        Resolution.from_name("schip")
