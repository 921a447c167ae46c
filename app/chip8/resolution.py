from enum import Enum


class Resolution(Enum):
    """
    Supported screen sizes.

    The value is the historical packed form: width in the upper byte,
    height in the lower byte (0x4020 = 64x32).
    """

    CHIP8 = 0x4020  # 64 x 32
    ETTI = 0x4030  # 64 x 48

    @property
    def width(self) -> int:
        return (self.value >> 8) & 0xFF

    @property
    def height(self) -> int:
        return self.value & 0xFF

    @property
    def packed(self) -> int:
        return self.value

    @property
    def pixels(self) -> int:
        return self.width * self.height

    @classmethod
    def from_packed(cls, value: int) -> "Resolution":
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unsupported screen size: 0x{value:04X}") from None

    @classmethod
    def from_name(cls, name: str) -> "Resolution":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            valid = ", ".join(member.name.lower() for member in cls)
            raise ValueError(f"Unknown resolution {name!r}, expected one of: {valid}") from None

    def __str__(self) -> str:
        return f"{self.name} ({self.width}x{self.height})"
