from dataclasses import dataclass
from enum import Enum, auto
from functools import lru_cache


class Op(Enum):
    """Every instruction the interpreter understands, plus UNKNOWN."""

    CLS = auto()  # 00E0
    RET = auto()  # 00EE
    JP = auto()  # 1NNN
    CALL = auto()  # 2NNN
    SE_BYTE = auto()  # 3XKK
    SNE_BYTE = auto()  # 4XKK
    SE_REG = auto()  # 5XY0
    LD_BYTE = auto()  # 6XKK
    ADD_BYTE = auto()  # 7XKK
    LD_REG = auto()  # 8XY0
    OR = auto()  # 8XY1
    AND = auto()  # 8XY2
    XOR = auto()  # 8XY3
    ADD_REG = auto()  # 8XY4
    SUB = auto()  # 8XY5
    SHR = auto()  # 8XY6
    SUBN = auto()  # 8XY7
    SHL = auto()  # 8XYE
    SNE_REG = auto()  # 9XY0
    LD_I = auto()  # ANNN
    JP_V0 = auto()  # BNNN
    RND = auto()  # CXKK
    DRW = auto()  # DXYN
    SKP = auto()  # EX9E
    SKNP = auto()  # EXA1
    LD_VX_DT = auto()  # FX07
    LD_VX_K = auto()  # FX0A
    LD_DT_VX = auto()  # FX15
    LD_ST_VX = auto()  # FX18
    ADD_I_VX = auto()  # FX1E
    LD_F_VX = auto()  # FX29
    LD_B_VX = auto()  # FX33
    LD_MEM_VX = auto()  # FX55
    LD_VX_MEM = auto()  # FX65
    UNKNOWN = auto()


_ALU_OPS = {
    0x0: Op.LD_REG,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_REG,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}

_MISC_OPS = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I_VX,
    0x29: Op.LD_F_VX,
    0x33: Op.LD_B_VX,
    0x55: Op.LD_MEM_VX,
    0x65: Op.LD_VX_MEM,
}


@dataclass(frozen=True)
class Instruction:
    """A decoded instruction word and its operand fields."""

    op: Op
    word: int
    x: int  # 0X00
    y: int  # 00Y0
    n: int  # 000N
    kk: int  # 00KK
    nnn: int  # 0NNN

    def __repr__(self) -> str:
        return f"<Instruction {self.op.name} {self.word:04X}>"


def _classify(word: int) -> Op:
    group = word >> 12
    n = word & 0x000F
    kk = word & 0x00FF

    match group:
        case 0x0:
            if word == 0x00E0:
                return Op.CLS
            if word == 0x00EE:
                return Op.RET
            return Op.UNKNOWN  # 0NNN machine code calls are not supported
        case 0x1:
            return Op.JP
        case 0x2:
            return Op.CALL
        case 0x3:
            return Op.SE_BYTE
        case 0x4:
            return Op.SNE_BYTE
        case 0x5:
            return Op.SE_REG if n == 0 else Op.UNKNOWN
        case 0x6:
            return Op.LD_BYTE
        case 0x7:
            return Op.ADD_BYTE
        case 0x8:
            return _ALU_OPS.get(n, Op.UNKNOWN)
        case 0x9:
            return Op.SNE_REG if n == 0 else Op.UNKNOWN
        case 0xA:
            return Op.LD_I
        case 0xB:
            return Op.JP_V0
        case 0xC:
            return Op.RND
        case 0xD:
            return Op.DRW
        case 0xE:
            if kk == 0x9E:
                return Op.SKP
            if kk == 0xA1:
                return Op.SKNP
            return Op.UNKNOWN
        case 0xF:
            return _MISC_OPS.get(kk, Op.UNKNOWN)
        case _:
            return Op.UNKNOWN


@lru_cache(maxsize=None)
def decode(word: int) -> Instruction:
    """Decode a 16-bit instruction word."""
    word &= 0xFFFF
    return Instruction(
        op=_classify(word),
        word=word,
        x=(word & 0x0F00) >> 8,
        y=(word & 0x00F0) >> 4,
        n=word & 0x000F,
        kk=word & 0x00FF,
        nnn=word & 0x0FFF,
    )
