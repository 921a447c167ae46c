import pytest
from chip8.instruction import Op, decode


@pytest.mark.parametrize(
    "word, op",
    [
        (0x00E0, Op.CLS),
        (0x00EE, Op.RET),
        (0x1ABC, Op.JP),
        (0x2ABC, Op.CALL),
        (0x3A12, Op.SE_BYTE),
        (0x4A12, Op.SNE_BYTE),
        (0x5AB0, Op.SE_REG),
        (0x6A12, Op.LD_BYTE),
        (0x7A12, Op.ADD_BYTE),
        (0x8AB0, Op.LD_REG),
        (0x8AB1, Op.OR),
        (0x8AB2, Op.AND),
        (0x8AB3, Op.XOR),
        (0x8AB4, Op.ADD_REG),
        (0x8AB5, Op.SUB),
        (0x8AB6, Op.SHR),
        (0x8AB7, Op.SUBN),
        (0x8ABE, Op.SHL),
        (0x9AB0, Op.SNE_REG),
        (0xA123, Op.LD_I),
        (0xB123, Op.JP_V0),
        (0xCA12, Op.RND),
        (0xDAB5, Op.DRW),
        (0xEA9E, Op.SKP),
        (0xEAA1, Op.SKNP),
        (0xFA07, Op.LD_VX_DT),
        (0xFA0A, Op.LD_VX_K),
        (0xFA15, Op.LD_DT_VX),
        (0xFA18, Op.LD_ST_VX),
        (0xFA1E, Op.ADD_I_VX),
        (0xFA29, Op.LD_F_VX),
        (0xFA33, Op.LD_B_VX),
        (0xFA55, Op.LD_MEM_VX),
        (0xFA65, Op.LD_VX_MEM),
    ],
)
def test_known_patterns(word, op):
    assert decode(word).op is op


@pytest.mark.parametrize("word", [0x0000, 0x0123, 0x00E1, 0x5AB1, 0x8AB8, 0x8ABF, 0x9AB3, 0xEA9F, 0xFA00, 0xFAFF])
def test_unmatched_words_are_unknown(word):
    assert decode(word).op is Op.UNKNOWN


def test_operand_fields():
    instruction = decode(0xD7A5)
    assert instruction.word == 0xD7A5
    assert (instruction.x, instruction.y, instruction.n) == (0x7, 0xA, 0x5)
    assert instruction.kk == 0xA5
    assert instruction.nnn == 0x7A5


def test_every_word_decodes():
    ops = {decode(word).op for word in range(0x10000)}
    assert ops == set(Op)
