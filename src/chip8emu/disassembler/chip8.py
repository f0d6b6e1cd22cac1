"""
CHIP-8 Disassembler
===================

Turns instruction words back into the conventional mnemonics:

    >>> disassemble_word(0x6012)
    'LD V0, 0x12'
    >>> disassemble_word(0xD125)
    'DRW V1, V2, 5'

Words that are not instructions (typically sprite data mixed in with code)
are shown as data: 'DW 0x5121'.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass
from typing import Iterator

from ..emulator.instruction import Instruction


@dataclass(frozen=True)
class DisassembledLine:
    """
    A single disassembled word.

    Attributes:
        address: Memory address of the word
        word: The raw 16-bit word (or the lone trailing byte)
        text: Mnemonic and operands
        is_data: True if the word is not a valid instruction
    """
    address: int
    word: int
    text: str
    is_data: bool = False

    def __str__(self) -> str:
        """Format as listing line: ADDRESS: WORD  MNEMONIC"""
        return f"${self.address:03X}: {self.word:04X}  {self.text}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "address": f"${self.address:03X}",
            "address_int": self.address,
            "word": f"{self.word:04X}",
            "text": self.text,
            "is_data": self.is_data,
        }


def _mnemonic(inst: Instruction, jump_uses_vx: bool = False) -> str | None:
    x, y, n, kk, nnn = inst.x, inst.y, inst.n, inst.kk, inst.nnn

    match inst.parts:
        case (0x0, 0x0, 0xE, 0x0):
            return "CLS"
        case (0x0, 0x0, 0xE, 0xE):
            return "RET"
        case (0x0, _, _, _):
            return f"SYS 0x{nnn:03X}"
        case (0x1, _, _, _):
            return f"JP 0x{nnn:03X}"
        case (0x2, _, _, _):
            return f"CALL 0x{nnn:03X}"
        case (0x3, _, _, _):
            return f"SE V{x:X}, 0x{kk:02X}"
        case (0x4, _, _, _):
            return f"SNE V{x:X}, 0x{kk:02X}"
        case (0x5, _, _, 0x0):
            return f"SE V{x:X}, V{y:X}"
        case (0x6, _, _, _):
            return f"LD V{x:X}, 0x{kk:02X}"
        case (0x7, _, _, _):
            return f"ADD V{x:X}, 0x{kk:02X}"
        case (0x8, _, _, 0x0):
            return f"LD V{x:X}, V{y:X}"
        case (0x8, _, _, 0x1):
            return f"OR V{x:X}, V{y:X}"
        case (0x8, _, _, 0x2):
            return f"AND V{x:X}, V{y:X}"
        case (0x8, _, _, 0x3):
            return f"XOR V{x:X}, V{y:X}"
        case (0x8, _, _, 0x4):
            return f"ADD V{x:X}, V{y:X}"
        case (0x8, _, _, 0x5):
            return f"SUB V{x:X}, V{y:X}"
        case (0x8, _, _, 0x6):
            return f"SHR V{x:X}, V{y:X}"
        case (0x8, _, _, 0x7):
            return f"SUBN V{x:X}, V{y:X}"
        case (0x8, _, _, 0xE):
            return f"SHL V{x:X}, V{y:X}"
        case (0x9, _, _, 0x0):
            return f"SNE V{x:X}, V{y:X}"
        case (0xA, _, _, _):
            return f"LD I, 0x{nnn:03X}"
        case (0xB, _, _, _) if jump_uses_vx:
            return f"JP V{x:X}, 0x{kk:02X}"
        case (0xB, _, _, _):
            return f"JP V0, 0x{nnn:03X}"
        case (0xC, _, _, _):
            return f"RND V{x:X}, 0x{kk:02X}"
        case (0xD, _, _, _):
            return f"DRW V{x:X}, V{y:X}, {n}"
        case (0xE, _, 0x9, 0xE):
            return f"SKP V{x:X}"
        case (0xE, _, 0xA, 0x1):
            return f"SKNP V{x:X}"
        case (0xF, _, 0x0, 0x7):
            return f"LD V{x:X}, DT"
        case (0xF, _, 0x0, 0xA):
            return f"LD V{x:X}, K"
        case (0xF, _, 0x1, 0x5):
            return f"LD DT, V{x:X}"
        case (0xF, _, 0x1, 0x8):
            return f"LD ST, V{x:X}"
        case (0xF, _, 0x1, 0xE):
            return f"ADD I, V{x:X}"
        case (0xF, _, 0x2, 0x9):
            return f"LD F, V{x:X}"
        case (0xF, _, 0x3, 0x3):
            return f"LD B, V{x:X}"
        case (0xF, _, 0x5, 0x5):
            return f"LD [I], V{x:X}"
        case (0xF, _, 0x6, 0x5):
            return f"LD V{x:X}, [I]"
        case _:
            return None


def is_instruction(word: int) -> bool:
    """Check whether a word decodes to a defined instruction."""
    return _mnemonic(Instruction(word)) is not None


def disassemble_word(word: int, jump_uses_vx: bool = False) -> str:
    """
    Disassemble a single 16-bit word.

    Args:
        word: Instruction word
        jump_uses_vx: Render BNNN as "JP Vx, kk" (the SCHIP reading)

    Returns:
        Mnemonic text, or 'DW 0xNNNN' for words that are not instructions
    """
    text = _mnemonic(Instruction(word), jump_uses_vx)
    return text if text is not None else f"DW 0x{word:04X}"


def disassemble(
    data: bytes, origin: int = 0x200, jump_uses_vx: bool = False
) -> Iterator[DisassembledLine]:
    """
    Disassemble a program image word by word.

    Instructions are assumed to be 2-byte aligned relative to origin. A
    trailing odd byte is reported as 'DB'.

    Args:
        data: Program bytes
        origin: Address of the first byte
        jump_uses_vx: Render BNNN as "JP Vx, kk" instead of "JP V0, nnn"

    Yields:
        DisassembledLine for each word
    """
    for offset in range(0, len(data) - 1, 2):
        word = (data[offset] << 8) | data[offset + 1]
        text = _mnemonic(Instruction(word), jump_uses_vx)
        yield DisassembledLine(
            address=origin + offset,
            word=word,
            text=text if text is not None else f"DW 0x{word:04X}",
            is_data=text is None,
        )

    if len(data) % 2:
        last = data[-1]
        yield DisassembledLine(
            address=origin + len(data) - 1,
            word=last,
            text=f"DB 0x{last:02X}",
            is_data=True,
        )


def disassemble_to_text(
    data: bytes, origin: int = 0x200, jump_uses_vx: bool = False
) -> str:
    """Disassemble a program image into a listing string."""
    return "\n".join(str(line) for line in disassemble(data, origin, jump_uses_vx))
