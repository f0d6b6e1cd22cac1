"""
Instruction Decoder
===================

Splits a fetched 16-bit word into its four nibbles and exposes the operand
views used by the opcode handlers:

    word   = 0xDXYN
    parts  = (0xD, X, Y, N)
    x      = X             target register index
    y      = Y             source register index
    n      = N             4-bit immediate
    kk     = YN            8-bit immediate (low byte)
    nnn    = XYN           12-bit address

Decoding is pure: an Instruction has no state beyond the word it wraps.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Instruction:
    """
    Decoded view of one instruction word.

    Example:
        >>> inst = Instruction(0x8124)
        >>> inst.parts
        (8, 1, 2, 4)
        >>> inst.x, inst.y, inst.kk
        (1, 2, 36)
    """
    word: int

    def __post_init__(self) -> None:
        if not 0 <= self.word <= 0xFFFF:
            raise ValueError(f"Instruction word must be 0-0xFFFF, got {self.word}")

    @property
    def parts(self) -> tuple[int, int, int, int]:
        """The four nibbles, most significant first."""
        w = self.word
        return ((w >> 12) & 0xF, (w >> 8) & 0xF, (w >> 4) & 0xF, w & 0xF)

    @property
    def x(self) -> int:
        """4-bit target register index."""
        return (self.word >> 8) & 0xF

    @property
    def y(self) -> int:
        """4-bit source register index."""
        return (self.word >> 4) & 0xF

    @property
    def n(self) -> int:
        """4-bit immediate nibble."""
        return self.word & 0xF

    @property
    def kk(self) -> int:
        """8-bit immediate byte."""
        return self.word & 0xFF

    @property
    def nnn(self) -> int:
        """12-bit address."""
        return self.word & 0xFFF

    def __str__(self) -> str:
        return f"{self.word:04X}"
