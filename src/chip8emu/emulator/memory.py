"""
Memory Subsystem for the CHIP-8 Emulator
========================================

Memory Map:
    $000-$04F  Built-in hexadecimal glyphs (16 x 5 bytes)
    $050-$1FF  Reserved for the interpreter (zero-filled)
    $200-$FFF  Program and data (origin is configurable)

The address space is 12 bits wide. Any access outside $000-$FFF raises
AddressError rather than wrapping. Callers that compute effective
addresses (the CPU) are expected to check them before use; the check
here is the last line of enforcement.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import logging

from ..errors import AddressError, ProgramLoadError

logger = logging.getLogger(__name__)

MEMORY_SIZE = 0x1000
ADDRESS_MASK = 0xFFF
PROGRAM_ORIGIN = 0x200

# Address of the first glyph and the number of bytes per glyph
FONT_ADDRESS = 0x000
GLYPH_SIZE = 5

# =============================================================================
# GLYPH DATA
# =============================================================================
# 4x5 pixel glyphs for the hexadecimal digits 0-F. Each row is one byte with
# the glyph in the high nibble (MSB = leftmost pixel).

FONT_GLYPHS = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])


def glyph_address(digit: int) -> int:
    """Return the address of the built-in glyph for a hex digit (0-F)."""
    return FONT_ADDRESS + (digit & 0xF) * GLYPH_SIZE


def is_valid_address(address: int) -> bool:
    """Check whether an address lies inside the 12-bit address space."""
    return 0 <= address < MEMORY_SIZE


class Memory:
    """
    Flat 4 KiB byte-addressable memory.

    The glyph table is written at construction, followed by the program
    image at its origin. A program that would extend past $FFF is rejected
    before the instance is returned, so a Memory is never half-loaded.

    Attributes:
        origin: Address the program was loaded at
        program_size: Number of program bytes loaded

    Example:
        >>> mem = Memory(bytes([0x60, 0x12]), origin=0x200)
        >>> hex(mem.read_word(0x200))
        '0x6012'
    """

    def __init__(self, program: bytes = b"", origin: int = PROGRAM_ORIGIN):
        """
        Initialize memory with the glyph table and a program image.

        Args:
            program: Program bytes
            origin: Load address of the first program byte

        Raises:
            ProgramLoadError: If the program does not fit at the origin
        """
        size = len(program)
        if not is_valid_address(origin):
            raise ProgramLoadError(
                f"Program origin ${origin:04X} is outside memory",
                size=size, origin=origin,
            )
        if origin + size > MEMORY_SIZE:
            raise ProgramLoadError(
                f"Program of {size} bytes does not fit at ${origin:03X} "
                f"({MEMORY_SIZE - origin} bytes available)",
                size=size, origin=origin,
            )

        self._data = bytearray(MEMORY_SIZE)
        self._data[FONT_ADDRESS:FONT_ADDRESS + len(FONT_GLYPHS)] = FONT_GLYPHS
        self._data[origin:origin + size] = program

        self.origin = origin
        self.program_size = size

        if size:
            logger.debug(f"Loaded {size} program bytes at ${origin:03X}")

    def _check(self, address: int) -> None:
        if not is_valid_address(address):
            raise AddressError(address)

    def read(self, address: int) -> int:
        """
        Read byte from memory.

        Args:
            address: 12-bit address

        Returns:
            Byte value at address

        Raises:
            AddressError: If address is outside $000-$FFF
        """
        self._check(address)
        return self._data[address]

    def write(self, address: int, value: int) -> None:
        """
        Write byte to memory.

        Args:
            address: 12-bit address
            value: Byte value (masked to 8 bits)

        Raises:
            AddressError: If address is outside $000-$FFF
        """
        self._check(address)
        self._data[address] = value & 0xFF

    def read_word(self, address: int) -> int:
        """Read a big-endian 16-bit word (instruction fetch)."""
        self._check(address)
        self._check(address + 1)
        return (self._data[address] << 8) | self._data[address + 1]

    def read_bytes(self, address: int, count: int) -> bytes:
        """Read a contiguous block, checking both ends of the range."""
        if count <= 0:
            return b""
        self._check(address)
        self._check(address + count - 1)
        return bytes(self._data[address:address + count])

    def dump(self) -> bytes:
        """Copy of the entire memory contents."""
        return bytes(self._data)

    def __len__(self) -> int:
        return MEMORY_SIZE
