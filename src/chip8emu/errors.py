"""
chip8emu Error Hierarchy
========================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from Chip8Error, allowing a host to catch every
emulator-related error with a single except clause if desired.

Exception Hierarchy
-------------------
Chip8Error (base)
├── ProgramLoadError - program image does not fit in memory at the origin
└── ExecutionError (raised while a program runs)
    ├── InvalidOpcodeError - fetched word matches no defined instruction
    └── AddressError - effective address outside the 12-bit space

Design Philosophy
-----------------
None of these errors terminate the host process. A load error is raised
before any machine state is replaced, so the previous program (if any)
is left intact. Execution errors halt the CPU before they propagate, so the
host can report the fault and decide whether to restart or unload.

Error messages follow this format:
    error: description (at $PPP)
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class Chip8Error(Exception):
    """
    Base exception for all chip8emu errors.

        try:
            cpu.tick()
        except Chip8Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Load Errors
# =============================================================================

class ProgramLoadError(Chip8Error):
    """
    Program image cannot be loaded at the requested origin.

    Attributes:
        size: Number of bytes in the program image
        origin: Requested load address
    """

    def __init__(self, message: str, size: int = 0, origin: int = 0):
        self.size = size
        self.origin = origin
        super().__init__(message)


# =============================================================================
# Execution Errors
# =============================================================================

class ExecutionError(Chip8Error):
    """
    Base class for faults raised while executing a program.

    Attributes:
        message: The error description
        pc: Address of the instruction being executed (optional)
    """

    def __init__(self, message: str, pc: Optional[int] = None):
        self.message = message
        self.pc = pc
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.pc is None:
            return f"error: {self.message}"
        return f"error: {self.message} (at ${self.pc:03X})"


class InvalidOpcodeError(ExecutionError):
    """
    Fetched word does not decode to any defined instruction.

    Example:
        5XY1 is not defined (only 5XY0 is), so 0x5121 raises this error.
    """

    def __init__(self, word: int, address: int):
        self.word = word
        self.address = address
        super().__init__(f"unsupported opcode ${word:04X}", pc=address)


class AddressError(ExecutionError):
    """
    Memory access outside the addressable range $000-$FFF, or a store
    into the read-only glyph table.

    The index register is 16 bits wide but memory is only 4 KiB, so
    indirect accesses can point past the end of memory. These accesses
    fault instead of wrapping.
    """

    def __init__(
        self, address: int, pc: Optional[int] = None, reason: str = "is outside memory"
    ):
        self.address = address
        super().__init__(f"address ${address:04X} {reason}", pc=pc)
