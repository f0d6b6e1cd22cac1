"""
chip8emu Disassembler Module
============================

Turns CHIP-8 program images back into readable listings, for debugging
and for the c8disasm command.

Usage:
    from chip8emu.disassembler import disassemble, disassemble_word

    for line in disassemble(rom_bytes, origin=0x200):
        print(line)

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from .chip8 import (
    DisassembledLine,
    disassemble,
    disassemble_to_text,
    disassemble_word,
    is_instruction,
)

__all__ = [
    "DisassembledLine",
    "disassemble",
    "disassemble_to_text",
    "disassemble_word",
    "is_instruction",
]
