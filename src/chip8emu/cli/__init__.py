"""
chip8emu Command-Line Interface
===============================

This package provides command-line tools for chip8emu:

- **c8run**: run a ROM headless and dump the final screen
- **c8disasm**: CHIP-8 disassembler

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["c8run", "c8disasm"]
