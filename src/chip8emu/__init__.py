"""
chip8emu - CHIP-8 Virtual Machine
=================================

This package provides an interpreter for CHIP-8, the 1970s virtual machine
originally run on the COSMAC VIP and later on HP calculators (SUPER-CHIP).

Main Components
---------------
- **emulator**: the CPU and its components (memory, registers, display,
  keypad), compatibility quirks and debugging support

- **disassembler**: turns program images back into mnemonics

- **cli**: command-line tools
    c8run     run a ROM headless and dump the screen
    c8disasm  disassemble a ROM

Quick Start
-----------
Run a program:
    >>> from chip8emu import CPU
    >>> cpu = CPU()
    >>> cpu.load_program(open("ibm.ch8", "rb").read())
    >>> for _ in range(60):
    ...     cpu.tick()
    >>> print(cpu.display.get_text())

Or use the command-line tools:
    $ c8run ibm.ch8 --frames 60 --text
    $ c8disasm ibm.ch8

Version History
---------------
1.0.0 - Initial release with interpreter, disassembler and CLI tools
"""

__version__ = "1.0.0"
__author__ = "Hugo José Pinto & Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from chip8emu.errors import (
    Chip8Error,
    ProgramLoadError,
    ExecutionError,
    InvalidOpcodeError,
    AddressError,
)

from chip8emu.emulator import (
    CPU,
    Flow,
    MachineConfig,
    Quirks,
    QUIRKS_CHIP8,
    QUIRKS_SCHIP,
    QUIRKS_MODERN,
    get_quirks,
    list_quirk_presets,
    BeepHandler,
    NullBeep,
    ManualClock,
)

from chip8emu.disassembler import disassemble, disassemble_word

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Exception hierarchy
    "Chip8Error",
    "ProgramLoadError",
    "ExecutionError",
    "InvalidOpcodeError",
    "AddressError",
    # Emulator
    "CPU",
    "Flow",
    "MachineConfig",
    "Quirks",
    "QUIRKS_CHIP8",
    "QUIRKS_SCHIP",
    "QUIRKS_MODERN",
    "get_quirks",
    "list_quirk_presets",
    "BeepHandler",
    "NullBeep",
    "ManualClock",
    # Disassembler
    "disassemble",
    "disassemble_word",
]
