"""
CHIP-8 Emulator
===============

An interpreter for the CHIP-8 virtual machine.

- **CPU**: fetch/decode/execute with selectable compatibility quirks
- **Memory**: 4 KiB with built-in hex glyphs
- **Registers**: V0-VF, I, PC, ring stack, wall-clock timers
- **Display**: 64x32 bit-packed framebuffer with XOR drawing
- **Keypad**: 16 keys with release tracking
- **Debugging**: PC breakpoints and register conditions

Quick Start
-----------

Basic usage::

    >>> from chip8emu.emulator import CPU, MachineConfig, get_quirks
    >>> cpu = CPU(MachineConfig(quirks=get_quirks("chip8")))
    >>> cpu.load_program(Path("pong.ch8").read_bytes())
    >>> while running:
    ...     cpu.tick()                 # once per frame
    ...     render(cpu.framebuffer)    # 32 row words, bit 63 = leftmost

Deterministic runs for testing::

    >>> clock = ManualClock()
    >>> cpu = CPU(clock=clock, rng=random.Random(1))
    >>> cpu.load_program(rom)
    >>> for _ in range(60):
    ...     cpu.tick()
    ...     clock.advance_frames(1)

Module Structure
----------------

- `cpu.py`: CPU class (control surface and opcode semantics)
- `instruction.py`: instruction word decoder
- `memory.py`: memory and glyph table
- `registers.py`: register file, ring stack and timers
- `display.py`: framebuffer
- `keypad.py`: keypad state
- `quirks.py`: quirk flags, presets and machine configuration
- `beep.py`: sound output protocol
- `clock.py`: clock sources
- `breakpoints.py`: debugging support

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

# Main entry point
from .cpu import CPU, Flow

# Components
from .instruction import Instruction
from .memory import Memory, FONT_GLYPHS, MEMORY_SIZE, PROGRAM_ORIGIN, glyph_address
from .registers import Registers, Timer
from .display import Display, WIDTH, HEIGHT
from .keypad import Keypad, HOST_KEY_MAP

# Configuration
from .quirks import (
    Quirks,
    MachineConfig,
    QUIRKS_CHIP8,
    QUIRKS_SCHIP,
    QUIRKS_MODERN,
    QUIRKS_DEFAULT,
    get_quirks,
    list_quirk_presets,
)

# Host collaborators
from .beep import BeepHandler, NullBeep
from .clock import ManualClock, default_clock

# Debugging support
from .breakpoints import (
    BreakpointManager,
    BreakEvent,
    BreakReason,
    RegisterCondition,
)

__all__ = [
    # Main API
    "CPU",
    "Flow",

    # Components
    "Instruction",
    "Memory",
    "FONT_GLYPHS",
    "MEMORY_SIZE",
    "PROGRAM_ORIGIN",
    "glyph_address",
    "Registers",
    "Timer",
    "Display",
    "WIDTH",
    "HEIGHT",
    "Keypad",
    "HOST_KEY_MAP",

    # Configuration
    "Quirks",
    "MachineConfig",
    "QUIRKS_CHIP8",
    "QUIRKS_SCHIP",
    "QUIRKS_MODERN",
    "QUIRKS_DEFAULT",
    "get_quirks",
    "list_quirk_presets",

    # Host collaborators
    "BeepHandler",
    "NullBeep",
    "ManualClock",
    "default_clock",

    # Debugging
    "BreakpointManager",
    "BreakEvent",
    "BreakReason",
    "RegisterCondition",
]
