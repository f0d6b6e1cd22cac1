"""
chip8emu Test Configuration
===========================

Shared fixtures for the chip8emu test suite.

It provides:
- A manual clock so timer and draw-pacing tests are deterministic
- A beep recorder that logs start/stop calls
- A CPU factory wired to both

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import random

import pytest

from chip8emu.emulator import CPU, MachineConfig, ManualClock


# ═══════════════════════════════════════════════════════════════════════════════
# HELPERS
# ═══════════════════════════════════════════════════════════════════════════════


def words(*values: int) -> bytes:
    """Pack 16-bit instruction words big-endian into a program image."""
    out = bytearray()
    for value in values:
        out += bytes([(value >> 8) & 0xFF, value & 0xFF])
    return bytes(out)


class RecordingBeep:
    """Beep handler that records every start()/stop() call."""

    def __init__(self):
        self.calls: list[str] = []

    def start(self) -> None:
        self.calls.append("start")

    def stop(self) -> None:
        self.calls.append("stop")


# ═══════════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.fixture
def clock() -> ManualClock:
    """Fixture: clock that only moves when advanced."""
    return ManualClock()


@pytest.fixture
def beep() -> RecordingBeep:
    """Fixture: beep handler recording start/stop calls."""
    return RecordingBeep()


@pytest.fixture
def make_cpu(clock, beep):
    """
    Fixture: factory for CPUs with a program already loaded.

    Usage:
        cpu = make_cpu(words(0x6012), min_draw_interval=0.0)
    """

    def _make(program: bytes = b"", config: MachineConfig | None = None, **kwargs) -> CPU:
        if config is None:
            config = MachineConfig(**kwargs)
        cpu = CPU(config, beep=beep, clock=clock, rng=random.Random(1234))
        cpu.load_program(program)
        return cpu

    return _make
