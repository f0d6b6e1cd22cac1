"""
Register File and Timers
========================

Registers:
- V0-VF: 8-bit general purpose (VF doubles as the flag output of
  arithmetic, shift and draw instructions)
- I: 16-bit index register (addresses only reach 12 bits)
- PC: 16-bit program counter
- SP: 8-bit stack pointer into a 16-entry ring of return addresses
- DT, ST: delay and sound timers

Timers decay continuously at 60 units per second from the moment they were
last written. They are never decremented by the CPU; reading a timer
computes its current value from the elapsed time.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import math

from .clock import Clock, default_clock

NUM_REGISTERS = 16
STACK_SIZE = 16
FLAG = 0xF

TIMER_RATE = 60.0  # units per second


class Timer:
    """
    Countdown timer decaying at 60Hz of wall-clock time.

    The stored value is never decremented in 8-bit arithmetic. read()
    subtracts elapsed * 60 in full precision, rounds half up, and clamps the
    result to 0-255.

    Example:
        >>> clock = ManualClock()
        >>> timer = Timer(clock)
        >>> timer.write(200)
        >>> clock.advance(1.0)
        >>> timer.read()
        140
    """

    def __init__(self, clock: Clock = default_clock):
        self._clock = clock
        self._value = 0
        self._written_at = clock()

    def write(self, value: int) -> None:
        """Store an 8-bit value and record the current instant."""
        self._value = value & 0xFF
        self._written_at = self._clock()

    def read(self) -> int:
        """Current value: stored value minus elapsed decay, clamped to 0-255."""
        elapsed = self._clock() - self._written_at
        remaining = math.floor(self._value - elapsed * TIMER_RATE + 0.5)
        return max(0, min(0xFF, remaining))

    @property
    def is_active(self) -> bool:
        """True while the timer has not reached zero."""
        return self.read() > 0


class Registers:
    """
    CHIP-8 register file.

    All setters mask to the architectural width, as the CPU relies on
    wraparound for 8-bit arithmetic.

    Attributes:
        v: The sixteen V registers
        stack: The 16-entry ring of return addresses
        delay_timer: Delay timer (DT)
        sound_timer: Sound timer (ST)
    """

    def __init__(self, pc: int = 0x200, clock: Clock = default_clock):
        """
        Initialize registers.

        Args:
            pc: Initial program counter (the program origin)
            clock: Clock used by the timers
        """
        self.v = [0] * NUM_REGISTERS
        self._i = 0
        self._pc = pc & 0xFFFF
        self._sp = 0
        self.stack = [0] * STACK_SIZE
        self.delay_timer = Timer(clock)
        self.sound_timer = Timer(clock)

    # ========================================
    # Register Properties
    # ========================================

    @property
    def i(self) -> int:
        """Index register (16-bit)."""
        return self._i

    @i.setter
    def i(self, value: int) -> None:
        self._i = value & 0xFFFF

    @property
    def pc(self) -> int:
        """Program counter (16-bit)."""
        return self._pc

    @pc.setter
    def pc(self, value: int) -> None:
        self._pc = value & 0xFFFF

    @property
    def sp(self) -> int:
        """Stack pointer (8-bit)."""
        return self._sp

    @sp.setter
    def sp(self, value: int) -> None:
        self._sp = value & 0xFF

    @property
    def flag(self) -> int:
        """VF."""
        return self.v[FLAG]

    @flag.setter
    def flag(self, value: int) -> None:
        self.v[FLAG] = value & 0xFF

    # ========================================
    # Stack Operations
    # ========================================

    def push(self, address: int) -> None:
        """
        Push an address onto the ring stack.

        Writes at SP then advances SP modulo 16. Pushing at SP=15 wraps to 0;
        a seventeenth nested call silently overwrites the oldest entry.
        """
        slot = self._sp % STACK_SIZE
        self.stack[slot] = address & 0xFFFF
        self._sp = (slot + 1) % STACK_SIZE

    def pop(self) -> int:
        """
        Pop an address from the ring stack.

        Retreats SP modulo 16 then reads. Popping at SP=0 wraps to 15 and
        returns ring slot 15.
        """
        slot = (self._sp - 1) % STACK_SIZE
        self._sp = slot
        return self.stack[slot]

    def snapshot(self) -> dict:
        """
        Register values as a dictionary.

        Returns:
            Dictionary with keys v0-vf, i, pc, sp, dt, st
        """
        result = {f"v{n:x}": value for n, value in enumerate(self.v)}
        result.update({
            'i': self._i,
            'pc': self._pc,
            'sp': self._sp,
            'dt': self.delay_timer.read(),
            'st': self.sound_timer.read(),
        })
        return result
