"""
Register File Unit Tests
========================

Tests for register masking, the ring stack and wall-clock timers.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import pytest
from chip8emu.emulator import ManualClock, Registers, Timer


@pytest.fixture
def regs(clock):
    return Registers(0x200, clock)


# =============================================================================
# Register Masking
# =============================================================================

class TestRegisterMasking:
    """Test architectural widths."""

    def test_initial_state(self, regs):
        assert regs.pc == 0x200
        assert regs.i == 0
        assert regs.sp == 0
        assert regs.v == [0] * 16

    def test_i_is_16bit(self, regs):
        regs.i = 0x1FFFF
        assert regs.i == 0xFFFF

    def test_pc_is_16bit(self, regs):
        regs.pc = 0x10002
        assert regs.pc == 0x0002

    def test_sp_is_8bit(self, regs):
        regs.sp = 0x1FF
        assert regs.sp == 0xFF

    def test_flag_is_vf(self, regs):
        regs.flag = 1
        assert regs.v[0xF] == 1


# =============================================================================
# Ring Stack
# =============================================================================

class TestRingStack:
    """Test the 16-entry ring of return addresses."""

    def test_push_pop(self, regs):
        regs.push(0x200)
        regs.push(0x210)
        assert regs.sp == 2
        assert regs.pop() == 0x210
        assert regs.pop() == 0x200
        assert regs.sp == 0

    def test_push_at_15_wraps_to_0(self, regs):
        regs.sp = 15
        regs.push(0x345)
        assert regs.stack[15] == 0x345
        assert regs.sp == 0

    def test_pop_at_0_reads_slot_15(self, regs):
        regs.stack[15] = 0x300
        assert regs.pop() == 0x300
        assert regs.sp == 15

    def test_seventeenth_push_overwrites_oldest(self, regs):
        for n in range(17):
            regs.push(0x200 + n * 2)
        assert regs.sp == 1
        assert regs.stack[0] == 0x200 + 16 * 2


# =============================================================================
# Timers
# =============================================================================

class TestTimer:
    """Test continuous 60 Hz decay."""

    def test_decay_over_one_second(self, clock):
        timer = Timer(clock)
        timer.write(200)
        clock.advance(1.0)
        assert timer.read() == 140

    def test_clamps_at_zero(self, clock):
        timer = Timer(clock)
        timer.write(10)
        clock.advance(5.0)
        assert timer.read() == 0
        assert timer.is_active is False

    def test_no_decay_without_time(self, clock):
        timer = Timer(clock)
        timer.write(42)
        assert timer.read() == 42

    def test_rounds_half_up(self, clock):
        timer = Timer(clock)
        timer.write(10)
        clock.advance(0.5 / 60.0)
        assert timer.read() == 10
        clock.advance(0.25 / 60.0)
        assert timer.read() == 9

    def test_write_masks_to_byte(self, clock):
        timer = Timer(clock)
        timer.write(0x1FF)
        assert timer.read() == 0xFF

    def test_write_restarts_decay(self):
        clock = ManualClock(100.0)
        timer = Timer(clock)
        timer.write(60)
        clock.advance(0.5)
        timer.write(60)
        clock.advance(0.5)
        assert timer.read() == 30


class TestSnapshot:
    """Test the debugger register snapshot."""

    def test_snapshot_keys(self, regs):
        snap = regs.snapshot()
        assert set(snap) == {f"v{n:x}" for n in range(16)} | {"i", "pc", "sp", "dt", "st"}

    def test_snapshot_values(self, regs, clock):
        regs.v[0xA] = 7
        regs.delay_timer.write(30)
        clock.advance(0.25)
        snap = regs.snapshot()
        assert snap["va"] == 7
        assert snap["dt"] == 15
        assert snap["pc"] == 0x200
