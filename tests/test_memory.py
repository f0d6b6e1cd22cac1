"""
Memory Unit Tests
=================

Tests for the 4 KiB memory, glyph table and program loading.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import pytest
from chip8emu.emulator import Memory, FONT_GLYPHS, MEMORY_SIZE, glyph_address
from chip8emu.errors import AddressError, ProgramLoadError


# =============================================================================
# Glyph Table
# =============================================================================

class TestGlyphs:
    """Test the built-in hex digit glyphs."""

    def test_glyph_table_size(self):
        assert len(FONT_GLYPHS) == 80

    def test_glyphs_loaded_at_zero(self):
        mem = Memory()
        assert mem.read_bytes(0, 80) == FONT_GLYPHS

    def test_glyph_zero(self):
        mem = Memory()
        assert mem.read_bytes(glyph_address(0), 5) == bytes([0xF0, 0x90, 0x90, 0x90, 0xF0])

    def test_glyph_address(self):
        assert glyph_address(0x0) == 0x00
        assert glyph_address(0xA) == 0x32
        assert glyph_address(0xF) == 0x4B

    def test_glyph_address_uses_low_nibble(self):
        assert glyph_address(0x1A) == glyph_address(0xA)


# =============================================================================
# Program Loading
# =============================================================================

class TestProgramLoading:
    """Test program placement and rejection."""

    def test_program_at_origin(self):
        mem = Memory(bytes([0x60, 0x12]), origin=0x200)
        assert mem.read(0x200) == 0x60
        assert mem.read(0x201) == 0x12
        assert mem.program_size == 2
        assert mem.origin == 0x200

    def test_rest_of_memory_zero(self):
        mem = Memory(bytes([0xFF]))
        assert mem.read(0x1FF) == 0
        assert mem.read(0x201) == 0

    def test_program_filling_memory_exactly(self):
        mem = Memory(bytes(MEMORY_SIZE - 0x200))
        assert mem.program_size == 0xE00

    def test_program_too_large(self):
        with pytest.raises(ProgramLoadError) as exc_info:
            Memory(bytes(MEMORY_SIZE - 0x200 + 1))
        assert exc_info.value.size == 0xE01
        assert exc_info.value.origin == 0x200

    def test_origin_outside_memory(self):
        with pytest.raises(ProgramLoadError):
            Memory(b"", origin=0x1000)

    def test_custom_origin(self):
        mem = Memory(bytes([0xAB]), origin=0x600)
        assert mem.read(0x600) == 0xAB


# =============================================================================
# Access
# =============================================================================

class TestAccess:
    """Test reads, writes and range checks."""

    def test_write_masks_to_byte(self):
        mem = Memory()
        mem.write(0x300, 0x1FF)
        assert mem.read(0x300) == 0xFF

    def test_read_word_big_endian(self):
        mem = Memory(bytes([0xD1, 0x25]))
        assert mem.read_word(0x200) == 0xD125

    def test_read_outside_memory(self):
        mem = Memory()
        with pytest.raises(AddressError) as exc_info:
            mem.read(0x1000)
        assert exc_info.value.address == 0x1000

    def test_write_outside_memory(self):
        with pytest.raises(AddressError):
            Memory().write(0x1000, 1)

    def test_read_word_straddling_end(self):
        with pytest.raises(AddressError):
            Memory().read_word(0xFFF)

    def test_read_bytes_range_checked(self):
        mem = Memory()
        assert mem.read_bytes(0xFFE, 2) == b"\x00\x00"
        with pytest.raises(AddressError):
            mem.read_bytes(0xFFE, 3)

    def test_read_bytes_empty(self):
        assert Memory().read_bytes(0x5000, 0) == b""

    def test_dump_and_len(self):
        mem = Memory()
        assert len(mem) == MEMORY_SIZE
        assert len(mem.dump()) == MEMORY_SIZE
