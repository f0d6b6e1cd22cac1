"""
Display Unit Tests
==================

Tests for the bit-packed framebuffer: XOR drawing, collision, clipping,
wrapping and rendering.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import io

import pytest
from chip8emu.emulator import Display


@pytest.fixture
def display():
    return Display()


# =============================================================================
# Drawing
# =============================================================================

class TestDraw:
    """Test sprite XOR drawing."""

    def test_dimensions(self, display):
        assert (display.width, display.height) == (64, 32)

    def test_draw_sets_pixels(self, display):
        collision = display.draw(0, 0, [0xF0])
        assert collision is False
        assert [display.get_pixel(x, 0) for x in range(5)] == [True] * 4 + [False]

    def test_bit_63_is_leftmost(self, display):
        display.draw(0, 0, [0x80])
        assert display.get_row(0) == 1 << 63

    def test_redraw_erases_and_collides(self, display):
        display.draw(10, 5, [0xFF, 0x81])
        assert display.draw(10, 5, [0xFF, 0x81]) is True
        assert display.lit_pixels == 0

    def test_no_collision_on_disjoint_sprites(self, display):
        display.draw(0, 0, [0xF0])
        assert display.draw(0, 0, [0x0F]) is False
        assert display.lit_pixels == 8

    def test_origin_taken_modulo(self, display):
        display.draw(64 + 2, 32 + 1, [0x80])
        assert display.get_pixel(2, 1)

    def test_clear(self, display):
        display.draw(0, 0, [0xFF])
        display.clear()
        assert display.lit_pixels == 0


class TestEdges:
    """Test behaviour at the right and bottom edges."""

    def test_clip_at_right_edge(self, display):
        display.draw(60, 0, [0xFF])
        assert display.get_row(0) == 0xF
        assert not display.get_pixel(0, 0)

    def test_wrap_at_right_edge(self, display):
        display.draw(60, 0, [0xFF], wrap=True)
        assert display.get_row(0) == 0xF | (0xF << 60)
        assert display.get_pixel(0, 0)
        assert display.get_pixel(3, 0)

    def test_clip_at_bottom_edge(self, display):
        display.draw(0, 31, [0x80, 0x80])
        assert display.get_pixel(0, 31)
        assert not display.get_pixel(0, 0)

    def test_wrap_at_bottom_edge(self, display):
        display.draw(0, 31, [0x80, 0x80], wrap=True)
        assert display.get_pixel(0, 31)
        assert display.get_pixel(0, 0)


class TestAccessors:
    """Test pixel access and snapshots."""

    def test_pixel_out_of_range(self, display):
        with pytest.raises(ValueError):
            display.get_pixel(64, 0)
        with pytest.raises(ValueError):
            display.get_pixel(0, 32)

    def test_snapshot_is_a_copy(self, display):
        snap = display.snapshot()
        display.draw(0, 0, [0xFF])
        assert snap[0] == 0
        assert len(snap) == 32


# =============================================================================
# Rendering
# =============================================================================

class TestRendering:
    """Test text, buffer and image output."""

    def test_pixel_buffer(self, display):
        display.draw(1, 0, [0x80])
        buf = display.get_pixel_buffer()
        assert len(buf) == 64 * 32
        assert buf[0] == 0
        assert buf[1] == 255

    def test_text(self, display):
        display.draw(0, 0, [0xA0])
        lines = display.get_text().splitlines()
        assert len(lines) == 32
        assert lines[0].startswith("#.#.")
        assert lines[1] == "." * 64

    def test_render_image(self, display):
        from PIL import Image

        display.draw(0, 0, [0x80])
        png = display.render_image(scale=4)
        assert png.startswith(b"\x89PNG")
        img = Image.open(io.BytesIO(png))
        assert img.size == (256, 128)
        assert img.getpixel((0, 0)) == 255
        assert img.getpixel((3, 3)) == 255
        assert img.getpixel((4, 0)) == 0

    def test_render_image_bad_scale(self, display):
        with pytest.raises(ValueError):
            display.render_image(scale=0)
