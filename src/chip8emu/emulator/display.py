"""
Framebuffer for the CHIP-8 Emulator
===================================

The display is 64 columns x 32 rows of monochrome pixels. Each row is
stored as one 64-bit integer:

    bit 63                                   bit 0
    |                                            |
    col 0 (leftmost)                col 63 (rightmost)

Sprites are drawn by XOR. A sprite row byte is placed in the top byte of
a 64-bit mask (col 0-7) and then shifted right by the origin column:

- clip mode: a plain right shift, bits past col 63 fall off
- wrap mode: a 64-bit rotate, bits past col 63 reappear at col 0

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import io
from typing import Iterable

WIDTH = 64
HEIGHT = 32

ROW_MASK = (1 << WIDTH) - 1


def _rotate_right(value: int, count: int) -> int:
    """Rotate a 64-bit value right."""
    count %= WIDTH
    if count == 0:
        return value
    return ((value >> count) | (value << (WIDTH - count))) & ROW_MASK


class Display:
    """
    64x32 bit-packed framebuffer with XOR sprite drawing.

    Example:
        >>> display = Display()
        >>> display.draw(0, 0, [0xF0])
        False
        >>> display.get_pixel(3, 0)
        True
        >>> display.draw(0, 0, [0xF0])  # same sprite erases itself
        True
    """

    def __init__(self):
        self._rows = [0] * HEIGHT

    @property
    def width(self) -> int:
        return WIDTH

    @property
    def height(self) -> int:
        return HEIGHT

    def clear(self) -> None:
        """Turn every pixel off."""
        self._rows = [0] * HEIGHT

    def draw(
        self,
        origin_x: int,
        origin_y: int,
        rows: Iterable[int],
        wrap: bool = False,
    ) -> bool:
        """
        XOR a sprite into the framebuffer.

        Args:
            origin_x: Column of the sprite's left edge (taken modulo 64)
            origin_y: Row of the sprite's top edge (taken modulo 32)
            rows: Sprite bytes, one per row, MSB = leftmost pixel
            wrap: Wrap at the edges instead of clipping

        Returns:
            True if any pixel that was on was turned off (collision)
        """
        x = origin_x % WIDTH
        y = origin_y % HEIGHT
        collision = False

        for offset, sprite_row in enumerate(rows):
            row = y + offset
            if row >= HEIGHT:
                if not wrap:
                    break
                row %= HEIGHT

            mask = (sprite_row & 0xFF) << (WIDTH - 8)
            if wrap:
                mask = _rotate_right(mask, x)
            else:
                mask >>= x

            if self._rows[row] & mask:
                collision = True
            self._rows[row] ^= mask

        return collision

    def snapshot(self) -> tuple[int, ...]:
        """Read-only copy of the 32 row words."""
        return tuple(self._rows)

    def get_row(self, row: int) -> int:
        """Row word for row 0-31."""
        return self._rows[row]

    def get_pixel(self, x: int, y: int) -> bool:
        """
        Check whether a pixel is on.

        Args:
            x: Column (0-63)
            y: Row (0-31)
        """
        if not (0 <= x < WIDTH and 0 <= y < HEIGHT):
            raise ValueError(f"Pixel ({x}, {y}) is outside the {WIDTH}x{HEIGHT} display")
        return bool((self._rows[y] >> (WIDTH - 1 - x)) & 1)

    @property
    def lit_pixels(self) -> int:
        """Number of pixels currently on."""
        return sum(bin(row).count("1") for row in self._rows)

    # =========================================================================
    # Pixel Buffer API (for graphical rendering)
    # =========================================================================

    def get_pixel_buffer(self) -> bytes:
        """
        Get display as pixel buffer.

        Returns:
            One byte per pixel (0 = off, 255 = on), row-major, 64 x 32 bytes
        """
        pixels = bytearray(WIDTH * HEIGHT)
        for y, row in enumerate(self._rows):
            if not row:
                continue
            base = y * WIDTH
            for x in range(WIDTH):
                if (row >> (WIDTH - 1 - x)) & 1:
                    pixels[base + x] = 255
        return bytes(pixels)

    def get_text(self, on: str = "#", off: str = ".") -> str:
        """
        Render the framebuffer as text, one line per row.

        Args:
            on: Character for lit pixels
            off: Character for dark pixels
        """
        lines = []
        for row in self._rows:
            bits = format(row, f"0{WIDTH}b")
            lines.append(bits.replace("1", on).replace("0", off))
        return "\n".join(lines)

    def render_image(
        self,
        scale: int = 8,
        foreground: int = 255,
        background: int = 0,
    ) -> bytes:
        """
        Render display as PNG image.

        Args:
            scale: Pixel scale factor (default 8)
            foreground: Grey level of lit pixels
            background: Grey level of dark pixels

        Returns:
            PNG image bytes
        """
        from PIL import Image

        if scale < 1:
            raise ValueError(f"Scale must be at least 1, got {scale}")

        lut = [background] * 256
        lut[255] = foreground
        img = Image.frombytes('L', (WIDTH, HEIGHT), self.get_pixel_buffer())
        img = img.point(lut)
        if scale != 1:
            img = img.resize((WIDTH * scale, HEIGHT * scale), Image.Resampling.NEAREST)

        buffer = io.BytesIO()
        img.save(buffer, format='PNG')
        return buffer.getvalue()

    def __repr__(self) -> str:
        return f"Display({WIDTH}x{HEIGHT}, lit={self.lit_pixels})"
