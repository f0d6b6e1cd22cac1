"""
Keypad Controller for the CHIP-8 Emulator
=========================================

The machine has a 16-key hexadecimal keypad:

    1 2 3 C
    4 5 6 D
    7 8 9 E
    A 0 B F

Hosts conventionally map it onto the left block of a QWERTY keyboard:

    1 2 3 4
    Q W E R
    A S D F
    Z X C V

Besides the down/up state of each key, the keypad remembers the most
recently released key until it is consumed. FX0A waits on that slot, so
only a full press-and-release satisfies it.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from typing import Dict, Optional

NUM_KEYS = 16


# =============================================================================
# HOST KEY MAPPING
# =============================================================================
# Maps host key names to keypad indices.

HOST_KEY_MAP: Dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}


class Keypad:
    """
    16-key state table with release tracking.

    Example:
        >>> kp = Keypad()
        >>> kp.set_key(5, True)
        >>> kp.set_key(5, False)
        >>> kp.get_released_key()
        5
        >>> kp.get_released_key() is None
        True
    """

    def __init__(self, consume_release_on_query: bool = False):
        """
        Initialize keypad with all keys up.

        Args:
            consume_release_on_query: If True, get_key_state() also clears
                the pending released key. Reproduces one observed
                interpreter revision where SKP/SKNP swallow a pending
                release.
        """
        self.consume_release_on_query = consume_release_on_query
        self._keys = [False] * NUM_KEYS
        self._last_released: Optional[int] = None

    @staticmethod
    def _check(index: int) -> None:
        if not 0 <= index < NUM_KEYS:
            raise ValueError(f"Key index must be 0-15, got {index}")

    def set_key(self, index: int, down: bool) -> None:
        """
        Update a key's state.

        A down-to-up transition records the key as the last released key.

        Args:
            index: Key index (0-15)
            down: True for pressed, False for released
        """
        self._check(index)
        if self._keys[index] and not down:
            self._last_released = index
        self._keys[index] = down

    def get_key_state(self, index: int) -> bool:
        """
        Check whether a key is currently down.

        Args:
            index: Key index (0-15)

        Returns:
            True if the key is pressed
        """
        self._check(index)
        if self.consume_release_on_query:
            self._last_released = None
        return self._keys[index]

    def get_released_key(self) -> Optional[int]:
        """Return and clear the last released key, or None if none pending."""
        key = self._last_released
        self._last_released = None
        return key

    @property
    def pending_release(self) -> Optional[int]:
        """Last released key without consuming it."""
        return self._last_released

    @property
    def pressed_keys(self) -> list[int]:
        """Indices of all keys currently down."""
        return [i for i, down in enumerate(self._keys) if down]

    # =========================================================================
    # Host key names
    # =========================================================================

    @staticmethod
    def key_for_name(name: str) -> int:
        """
        Look up the keypad index for a host key name.

        Raises:
            ValueError: If the name is not mapped
        """
        try:
            return HOST_KEY_MAP[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown key name: {name!r}") from None

    def key_down(self, name: str) -> None:
        """Press the keypad key mapped to a host key name."""
        self.set_key(self.key_for_name(name), True)

    def key_up(self, name: str) -> None:
        """Release the keypad key mapped to a host key name."""
        self.set_key(self.key_for_name(name), False)
