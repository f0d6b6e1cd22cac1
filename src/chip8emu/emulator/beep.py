"""
Sound Output Interface
======================

The machine has a single tone that sounds while the sound timer is
non-zero. The CPU drives it through a BeepHandler; how the tone is produced
is up to the host.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from typing import Protocol


class BeepHandler(Protocol):
    """
    Protocol for sound output.

    start() is called when the sound timer becomes non-zero, stop() when it
    reaches zero or sound is disabled. Each call marks a state change, so
    implementations need not guard against repeats.
    """
    def start(self) -> None:
        """Begin playing the tone."""
        ...

    def stop(self) -> None:
        """Stop playing the tone."""
        ...


class NullBeep:
    """BeepHandler that does nothing."""

    def start(self) -> None:
        pass

    def stop(self) -> None:
        pass
