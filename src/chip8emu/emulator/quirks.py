"""
Compatibility Quirks and Machine Configuration
==============================================

Interpreters for this architecture have diverged over the years, and ROMs
written for one often misbehave on another. The differences are captured
as independent quirk flags.

Presets:
- chip8: the original COSMAC VIP interpreter
- schip: SUPER-CHIP / CHIP-48 on HP calculators
- modern: what most contemporary ROMs and test suites expect (default)

Quirk summary:

    flag                          chip8   schip   modern
    ----------------------------  ------  ------  ------
    shift_uses_vy                 True    False   False
    increment_index_on_transfer   True    False   False
    wrap_sprites                  False   False   False
    jump_uses_vx                  False   True    False
    logic_resets_flag             True    False   False
    consume_release_on_query      False   False   False

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass, field, fields


@dataclass(frozen=True)
class Quirks:
    """
    Instruction-level compatibility switches.

    Attributes:
        shift_uses_vy: 8XY6/8XYE shift VY and store in VX. When False, VX
            is shifted in place and Y is ignored.
        increment_index_on_transfer: FX55/FX65 leave I advanced by X + 1.
        wrap_sprites: DXYN wraps pixels past the right/bottom edge around
            to the opposite edge instead of clipping them.
        jump_uses_vx: BNNN is read as BXNN and jumps to NN + VX (the low
            byte plus the register named by the second nibble) instead of
            NNN + V0.
        logic_resets_flag: 8XY1/8XY2/8XY3 clear VF.
        consume_release_on_query: EX9E/EXA1 also discard a pending key
            release, so a following FX0A waits for a fresh one.
    """
    shift_uses_vy: bool = False
    increment_index_on_transfer: bool = False
    wrap_sprites: bool = False
    jump_uses_vx: bool = False
    logic_resets_flag: bool = False
    consume_release_on_query: bool = False

    @classmethod
    def names(cls) -> list[str]:
        """Names of all quirk flags."""
        return [f.name for f in fields(cls)]


# =============================================================================
# Presets
# =============================================================================

QUIRKS_CHIP8 = Quirks(
    shift_uses_vy=True,
    increment_index_on_transfer=True,
    logic_resets_flag=True,
)

QUIRKS_SCHIP = Quirks(
    jump_uses_vx=True,
)

QUIRKS_MODERN = Quirks()

QUIRKS_DEFAULT = QUIRKS_MODERN

_PRESETS = {
    "chip8": QUIRKS_CHIP8,
    "schip": QUIRKS_SCHIP,
    "modern": QUIRKS_MODERN,
}


def get_quirks(name: str) -> Quirks:
    """
    Look up a quirk preset by name (case-insensitive).

    Raises:
        ValueError: If the preset name is unknown
    """
    try:
        return _PRESETS[name.lower()]
    except KeyError:
        valid = ", ".join(sorted(_PRESETS))
        raise ValueError(f"Unknown quirk preset '{name}' (valid: {valid})") from None


def list_quirk_presets() -> list[str]:
    """Names of all quirk presets."""
    return sorted(_PRESETS)


# =============================================================================
# Machine Configuration
# =============================================================================

@dataclass(frozen=True)
class MachineConfig:
    """
    Configuration for CPU initialization.

    Attributes:
        instructions_per_tick: Instructions executed per tick() call. At the
            usual 60 ticks per second, 10 gives roughly 600 instructions/s.
        min_draw_interval: Minimum seconds between two performed draws.
            0 disables draw pacing.
        program_origin: Default load address for programs.
        quirks: Compatibility quirks.

    Example:
        >>> config = MachineConfig(instructions_per_tick=15, quirks=get_quirks("schip"))
    """
    instructions_per_tick: int = 10
    min_draw_interval: float = 1.0 / 60.0
    program_origin: int = 0x200
    quirks: Quirks = field(default_factory=lambda: QUIRKS_DEFAULT)

    def __post_init__(self) -> None:
        if self.instructions_per_tick < 0:
            raise ValueError(
                f"instructions_per_tick must be >= 0, got {self.instructions_per_tick}"
            )
        if self.min_draw_interval < 0:
            raise ValueError(
                f"min_draw_interval must be >= 0, got {self.min_draw_interval}"
            )
