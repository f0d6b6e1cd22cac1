"""
c8run - Headless CHIP-8 Runner
==============================

Runs a CHIP-8 program for a fixed number of frames against a simulated
60 Hz clock, then reports the final screen. Runs are deterministic: the
clock advances exactly 1/60 s per frame and the random source is seeded.

Usage Examples
--------------
Run the IBM logo and print the screen:
    $ c8run ibm.ch8 --frames 60 --text

Use original COSMAC VIP behaviour:
    $ c8run test.ch8 --preset chip8

Override single quirks:
    $ c8run game.ch8 --quirk wrap_sprites --no-quirk shift_uses_vy

Hold key 5 down for the whole run and save a screenshot:
    $ c8run game.ch8 --key 5 --png screen.png --scale 10

Stop at a breakpoint:
    $ c8run game.ch8 --break 0x23A -v

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import dataclasses
import logging
import random
from pathlib import Path
from typing import Optional

import click

from chip8emu import __version__
from chip8emu.cli.errors import handle_cli_exception, parse_address
from chip8emu.emulator import (
    CPU,
    MachineConfig,
    ManualClock,
    Quirks,
    get_quirks,
    list_quirk_presets,
)


def build_config(
    preset: str,
    enable: tuple[str, ...],
    disable: tuple[str, ...],
    ipt: int,
    unpaced: bool,
    origin: int,
) -> MachineConfig:
    """Combine a quirk preset with per-flag overrides into a MachineConfig."""
    quirks = get_quirks(preset)
    overrides = {name: True for name in enable}
    overrides.update({name: False for name in disable})
    if overrides:
        quirks = dataclasses.replace(quirks, **overrides)

    return MachineConfig(
        instructions_per_tick=ipt,
        min_draw_interval=0.0 if unpaced else 1.0 / 60.0,
        program_origin=origin,
        quirks=quirks,
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "rom",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--origin",
    type=str,
    default="0x200",
    help="Load address and initial PC (hex with 0x/$ prefix or decimal). Default: 0x200",
)
@click.option(
    "-f", "--frames",
    type=click.IntRange(min=0),
    default=60,
    help="Number of 60 Hz frames to run (default: 60)",
)
@click.option(
    "--ipt",
    type=click.IntRange(min=0),
    default=10,
    help="Instructions executed per frame (default: 10)",
)
@click.option(
    "-p", "--preset",
    type=click.Choice(list_quirk_presets(), case_sensitive=False),
    default="modern",
    help="Quirk preset (default: modern)",
)
@click.option(
    "--quirk", "enable",
    type=click.Choice(Quirks.names()),
    multiple=True,
    help="Enable a quirk flag on top of the preset (repeatable)",
)
@click.option(
    "--no-quirk", "disable",
    type=click.Choice(Quirks.names()),
    multiple=True,
    help="Disable a quirk flag on top of the preset (repeatable)",
)
@click.option(
    "--unpaced",
    is_flag=True,
    help="Perform every draw (disable the 60 Hz draw rate limit)",
)
@click.option(
    "-k", "--key",
    "keys",
    type=str,
    multiple=True,
    help="Hold a keypad key (hex digit 0-F) down for the whole run (repeatable)",
)
@click.option(
    "-b", "--break",
    "breaks",
    type=str,
    multiple=True,
    help="Halt when PC reaches this address (repeatable)",
)
@click.option(
    "--seed",
    type=int,
    default=0,
    help="Seed for the RND instruction (default: 0)",
)
@click.option(
    "--png",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the final screen as a PNG image",
)
@click.option(
    "--scale",
    type=click.IntRange(min=1),
    default=8,
    help="Pixel scale for --png (default: 8)",
)
@click.option(
    "-t", "--text",
    is_flag=True,
    help="Print the final screen as text",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging)",
)
@click.version_option(version=__version__, prog_name="c8run")
def main(
    rom: Path,
    origin: str,
    frames: int,
    ipt: int,
    preset: str,
    enable: tuple[str, ...],
    disable: tuple[str, ...],
    unpaced: bool,
    keys: tuple[str, ...],
    breaks: tuple[str, ...],
    seed: int,
    png: Optional[Path],
    scale: int,
    text: bool,
    verbose: bool,
) -> None:
    """
    Run a CHIP-8 program headless.

    ROM is the program image to load.

    Examples:

        # Run for two seconds and show the screen
        c8run ibm.ch8 --frames 120 --text

        # Original interpreter behaviour, screenshot at 10x
        c8run test.ch8 --preset chip8 --png out.png --scale 10
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        config = build_config(
            preset, enable, disable, ipt, unpaced, parse_address(origin)
        )
        clock = ManualClock()
        cpu = CPU(config, clock=clock, rng=random.Random(seed))
        cpu.load_program(rom.read_bytes())

        for key in keys:
            try:
                index = int(key, 16)
            except ValueError:
                raise click.BadParameter(f"Invalid key '{key}'") from None
            cpu.set_key(index, True)

        for address in breaks:
            cpu.breakpoints.add_breakpoint(parse_address(address))

        if verbose:
            click.echo(f"Loaded {rom} at ${cpu.origin:03X}", err=True)
            click.echo(f"Quirks: {config.quirks}", err=True)

        frame = 0
        while frame < frames and not cpu.is_halted:
            cpu.tick()
            clock.advance_frames(1)
            frame += 1

        event = cpu.breakpoints.last_event
        if event is not None:
            click.echo(str(event), err=True)

        if verbose:
            click.echo(
                f"Ran {frame} frame(s), {cpu.instruction_count} instruction(s), "
                f"PC=${cpu.registers.pc:03X}",
                err=True,
            )

        if text:
            click.echo(cpu.display.get_text())

        if png:
            png.write_bytes(cpu.display.render_image(scale=scale))
            if verbose:
                click.echo(f"Screen written to: {png}", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Load")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
