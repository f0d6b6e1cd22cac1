"""
c8disasm - CHIP-8 Disassembler Command-Line Interface
=====================================================

Usage Examples
--------------
Disassemble a ROM:
    $ c8disasm pong.ch8

With a different load address:
    $ c8disasm eti.ch8 --origin 0x600

Limit number of words:
    $ c8disasm pong.ch8 --count 20

List a SCHIP program:
    $ c8disasm blinky.ch8 --jump-uses-vx

Output to file:
    $ c8disasm pong.ch8 -o pong.lst

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from itertools import islice
from pathlib import Path
from typing import Optional

import click

from chip8emu import __version__
from chip8emu.cli.errors import handle_cli_exception, parse_address
from chip8emu.disassembler import disassemble


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: stdout)",
)
@click.option(
    "-a", "--origin",
    type=str,
    default="0x200",
    help="Load address of the first byte (hex with 0x/$ prefix or decimal). Default: 0x200",
)
@click.option(
    "-c", "--count",
    type=click.IntRange(min=0),
    default=None,
    help="Maximum number of words to disassemble (default: all)",
)
@click.option(
    "--jump-uses-vx",
    is_flag=True,
    help="Render BNNN as \"JP Vx, kk\" (SCHIP jump-with-offset)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="c8disasm")
def main(
    input_file: Path,
    output: Optional[Path],
    origin: str,
    count: Optional[int],
    jump_uses_vx: bool,
    verbose: bool,
) -> None:
    """
    Disassemble a CHIP-8 program.

    INPUT_FILE is the program image to disassemble.
    """
    try:
        base_address = parse_address(origin)
        if not 0 <= base_address <= 0xFFF:
            raise click.BadParameter("Origin must be 0-4095 (0x000-0xFFF)")

        data = input_file.read_bytes()
        if len(data) == 0:
            raise click.BadParameter(f"{input_file} is empty")

        if verbose:
            click.echo(f"Input file: {input_file} ({len(data)} bytes)", err=True)
            click.echo(f"Origin: ${base_address:03X}", err=True)

        lines = list(islice(disassemble(data, base_address, jump_uses_vx), count))

        output_lines = [
            f"; Disassembly of {input_file.name}",
            f"; Size: {len(data)} bytes",
            f"; Origin: ${base_address:03X}",
            "",
        ]
        output_lines.extend(str(line) for line in lines)
        result = "\n".join(output_lines) + "\n"

        if output:
            output.write_text(result, encoding="utf-8")
            if verbose:
                click.echo(f"Output written to: {output}", err=True)
        else:
            click.echo(result, nl=False)

        if verbose:
            click.echo(f"Words disassembled: {len(lines)}", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
