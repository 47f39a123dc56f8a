"""
m6502-tablegen - 6502 Opcode Table Generator
============================================

This module implements the command-line interface of the generator. It
loads a JSON opcode table, compiles it, and prints generated source
fragments for inclusion in an emulator or assembler.

Usage Examples
--------------
Full opcode table from the packaged 6502 table:
    $ m6502-tablegen table

Only the 2-cycle instructions, qualified for the Rust emulator:
    $ m6502-tablegen table --cycles 2 --style rust

Per-mnemonic dispatch blocks from a custom table:
    $ m6502-tablegen -i instructs.json dispatch -o dispatch.rs

Table statistics:
    $ m6502-tablegen summary

The whole output is generated before anything is written, so a malformed
table never produces partial output.

Exit Codes
----------
0 - Success
1 - Malformed table or invalid addressing mode
2 - Invalid arguments, missing or unreadable files
3 - Internal error
"""

import logging
from pathlib import Path
from typing import Optional

import click

from m6502_tablegen import __version__
from m6502_tablegen.cli.errors import handle_cli_exception
from m6502_tablegen.compiler import CompiledTable, compile_table
from m6502_tablegen.config import GeneratorConfig
from m6502_tablegen.records import load_records
from m6502_tablegen.render import (
    STYLES,
    RenderStyle,
    get_style,
    render_cycle_matches,
    render_encoding_table,
    render_instruction_info,
    render_mnemonic_encodings,
    render_mnemonic_enum,
    render_summary,
)

logger = logging.getLogger(__name__)


# =============================================================================
# CLI Context and Utilities
# =============================================================================

class Context:
    """
    Shared context for CLI commands.

    Stores the resolved configuration and verbosity.
    """

    def __init__(self) -> None:
        self.config: GeneratorConfig = GeneratorConfig()
        self.verbose: bool = False

    def setup_logging(self) -> None:
        """Configure logging on stderr; generated code owns stdout."""
        level = logging.DEBUG if self.verbose else logging.WARNING
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(message)s" if self.verbose else "%(message)s",
        )

    def compile(self) -> CompiledTable:
        """Load and compile the configured opcode table."""
        path = self.config.input_path
        records = load_records(path)
        return compile_table(records, source=path.name)

    def style(self, name: Optional[str]) -> RenderStyle:
        """Resolve a --style option against the configured default."""
        return get_style(name or self.config.style)


pass_context = click.make_pass_decorator(Context, ensure=True)


def emit(lines: list[str], output: Optional[Path], verbose: bool = False) -> None:
    """
    Write generated lines to a file or stdout.

    Args:
        lines: Rendered lines, without newlines
        output: Destination file, or None for stdout
        verbose: Report where the output went on stderr
    """
    result = "".join(line + "\n" for line in lines)

    if output:
        output.write_text(result, encoding="utf-8")
        if verbose:
            click.echo(f"Wrote {len(lines)} lines to {output}", err=True)
    else:
        click.echo(result, nl=False)


style_option = click.option(
    "-s", "--style",
    type=click.Choice(sorted(STYLES), case_sensitive=False),
    default=None,
    help="Identifier style: plain (LDA, Immediate) or rust "
         "(Instruct::LDA, AddressType::Immediate). Default: plain.",
)

output_option = click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: stdout)",
)


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.option(
    "-i", "--input", "input_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Opcode table JSON (default: packaged 6502 table, "
         "or $M6502_TABLEGEN_INPUT)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable verbose output",
)
@click.version_option(version=__version__, prog_name="m6502-tablegen")
@pass_context
def main(ctx: Context, input_path: Optional[Path], verbose: bool) -> None:
    """
    Generate 6502 instruction lookup tables from a JSON opcode table.

    The table is a JSON array of 256 objects with "name", "address_mode"
    and "machine_cycles" fields; the array index is the opcode byte.
    Entries named ILLEGAL are left out of every generated table.
    """
    ctx.config = GeneratorConfig.from_env()
    if input_path is not None:
        ctx.config.input_path = input_path
    ctx.verbose = verbose
    ctx.setup_logging()


# =============================================================================
# Table Command
# =============================================================================

@main.command()
@click.option(
    "-c", "--cycles",
    type=click.IntRange(min=1),
    default=None,
    help="Only emit opcodes taking exactly this many machine cycles",
)
@style_option
@output_option
@pass_context
def table(ctx: Context, cycles: Optional[int], style: Optional[str], output: Optional[Path]) -> None:
    """
    Emit the opcode byte -> instruction table.

    \b
    Example:
        m6502-tablegen table --cycles 2
        0x9 => Some((ORA, Immediate))
        0xA => Some((ASL, Accumulator))
        ...
    """
    try:
        render_style = ctx.style(style)
        compiled = ctx.compile()

        if cycles is None:
            cycles = ctx.config.cycles
        if cycles is None:
            lines = render_encoding_table(compiled.encodings, render_style)
        else:
            logger.info(f"Filtering on {cycles} machine cycles")
            lines = render_cycle_matches(compiled.with_cycles(cycles), render_style)

        emit(lines, output, ctx.verbose)
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


# =============================================================================
# Dispatch Command
# =============================================================================

@main.command()
@style_option
@output_option
@pass_context
def dispatch(ctx: Context, style: Optional[str], output: Optional[Path]) -> None:
    """
    Emit one addressing-mode dispatch block per mnemonic.

    \b
    Example:
        m6502-tablegen dispatch
        ADC => match mode {
            Immediate => Some(0x69),
            ZeroPage => Some(0x65),
            ...
            _ => None,
        },
    """
    try:
        render_style = ctx.style(style)
        compiled = ctx.compile()
        emit(render_mnemonic_encodings(compiled.mnemonics, render_style), output, ctx.verbose)
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


# =============================================================================
# Info Command
# =============================================================================

@main.command()
@style_option
@output_option
@pass_context
def info(ctx: Context, style: Optional[str], output: Optional[Path]) -> None:
    """
    Emit the opcode table with cycle information.
    """
    try:
        render_style = ctx.style(style)
        compiled = ctx.compile()
        emit(render_instruction_info(compiled, render_style), output, ctx.verbose)
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


# =============================================================================
# Mnemonics Command
# =============================================================================

@main.command()
@style_option
@output_option
@pass_context
def mnemonics(ctx: Context, style: Optional[str], output: Optional[Path]) -> None:
    """
    Emit one parse arm per mnemonic, alphabetically.
    """
    try:
        render_style = ctx.style(style)
        compiled = ctx.compile()
        emit(render_mnemonic_enum(compiled.mnemonics, render_style), output, ctx.verbose)
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


# =============================================================================
# Summary Command
# =============================================================================

@main.command()
@pass_context
def summary(ctx: Context) -> None:
    """
    Show statistics over the opcode table.
    """
    try:
        compiled = ctx.compile()
        emit(render_summary(compiled.summarize()), None)
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
