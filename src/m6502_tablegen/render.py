"""
Generated Code Rendering
========================

This module renders the compiler's derived structures as lines of generated
source text. Rendering is pure: every function returns a list of lines and
none of them can fail on a structure produced by the compiler. Writing the
lines out is a separate step (write_lines).

Output Forms
------------
Opcode table (optionally restricted to one cycle count):

    0xA9 => Some((LDA, Immediate))

Per-mnemonic dispatch blocks, alphabetical, modes in canonical rank order:

    LDA => match mode {
        Immediate => Some(0xA9),
        ZeroPage => Some(0xA5),
        ...
        _ => None,
    },

Instruction info table, with cycle data:

    0xA9 => Some(InstructionInfo { instruction: LDA, mode: Immediate, cycles: 2, extra_cycles: 0 })

Mnemonic parse arms:

    "LDA" => Some(LDA)

Styles
------
The "plain" style emits bare identifiers. The "rust" style qualifies them
the way the emulator sources refer to them (Instruct::LDA,
AddressType::Immediate) and terminates each match arm with a comma:

    0xA9 => Some((Instruct::LDA, AddressType::Immediate)),
"""

import sys
from dataclasses import dataclass
from typing import Iterable, Optional, TextIO

from m6502_tablegen.compiler import (
    CompiledTable,
    CycleMatch,
    InstructionEncodingTable,
    MnemonicEncodings,
    TableSummary,
)
from m6502_tablegen.cpu import AddressMode


# =============================================================================
# Render Styles
# =============================================================================

@dataclass(frozen=True)
class RenderStyle:
    """
    Naming conventions for generated identifiers.

    Attributes:
        name: Style name as accepted on the command line
        mnemonic_prefix: Prepended to every mnemonic (e.g., "Instruct::")
        mode_prefix: Prepended to every addressing mode (e.g., "AddressType::")
        arm_suffix: Appended to every complete match arm (e.g., ",")
        match_subject: Variable matched on inside dispatch blocks
        info_type: Struct name used by the instruction info table
    """
    name: str
    mnemonic_prefix: str = ""
    mode_prefix: str = ""
    arm_suffix: str = ""
    match_subject: str = "mode"
    info_type: str = "InstructionInfo"

    def mnemonic(self, mnemonic: str) -> str:
        return f"{self.mnemonic_prefix}{mnemonic}"

    def mode(self, mode: AddressMode) -> str:
        return f"{self.mode_prefix}{mode}"


PLAIN_STYLE = RenderStyle(name="plain")

RUST_STYLE = RenderStyle(
    name="rust",
    mnemonic_prefix="Instruct::",
    mode_prefix="AddressType::",
    arm_suffix=",",
    match_subject="addr",
)

STYLES: dict[str, RenderStyle] = {
    style.name: style for style in (PLAIN_STYLE, RUST_STYLE)
}


def get_style(name: str) -> RenderStyle:
    """
    Look up a render style by name (case-insensitive).

    Raises:
        KeyError: If no style has that name
    """
    return STYLES[name.lower()]


# =============================================================================
# Formatting Helpers
# =============================================================================

def format_opcode(opcode: int) -> str:
    """Format an opcode byte as unpadded uppercase hex: 0x0, 0xA, 0x6D."""
    return f"0x{opcode:X}"


def _table_line(opcode: int, mnemonic: str, mode: AddressMode, style: RenderStyle) -> str:
    return (
        f"{format_opcode(opcode)} => "
        f"Some(({style.mnemonic(mnemonic)}, {style.mode(mode)})){style.arm_suffix}"
    )


# =============================================================================
# Renderers
# =============================================================================

def render_encoding_table(
    table: InstructionEncodingTable,
    style: RenderStyle = PLAIN_STYLE,
) -> list[str]:
    """
    Render the full opcode table, one line per legal opcode in byte order.
    """
    return [
        _table_line(opcode, entry.mnemonic, entry.mode, style)
        for opcode, entry in table.items()
    ]


def render_cycle_matches(
    matches: Iterable[CycleMatch],
    style: RenderStyle = PLAIN_STYLE,
) -> list[str]:
    """
    Render a cycle-filtered subset of the opcode table.

    Uses the same line format as render_encoding_table().
    """
    return [
        _table_line(match.opcode, match.mnemonic, match.mode, style)
        for match in matches
    ]


def render_mnemonic_encodings(
    encodings: MnemonicEncodings,
    style: RenderStyle = PLAIN_STYLE,
) -> list[str]:
    """
    Render one dispatch block per mnemonic.

    Blocks are ordered alphabetically by mnemonic. Inside a block, the
    (mode, opcode) arms are ordered by addressing-mode rank and followed
    by a fallback arm.
    """
    lines = []
    for mnemonic in encodings.sorted_mnemonics():
        lines.append(f"{style.mnemonic(mnemonic)} => match {style.match_subject} {{")
        for pair in encodings.canonical(mnemonic):
            lines.append(f"    {style.mode(pair.mode)} => Some({format_opcode(pair.opcode)}),")
        lines.append("    _ => None,")
        lines.append("},")
    return lines


def render_instruction_info(
    compiled: CompiledTable,
    style: RenderStyle = PLAIN_STYLE,
) -> list[str]:
    """
    Render the opcode table with cycle information, one line per legal opcode.
    """
    lines = []
    for opcode, entry in compiled.encodings.items():
        record = compiled.records[opcode]
        lines.append(
            f"{format_opcode(opcode)} => Some({style.info_type} {{ "
            f"instruction: {style.mnemonic(entry.mnemonic)}, "
            f"mode: {style.mode(entry.mode)}, "
            f"cycles: {record.machine_cycles}, "
            f"extra_cycles: {record.extra_cycles} }}){style.arm_suffix}"
        )
    return lines


def render_mnemonic_enum(
    encodings: MnemonicEncodings,
    style: RenderStyle = PLAIN_STYLE,
) -> list[str]:
    """
    Render one parse arm per mnemonic, alphabetically.
    """
    return [
        f'"{mnemonic}" => Some({style.mnemonic(mnemonic)}){style.arm_suffix}'
        for mnemonic in encodings.sorted_mnemonics()
    ]


def render_summary(summary: TableSummary) -> list[str]:
    """
    Render table statistics as human-readable text (not generated code).
    """
    lines = [
        f"Records:   {summary.total}",
        f"Legal:     {summary.legal}",
        f"Illegal:   {summary.illegal}",
        f"Mnemonics: {summary.mnemonics}",
        "",
        "Opcodes per addressing mode:",
    ]
    for mode, count in summary.mode_counts.items():
        lines.append(f"  {str(mode):<12} {count:>3}")

    lines.append("")
    lines.append("Opcodes per cycle count:")
    for cycles, count in summary.cycle_counts.items():
        lines.append(f"  {cycles:>2} cycles    {count:>3}")
    return lines


# =============================================================================
# Output
# =============================================================================

def write_lines(lines: Iterable[str], stream: Optional[TextIO] = None) -> None:
    """
    Write rendered lines, newline-terminated, to a stream (default: stdout).

    Nothing is written for an empty line list.
    """
    out = stream if stream is not None else sys.stdout
    for line in lines:
        out.write(line + "\n")
