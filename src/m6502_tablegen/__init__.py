"""
m6502-tablegen - 6502 Instruction Table Generator
=================================================

This package generates instruction lookup and dispatch tables for MOS 6502
emulators and assemblers from a declarative JSON description of the
instruction set.

The input is a 256-entry table; entry N describes opcode byte N with its
mnemonic, addressing mode, and cycle count. Byte values with no defined
instruction are marked ILLEGAL and left out of everything generated.

Main Components
---------------
- **records**: Loading and decoding of the JSON opcode table
- **compiler**: Builds the opcode -> instruction table and the
  mnemonic -> encodings grouping, validating addressing modes
- **render**: Renders the derived tables as generated source text
- **cli**: The `m6502-tablegen` command

Quick Start
-----------
Compile the packaged 6502 table:
    >>> from m6502_tablegen import load_default_records, compile_table
    >>> compiled = compile_table(load_default_records())
    >>> compiled.encodings.lookup(0xA9)
    Encoding(mnemonic='LDA', mode=<AddressMode.Immediate: 2>)

Render the 2-cycle instructions:
    >>> from m6502_tablegen import render_cycle_matches
    >>> lines = render_cycle_matches(compiled.with_cycles(2))
    >>> lines[0]
    '0x9 => Some((ORA, Immediate))'

Or use the command-line tool:
    $ m6502-tablegen table --cycles 2
    $ m6502-tablegen dispatch --style rust -o dispatch.rs
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from m6502_tablegen.cpu import (
    AddressMode,
    ADDRESS_MODE_KEYS,
    ILLEGAL,
)
from m6502_tablegen.errors import (
    TableGenError,
    MalformedInputError,
    InvalidAddressModeError,
    RecordLocation,
)
from m6502_tablegen.records import (
    OpcodeRecord,
    decode_records,
    parse_records,
    load_records,
    load_default_records,
)
from m6502_tablegen.compiler import (
    Encoding,
    ModeEncoding,
    CycleMatch,
    InstructionEncodingTable,
    MnemonicEncodings,
    CompiledTable,
    TableSummary,
    validate_address_mode,
    build_encoding_table,
    build_mnemonic_encodings,
    filter_by_cycle_count,
    compile_table,
    summarize,
)
from m6502_tablegen.render import (
    RenderStyle,
    PLAIN_STYLE,
    RUST_STYLE,
    render_encoding_table,
    render_cycle_matches,
    render_mnemonic_encodings,
    render_instruction_info,
    render_mnemonic_enum,
    render_summary,
    write_lines,
)

__all__ = [
    # Version info
    "__version__",
    # CPU definitions
    "AddressMode",
    "ADDRESS_MODE_KEYS",
    "ILLEGAL",
    # Exception hierarchy
    "TableGenError",
    "MalformedInputError",
    "InvalidAddressModeError",
    "RecordLocation",
    # Records
    "OpcodeRecord",
    "decode_records",
    "parse_records",
    "load_records",
    "load_default_records",
    # Compiler
    "Encoding",
    "ModeEncoding",
    "CycleMatch",
    "InstructionEncodingTable",
    "MnemonicEncodings",
    "CompiledTable",
    "TableSummary",
    "validate_address_mode",
    "build_encoding_table",
    "build_mnemonic_encodings",
    "filter_by_cycle_count",
    "compile_table",
    "summarize",
    # Rendering
    "RenderStyle",
    "PLAIN_STYLE",
    "RUST_STYLE",
    "render_encoding_table",
    "render_cycle_matches",
    "render_mnemonic_encodings",
    "render_instruction_info",
    "render_mnemonic_enum",
    "render_summary",
    "write_lines",
]
