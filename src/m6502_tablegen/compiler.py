"""
Opcode Table Compiler
=====================

This module turns a sequence of opcode records into the derived lookup
structures the renderers emit:

- **InstructionEncodingTable**: opcode byte -> (mnemonic, addressing mode)
- **MnemonicEncodings**: mnemonic -> every (addressing mode, opcode byte)
  pair that encodes it

Every operation makes a single pass over the records in index order. The
index of a record is its opcode byte value. Illegal records (name or mode
equal to "ILLEGAL") are skipped; any other record must name one of the
thirteen fixed addressing modes, or the whole run fails with
InvalidAddressModeError.

The derived structures are built once and are read-only afterwards. Nothing
is kept at module level: each call returns a fresh value.

Usage:
    >>> from m6502_tablegen.records import load_default_records
    >>> from m6502_tablegen.compiler import build_encoding_table
    >>> table = build_encoding_table(load_default_records())
    >>> table.lookup(0xA9)
    Encoding(mnemonic='LDA', mode=<AddressMode.Immediate: 2>)
    >>> table.lookup(0x02) is None
    True
"""

import difflib
import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import NamedTuple, Optional

from m6502_tablegen.cpu import ADDRESS_MODE_KEYS, MODES_BY_RANK, AddressMode, lookup_address_mode
from m6502_tablegen.errors import InvalidAddressModeError
from m6502_tablegen.records import OpcodeRecord

# Logger for this module
logger = logging.getLogger(__name__)


# =============================================================================
# Entry Types
# =============================================================================

class Encoding(NamedTuple):
    """What one opcode byte decodes to."""
    mnemonic: str
    mode: AddressMode


class ModeEncoding(NamedTuple):
    """One way of encoding a mnemonic: the mode and the opcode byte for it."""
    mode: AddressMode
    opcode: int


class CycleMatch(NamedTuple):
    """A legal opcode selected by filter_by_cycle_count()."""
    opcode: int
    mnemonic: str
    mode: AddressMode


# =============================================================================
# Derived Structures
# =============================================================================

class InstructionEncodingTable(Mapping):
    """
    Read-only mapping from opcode byte value to Encoding.

    Only legal opcodes are present. Iteration is in ascending byte order.
    Use lookup() for a None-returning query; indexing an absent byte raises
    KeyError like any mapping.
    """

    def __init__(self, entries: dict[int, Encoding]):
        self._entries = dict(sorted(entries.items()))

    def __getitem__(self, opcode: int) -> Encoding:
        return self._entries[opcode]

    def __iter__(self) -> Iterator[int]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"InstructionEncodingTable({len(self)} opcodes)"

    def lookup(self, opcode: int) -> Optional[Encoding]:
        """
        Decode an opcode byte.

        Args:
            opcode: Byte value (0-255)

        Returns:
            The Encoding, or None if the byte encodes no instruction
        """
        return self._entries.get(opcode)


class MnemonicEncodings(Mapping):
    """
    Read-only mapping from mnemonic to its ModeEncoding pairs.

    Each value is a tuple in encounter order, which is ascending opcode
    order. canonical() gives the same pairs ordered by addressing-mode rank.
    Iteration over mnemonics follows first appearance in the input.
    """

    def __init__(self, entries: dict[str, list[ModeEncoding]]):
        self._entries = {
            mnemonic: tuple(pairs) for mnemonic, pairs in entries.items()
        }

    def __getitem__(self, mnemonic: str) -> tuple[ModeEncoding, ...]:
        return self._entries[mnemonic]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"MnemonicEncodings({len(self)} mnemonics)"

    def canonical(self, mnemonic: str) -> list[ModeEncoding]:
        """
        Get a mnemonic's encodings ordered by addressing-mode rank.

        A mnemonic never has two opcodes for the same mode in a well-formed
        table, so the order is total.

        Raises:
            KeyError: If the mnemonic has no legal encoding
        """
        return sorted(self._entries[mnemonic], key=lambda pair: pair.mode.rank)

    def opcode_for(self, mnemonic: str, mode: AddressMode) -> Optional[int]:
        """
        Find the opcode byte encoding a mnemonic in a given mode.

        Returns:
            The opcode byte, or None if the combination does not exist
        """
        for pair in self._entries.get(mnemonic, ()):
            if pair.mode is mode:
                return pair.opcode
        return None

    def sorted_mnemonics(self) -> list[str]:
        """All mnemonics in alphabetical order."""
        return sorted(self._entries)


# =============================================================================
# Validation
# =============================================================================

def validate_address_mode(
    record: OpcodeRecord,
    byte_value: int,
    source: str = "<input>",
) -> AddressMode:
    """
    Map a legal record's raw addressing mode to its AddressMode.

    Args:
        record: A record that is not illegal
        byte_value: The record's position in the input (for error reporting)
        source: Input name for error reporting

    Returns:
        The matching AddressMode member

    Raises:
        InvalidAddressModeError: If the raw mode is not one of the fixed keys
    """
    mode = lookup_address_mode(record.address_mode)
    if mode is None:
        suggestions = difflib.get_close_matches(
            record.address_mode.lower(), list(ADDRESS_MODE_KEYS), n=3
        )
        logger.debug(
            f"{source}: opcode 0x{byte_value:02X} ({record.name}) has unknown "
            f"addressing mode {record.address_mode!r}"
        )
        raise InvalidAddressModeError(
            record.address_mode,
            byte_value,
            source=source,
            suggestions=suggestions,
        )
    return mode


def iter_legal(
    records: Sequence[OpcodeRecord],
    source: str = "<input>",
) -> Iterator[tuple[int, OpcodeRecord, AddressMode]]:
    """
    Walk the records in byte order, yielding the legal ones with their mode.

    Illegal records are skipped. The first record with an unknown mode stops
    the walk with InvalidAddressModeError.

    Yields:
        (byte_value, record, mode) for every legal record
    """
    for byte_value, record in enumerate(records):
        if record.is_illegal:
            logger.debug(f"Skipping illegal opcode 0x{byte_value:02X}")
            continue
        yield byte_value, record, validate_address_mode(record, byte_value, source)


# =============================================================================
# Table Construction
# =============================================================================

def build_encoding_table(
    records: Sequence[OpcodeRecord],
    source: str = "<input>",
) -> InstructionEncodingTable:
    """
    Build the opcode byte -> instruction lookup table.

    Args:
        records: Opcode records; index = byte value
        source: Input name for error reporting

    Returns:
        Table covering every legal record; illegal and unlisted bytes are absent

    Raises:
        InvalidAddressModeError: On the first legal record with an unknown mode
    """
    entries: dict[int, Encoding] = {}
    for byte_value, record, mode in iter_legal(records, source):
        entries[byte_value] = Encoding(record.name, mode)
    return InstructionEncodingTable(entries)


def build_mnemonic_encodings(
    records: Sequence[OpcodeRecord],
    source: str = "<input>",
) -> MnemonicEncodings:
    """
    Group the legal opcodes by mnemonic.

    Args:
        records: Opcode records; index = byte value
        source: Input name for error reporting

    Returns:
        Every mnemonic of a legal record, mapped to all its (mode, opcode)
        pairs in ascending opcode order

    Raises:
        InvalidAddressModeError: On the first legal record with an unknown mode
    """
    grouped: dict[str, list[ModeEncoding]] = {}
    for byte_value, record, mode in iter_legal(records, source):
        grouped.setdefault(record.name, []).append(ModeEncoding(mode, byte_value))
    return MnemonicEncodings(grouped)


def filter_by_cycle_count(
    records: Sequence[OpcodeRecord],
    cycles: int,
    source: str = "<input>",
) -> list[CycleMatch]:
    """
    Select the legal opcodes that take exactly the given number of cycles.

    No other criterion is applied; every addressing mode qualifies.

    Args:
        records: Opcode records; index = byte value
        cycles: Machine cycle count to match
        source: Input name for error reporting

    Returns:
        Matching opcodes in ascending byte order

    Raises:
        InvalidAddressModeError: On the first legal record with an unknown mode
    """
    return [
        CycleMatch(byte_value, record.name, mode)
        for byte_value, record, mode in iter_legal(records, source)
        if record.machine_cycles == cycles
    ]


# =============================================================================
# Whole-Table Compilation
# =============================================================================

@dataclass(frozen=True)
class TableSummary:
    """
    Statistics over an opcode table.

    Attributes:
        total: Number of records in the input
        legal: Number of legal opcodes
        illegal: Number of illegal or unlisted byte values (out of 256)
        mnemonics: Number of distinct mnemonics
        mode_counts: Legal opcodes per addressing mode, in rank order
        cycle_counts: Legal opcodes per machine cycle count, ascending
    """
    total: int
    legal: int
    illegal: int
    mnemonics: int
    mode_counts: dict[AddressMode, int] = field(default_factory=dict)
    cycle_counts: dict[int, int] = field(default_factory=dict)


@dataclass(frozen=True)
class CompiledTable:
    """
    Every derived structure of one opcode table.

    Attributes:
        records: The input records
        encodings: Opcode byte -> instruction table
        mnemonics: Mnemonic -> encodings grouping
        source: Input name used in diagnostics
    """
    records: tuple[OpcodeRecord, ...]
    encodings: InstructionEncodingTable
    mnemonics: MnemonicEncodings
    source: str = "<input>"

    def with_cycles(self, cycles: int) -> list[CycleMatch]:
        """Legal opcodes taking exactly `cycles` machine cycles."""
        return filter_by_cycle_count(self.records, cycles, self.source)

    def summarize(self) -> TableSummary:
        """Compute statistics over the compiled table."""
        mode_counts = {mode: 0 for mode in MODES_BY_RANK}
        cycle_counts: dict[int, int] = {}
        for opcode, entry in self.encodings.items():
            mode_counts[entry.mode] += 1
            cycles = self.records[opcode].machine_cycles
            cycle_counts[cycles] = cycle_counts.get(cycles, 0) + 1

        return TableSummary(
            total=len(self.records),
            legal=len(self.encodings),
            illegal=256 - len(self.encodings),
            mnemonics=len(self.mnemonics),
            mode_counts={mode: n for mode, n in mode_counts.items() if n},
            cycle_counts=dict(sorted(cycle_counts.items())),
        )


def compile_table(
    records: Sequence[OpcodeRecord],
    source: str = "<input>",
) -> CompiledTable:
    """
    Build all derived structures for an opcode table.

    Validation happens in full before anything is returned, so a caller
    that renders from the result never sees a partially valid table.

    Args:
        records: Opcode records; index = byte value
        source: Input name for error reporting

    Returns:
        The compiled table

    Raises:
        InvalidAddressModeError: On the first legal record with an unknown mode
    """
    compiled = CompiledTable(
        records=tuple(records),
        encodings=build_encoding_table(records, source),
        mnemonics=build_mnemonic_encodings(records, source),
        source=source,
    )
    logger.info(
        f"{source}: compiled {len(compiled.encodings)} opcodes, "
        f"{len(compiled.mnemonics)} mnemonics"
    )
    return compiled


def summarize(records: Sequence[OpcodeRecord], source: str = "<input>") -> TableSummary:
    """
    Compute statistics over an opcode table.

    Raises:
        InvalidAddressModeError: On the first legal record with an unknown mode
    """
    return compile_table(records, source).summarize()
