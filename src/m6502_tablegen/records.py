"""
Opcode Table Records
====================

This module decodes the JSON opcode table into OpcodeRecord objects. It is
the only part of the generator that deals with files and JSON; the compiler
works on already-decoded record sequences.

Input Format
------------
The table is a JSON array. The position of each element is the opcode byte
value it describes, so a complete table has exactly 256 entries:

    [
      {"name": "BRK", "address_mode": "implied", "machine_cycles": 7},
      {"name": "ORA", "address_mode": "indx", "machine_cycles": 6},
      {"name": "ILLEGAL", "address_mode": "ILLEGAL", "machine_cycles": 0},
      ...
    ]

Fields:
    name            Mnemonic, or "ILLEGAL"
    address_mode    Raw addressing mode key, or "ILLEGAL"
    machine_cycles  Base cycle count (positive for legal records)
    extra_cycles    Optional, cycles added on page crossing or taken branch

Shorter tables are accepted; the bytes they do not list are simply absent
from every generated structure. Longer tables are rejected, as there is
no byte value past 0xFF.

A packaged copy of the complete 6502 table is available through
load_default_records().
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from m6502_tablegen.cpu import is_illegal
from m6502_tablegen.errors import MalformedInputError, RecordLocation

# Logger for this module
logger = logging.getLogger(__name__)

# Number of byte values an opcode can take
TABLE_SIZE = 256

# Complete 6502 table shipped with the package
DEFAULT_TABLE_PATH = Path(__file__).parent / "data" / "instructs.json"


# =============================================================================
# Record Type
# =============================================================================

@dataclass(frozen=True)
class OpcodeRecord:
    """
    One entry of the opcode table.

    Attributes:
        name: Instruction mnemonic, or "ILLEGAL"
        address_mode: Raw addressing mode key, or "ILLEGAL"
        machine_cycles: Base number of clock cycles
        extra_cycles: Additional cycles on page crossing or taken branch
    """
    name: str
    address_mode: str
    machine_cycles: int
    extra_cycles: int = 0

    @property
    def is_illegal(self) -> bool:
        """True if this byte value encodes no defined instruction."""
        return is_illegal(self.name, self.address_mode)


# =============================================================================
# Decoding
# =============================================================================

def _require_field(
    entry: dict[str, Any],
    field_name: str,
    expected: type,
    location: RecordLocation,
) -> Any:
    """Fetch a field from a JSON object, checking presence and type."""
    if field_name not in entry:
        raise MalformedInputError(f"missing field '{field_name}'", location=location)

    value = entry[field_name]
    # bool is a subclass of int, but true/false is never a cycle count
    if not isinstance(value, expected) or isinstance(value, bool):
        raise MalformedInputError(
            f"field '{field_name}' must be {expected.__name__}, "
            f"got {type(value).__name__} {value!r}",
            location=location,
        )
    return value


def decode_record(entry: Any, index: int, source: str = "<input>") -> OpcodeRecord:
    """
    Decode one JSON value into an OpcodeRecord.

    Args:
        entry: The decoded JSON element
        index: Position of the element in the array (= byte value)
        source: Input name for error messages

    Returns:
        The decoded record

    Raises:
        MalformedInputError: If the element does not have OpcodeRecord shape
    """
    location = RecordLocation(source, index)

    if not isinstance(entry, dict):
        raise MalformedInputError(
            f"expected an object, got {type(entry).__name__}",
            location=location,
        )

    name = _require_field(entry, "name", str, location)
    address_mode = _require_field(entry, "address_mode", str, location)
    machine_cycles = _require_field(entry, "machine_cycles", int, location)

    extra_cycles = 0
    if "extra_cycles" in entry:
        extra_cycles = _require_field(entry, "extra_cycles", int, location)

    record = OpcodeRecord(name, address_mode, machine_cycles, extra_cycles)

    if not record.is_illegal and machine_cycles <= 0:
        raise MalformedInputError(
            f"'{name}' must take a positive number of machine cycles, got {machine_cycles}",
            location=location,
        )
    if extra_cycles < 0:
        raise MalformedInputError(
            f"field 'extra_cycles' must not be negative, got {extra_cycles}",
            location=location,
        )

    return record


def decode_records(data: Any, source: str = "<input>") -> list[OpcodeRecord]:
    """
    Decode a parsed JSON document into a list of records.

    Args:
        data: The value returned by json.loads()
        source: Input name for error messages

    Returns:
        Records in input order; list index = opcode byte value

    Raises:
        MalformedInputError: If the document is not an array of records
    """
    if not isinstance(data, list):
        raise MalformedInputError(
            f"{source}: expected a JSON array of opcode records, got {type(data).__name__}"
        )
    if len(data) > TABLE_SIZE:
        raise MalformedInputError(
            f"{source}: table has {len(data)} entries, at most {TABLE_SIZE} opcodes exist"
        )

    records = [decode_record(entry, index, source) for index, entry in enumerate(data)]

    if len(records) < TABLE_SIZE:
        logger.debug(
            f"{source}: partial table, bytes 0x{len(records):02X}-0xFF are not listed"
        )
    return records


def parse_records(text: str, source: str = "<input>") -> list[OpcodeRecord]:
    """
    Parse JSON text into a list of records.

    Args:
        text: The JSON document
        source: Input name for error messages

    Returns:
        Records in input order

    Raises:
        MalformedInputError: If the text is not valid JSON or not a record array
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedInputError(
            f"{source}: invalid JSON at line {e.lineno}, column {e.colno}: {e.msg}"
        ) from e
    return decode_records(data, source)


def load_records(path: Union[str, Path]) -> list[OpcodeRecord]:
    """
    Load an opcode table from a JSON file.

    The file is read once; there is no retry. A missing or unreadable file
    propagates the OSError raised by the read.

    Args:
        path: Path to the JSON table

    Returns:
        Records in file order

    Raises:
        MalformedInputError: If the content is not UTF-8 or not a valid record table
        OSError: If the file cannot be read
    """
    path = Path(path)
    data = path.read_bytes()
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedInputError(
            f"{path.name}: not valid UTF-8: {e.reason} at byte {e.start}"
        ) from e
    records = parse_records(text, source=path.name)
    logger.info(f"Loaded {len(records)} opcode records from {path}")
    return records


def load_default_records() -> list[OpcodeRecord]:
    """
    Load the complete 6502 table shipped with the package.

    Returns:
        All 256 records (151 legal opcodes)
    """
    return load_records(DEFAULT_TABLE_PATH)
