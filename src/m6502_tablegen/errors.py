"""
m6502-tablegen Error Hierarchy
==============================

This module defines the exception hierarchy for the table generator.
All exceptions inherit from TableGenError, allowing callers to catch
every generator failure with a single except clause.

Exception Hierarchy
-------------------
TableGenError (base)
├── MalformedInputError - input cannot be decoded into opcode records
└── InvalidAddressModeError - legal record with an unknown addressing mode

Both errors are fatal: a generated table is only useful when it is
complete, so the generator never skips a bad record and never emits
partial output.

Error messages follow this format:
    source[0xNN]: error: description
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class TableGenError(Exception):
    """
    Base exception for all table generator errors.

        try:
            table = build_encoding_table(records)
        except TableGenError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Record Location Tracking
# =============================================================================

@dataclass(frozen=True)
class RecordLocation:
    """
    Identifies one record of the input table for error reporting.

    Attributes:
        source: Name of the input (file name, or "<input>" for in-memory data)
        index: Position of the record in the input array (= opcode byte value)
    """
    source: str
    index: int

    def __str__(self) -> str:
        """Format as 'source[0xNN]' for error messages."""
        return f"{self.source}[0x{self.index:02X}]"


# =============================================================================
# Generator Exceptions
# =============================================================================

class _LocatedError(TableGenError):
    """
    Common message formatting for errors tied to an input record.

    Attributes:
        message: The error description
        location: Which record caused the error (optional)
        hint: A suggestion for fixing the error (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[RecordLocation] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location and hint.

        Example output:
            instructs.json[0x6D]: error: invalid addressing mode 'abz'
            hint: did you mean 'abs', 'absx'?
        """
        if self.location:
            parts = [f"{self.location}: error: {self.message}"]
        else:
            parts = [f"error: {self.message}"]

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class MalformedInputError(_LocatedError):
    """
    Input that cannot be decoded into OpcodeRecord shape.

    Raised while loading the opcode table, before any derived structure
    is built.

    Examples:
        - File content is not valid JSON
        - Top-level value is not an array, or has more than 256 entries
        - An element is not an object
        - A field is missing or has the wrong type
        - A legal record declares zero or negative machine cycles
    """
    pass


class InvalidAddressModeError(_LocatedError):
    """
    A legal record names an addressing mode outside the fixed set.

    Illegal records (name or mode equal to "ILLEGAL") are skipped and never
    raise this error. Any other unknown mode aborts the whole run.

    Attributes:
        address_mode: The offending raw mode string, as it appeared in the input
        byte_value: Opcode byte value (input index) of the offending record
    """

    def __init__(
        self,
        address_mode: str,
        byte_value: int,
        source: str = "<input>",
        suggestions: Optional[list[str]] = None,
    ):
        self.address_mode = address_mode
        self.byte_value = byte_value
        self.suggestions = suggestions or []

        hint = None
        if self.suggestions:
            hint = "did you mean " + ", ".join(f"'{s}'" for s in self.suggestions[:3]) + "?"

        super().__init__(
            f"invalid addressing mode '{address_mode}'",
            location=RecordLocation(source, byte_value),
            hint=hint,
        )
