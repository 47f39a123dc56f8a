"""
MOS 6502 Addressing Modes
=========================

This module defines the fixed set of 6502 addressing modes understood by
the table generator, and the raw keys used for them in the JSON opcode
table.

Addressing Modes
----------------
The 6502 has thirteen addressing modes. Each one has a canonical rank
(0-12), used to order the per-mnemonic dispatch blocks, and exactly one
raw key in the input table:

    Rank  Mode          Key         Syntax
    ----  ------------  ----------  -------------
     0    Implied       implied     OPC
     1    Accumulator   accum       OPC A
     2    Immediate     imm         OPC #$BB
     3    Relative      relative    OPC $BB
     4    ZeroPage      zp          OPC $LL
     5    ZeroPageX     zpx         OPC $LL,X
     6    ZeroPageY     zpy         OPC $LL,Y
     7    Absolute      abs         OPC $LLHH
     8    AbsoluteX     absx        OPC $LLHH,X
     9    AbsoluteY     absy        OPC $LLHH,Y
    10    Indirect      ind         OPC ($LLHH)
    11    IndirectX     indx        OPC ($LL,X)
    12    IndirectY     indy        OPC ($LL),Y

Any byte value with no defined instruction is marked in the table with the
ILLEGAL sentinel, in the name field, the mode field, or both.

Reference
---------
- MOS MCS6500 Microcomputer Family Programming Manual
- 6502 instruction reference: https://www.masswerk.at/6502/6502_instruction_set.html
"""

from enum import Enum
from typing import Optional


# Sentinel marking a byte value that encodes no instruction
ILLEGAL = "ILLEGAL"


# =============================================================================
# Addressing Mode Enumeration
# =============================================================================

class AddressMode(Enum):
    """
    6502 addressing modes.

    The member value is the canonical rank used for sort ordering.
    """
    Implied = 0       # No operand (CLC, RTS)
    Accumulator = 1   # Operates on A (ASL A)
    Immediate = 2     # #value (literal)
    Relative = 3      # Branch displacement (signed 8-bit)
    ZeroPage = 4      # Zero page address ($00-$FF)
    ZeroPageX = 5     # Zero page + X
    ZeroPageY = 6     # Zero page + Y
    Absolute = 7      # Full 16-bit address
    AbsoluteX = 8     # Absolute + X
    AbsoluteY = 9     # Absolute + Y
    Indirect = 10     # (address), JMP only
    IndirectX = 11    # (zp,X)
    IndirectY = 12    # (zp),Y

    @property
    def rank(self) -> int:
        """Canonical position of this mode when sorting encodings."""
        return self.value

    @property
    def raw_key(self) -> str:
        """Key used for this mode in the JSON opcode table."""
        return _RAW_KEYS[self]

    def __str__(self) -> str:
        """Return the variant name used in generated code."""
        return self.name


# =============================================================================
# Raw Key Table
# =============================================================================
# Key: address_mode string as it appears in the input JSON
# Value: AddressMode member
#
# This table is closed. A legal record whose key is missing here is an error.
# =============================================================================

ADDRESS_MODE_KEYS: dict[str, AddressMode] = {
    "implied": AddressMode.Implied,
    "accum": AddressMode.Accumulator,
    "imm": AddressMode.Immediate,
    "relative": AddressMode.Relative,
    "zp": AddressMode.ZeroPage,
    "zpx": AddressMode.ZeroPageX,
    "zpy": AddressMode.ZeroPageY,
    "abs": AddressMode.Absolute,
    "absx": AddressMode.AbsoluteX,
    "absy": AddressMode.AbsoluteY,
    "ind": AddressMode.Indirect,
    "indx": AddressMode.IndirectX,
    "indy": AddressMode.IndirectY,
}

_RAW_KEYS: dict[AddressMode, str] = {
    mode: key for key, mode in ADDRESS_MODE_KEYS.items()
}

# Modes in canonical rank order
MODES_BY_RANK: tuple[AddressMode, ...] = tuple(
    sorted(AddressMode, key=lambda mode: mode.rank)
)


# =============================================================================
# Lookup Functions
# =============================================================================

def lookup_address_mode(raw: str) -> Optional[AddressMode]:
    """
    Look up an addressing mode by its raw table key.

    The match is exact: keys are lowercase in the table and the input
    must use them as-is.

    Args:
        raw: The address_mode string from the input (e.g., "zpx")

    Returns:
        The AddressMode, or None if the key is not part of the fixed set
    """
    return ADDRESS_MODE_KEYS.get(raw)


def is_illegal(name: str, address_mode: str) -> bool:
    """
    Check if a record marks a byte value with no defined instruction.

    Args:
        name: The record's mnemonic field
        address_mode: The record's raw addressing mode field

    Returns:
        True if either field carries the ILLEGAL sentinel
    """
    return name == ILLEGAL or address_mode == ILLEGAL
