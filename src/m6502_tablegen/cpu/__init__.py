"""
m6502-tablegen CPU Package
==========================

CPU architecture definitions shared by the record loader, the table
compiler, and the renderers.

Modules:
    m6502: The 6502 addressing-mode enumeration, its raw-key table, and
           the ILLEGAL sentinel.

Usage:
    from m6502_tablegen.cpu import (
        AddressMode,
        ADDRESS_MODE_KEYS,
        lookup_address_mode,
    )
"""

from m6502_tablegen.cpu.m6502 import (
    # Core types
    AddressMode,
    ILLEGAL,
    # Raw key table
    ADDRESS_MODE_KEYS,
    MODES_BY_RANK,
    # Lookup functions
    lookup_address_mode,
    is_illegal,
)

__all__ = [
    # Core types
    "AddressMode",
    "ILLEGAL",
    # Raw key table
    "ADDRESS_MODE_KEYS",
    "MODES_BY_RANK",
    # Lookup functions
    "lookup_address_mode",
    "is_illegal",
]
