"""
m6502-tablegen Command-Line Interface
=====================================

This package provides the `m6502-tablegen` command, a Click-based
application with one subcommand per generated output form:

- **table**: opcode byte -> instruction table, optionally cycle-filtered
- **dispatch**: per-mnemonic addressing-mode dispatch blocks
- **info**: opcode table with cycle information
- **mnemonics**: mnemonic parse arms
- **summary**: statistics over the opcode table
"""

__all__ = ["tablegen"]
