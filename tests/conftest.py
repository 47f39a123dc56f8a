"""
Shared Test Fixtures
====================

pytest fixtures used across the m6502-tablegen test suite:
- Keeping M6502_TABLEGEN_* environment variables out of every test
- Building small opcode tables in memory and on disk
"""

import json
from pathlib import Path

import pytest

from m6502_tablegen.records import OpcodeRecord


ILLEGAL_ENTRY = {"name": "ILLEGAL", "address_mode": "ILLEGAL", "machine_cycles": 0}


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Make sure configuration from the developer's shell never leaks in."""
    for name in ("M6502_TABLEGEN_INPUT", "M6502_TABLEGEN_STYLE", "M6502_TABLEGEN_CYCLES"):
        monkeypatch.delenv(name, raising=False)


def sparse_table(entries: dict[int, dict], size: int = 256) -> list[dict]:
    """
    Build a JSON-ready table with the given entries and ILLEGAL elsewhere.

    Args:
        entries: Opcode byte -> JSON object
        size: Number of entries in the table
    """
    return [entries.get(i, ILLEGAL_ENTRY) for i in range(size)]


def sparse_records(entries: dict[int, OpcodeRecord], size: int = 256) -> list[OpcodeRecord]:
    """Build a record list with the given entries and ILLEGAL elsewhere."""
    illegal = OpcodeRecord("ILLEGAL", "ILLEGAL", 0)
    return [entries.get(i, illegal) for i in range(size)]


@pytest.fixture
def write_table(tmp_path):
    """
    Write a JSON table to a temporary file.

    Usage:
        path = write_table([{"name": "LDA", ...}])
    """
    def _write(data, name: str = "instructs.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def adc_records():
    """ADC in immediate (0x69) and absolute (0x6D) mode, nothing else legal."""
    return sparse_records({
        0x69: OpcodeRecord("ADC", "imm", 2),
        0x6D: OpcodeRecord("ADC", "abs", 4),
    })


@pytest.fixture
def make_table():
    """Factory fixture for sparse_table()."""
    return sparse_table


@pytest.fixture
def make_records():
    """Factory fixture for sparse_records()."""
    return sparse_records
