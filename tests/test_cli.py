"""
Tests for the m6502-tablegen Command
====================================

These tests run the Click application end to end with CliRunner, on the
packaged 6502 table and on small tables written to temporary files.

Run tests with:
    pytest tests/test_cli.py -v
"""

from pathlib import Path

import pytest
from click.testing import CliRunner

from m6502_tablegen import __version__
from m6502_tablegen.cli.errors import ExitCode
from m6502_tablegen.cli.tablegen import main
from m6502_tablegen.config import GeneratorConfig
from m6502_tablegen.records import DEFAULT_TABLE_PATH


@pytest.fixture
def runner():
    return CliRunner()


# =============================================================================
# Table Command
# =============================================================================

class TestTableCommand:
    """Tests for `m6502-tablegen table`."""

    def test_default_table(self, runner):
        result = runner.invoke(main, ["table"])

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert len(lines) == 151
        assert lines[0] == "0x0 => Some((BRK, Implied))"

    def test_cycle_filter(self, runner, write_table):
        path = write_table([{"name": "LDA", "address_mode": "imm", "machine_cycles": 2}])
        result = runner.invoke(main, ["-i", str(path), "table", "--cycles", "2"])

        assert result.exit_code == 0
        assert result.output == "0x0 => Some((LDA, Immediate))\n"

    def test_cycle_filter_default_table(self, runner):
        result = runner.invoke(main, ["table", "-c", "2"])

        assert result.exit_code == 0
        assert len(result.output.splitlines()) == 41

    def test_rust_style(self, runner, write_table):
        path = write_table([{"name": "LDA", "address_mode": "imm", "machine_cycles": 2}])
        result = runner.invoke(main, ["-i", str(path), "table", "--style", "rust"])

        assert result.exit_code == 0
        assert result.output == "0x0 => Some((Instruct::LDA, AddressType::Immediate)),\n"

    def test_illegal_only_prints_nothing(self, runner, write_table):
        path = write_table([{"name": "ILLEGAL", "address_mode": "ILLEGAL", "machine_cycles": 0}])
        result = runner.invoke(main, ["-i", str(path), "table"])

        assert result.exit_code == 0
        assert result.output == ""

    def test_zero_cycles_rejected(self, runner):
        result = runner.invoke(main, ["table", "--cycles", "0"])
        assert result.exit_code == 2

    def test_output_file(self, runner, tmp_path):
        output = tmp_path / "table.rs"
        result = runner.invoke(main, ["table", "-o", str(output)])

        assert result.exit_code == 0
        assert result.output == ""
        assert output.read_text(encoding="utf-8").splitlines()[0] == "0x0 => Some((BRK, Implied))"

    def test_idempotent(self, runner):
        """Running twice on the same input gives byte-identical output."""
        first = runner.invoke(main, ["table"])
        second = runner.invoke(main, ["table"])

        assert first.output == second.output


# =============================================================================
# Dispatch Command
# =============================================================================

class TestDispatchCommand:
    """Tests for `m6502-tablegen dispatch`."""

    def test_adc_block(self, runner, write_table, make_table):
        path = write_table(make_table({
            0x69: {"name": "ADC", "address_mode": "imm", "machine_cycles": 2},
            0x6D: {"name": "ADC", "address_mode": "abs", "machine_cycles": 4},
        }))
        result = runner.invoke(main, ["-i", str(path), "dispatch"])

        assert result.exit_code == 0
        assert result.output == (
            "ADC => match mode {\n"
            "    Immediate => Some(0x69),\n"
            "    Absolute => Some(0x6D),\n"
            "    _ => None,\n"
            "},\n"
        )

    def test_default_table_rust(self, runner):
        result = runner.invoke(main, ["dispatch", "--style", "rust"])

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0] == "Instruct::ADC => match addr {"
        assert lines[1] == "    AddressType::Immediate => Some(0x69),"

    def test_idempotent(self, runner):
        first = runner.invoke(main, ["dispatch"])
        second = runner.invoke(main, ["dispatch"])

        assert first.exit_code == 0
        assert first.output == second.output


# =============================================================================
# Other Commands
# =============================================================================

class TestOtherCommands:
    """Tests for info, mnemonics, summary and --version."""

    def test_info(self, runner):
        result = runner.invoke(main, ["info"])

        assert result.exit_code == 0
        assert result.output.splitlines()[0] == (
            "0x0 => Some(InstructionInfo { instruction: BRK, mode: Implied, "
            "cycles: 7, extra_cycles: 0 })"
        )

    def test_mnemonics(self, runner):
        result = runner.invoke(main, ["mnemonics"])

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert len(lines) == 56
        assert lines[0] == '"ADC" => Some(ADC)'
        assert lines[-1] == '"TYA" => Some(TYA)'

    def test_summary(self, runner):
        result = runner.invoke(main, ["summary"])

        assert result.exit_code == 0
        assert "Legal:     151" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output


# =============================================================================
# Error Handling
# =============================================================================

class TestErrors:
    """Tests for exit codes and error messages."""

    def test_invalid_address_mode(self, runner, write_table, make_table):
        path = write_table(make_table({
            0x00: {"name": "BRK", "address_mode": "implied", "machine_cycles": 7},
            0x42: {"name": "LDA", "address_mode": "bogus", "machine_cycles": 2},
        }))
        result = runner.invoke(main, ["-i", str(path), "table"])

        assert result.exit_code == ExitCode.GENERATION_ERROR
        assert "'bogus'" in result.output
        assert "instructs.json[0x42]" in result.output
        # No table line may precede the error
        assert "=> Some" not in result.output

    def test_malformed_record(self, runner, write_table):
        path = write_table([{"name": "LDA", "address_mode": "imm"}])
        result = runner.invoke(main, ["-i", str(path), "dispatch"])

        assert result.exit_code == ExitCode.GENERATION_ERROR
        assert "missing field 'machine_cycles'" in result.output

    def test_invalid_json(self, runner, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[{", encoding="utf-8")
        result = runner.invoke(main, ["-i", str(path), "table"])

        assert result.exit_code == ExitCode.GENERATION_ERROR
        assert "invalid JSON" in result.output

    def test_invalid_utf8(self, runner, tmp_path):
        path = tmp_path / "bad.json"
        path.write_bytes(b"[\xff]")
        result = runner.invoke(main, ["-i", str(path), "table"])

        assert result.exit_code == ExitCode.GENERATION_ERROR
        assert "not valid UTF-8" in result.output
        assert "Internal error" not in result.output

    def test_missing_input_option_file(self, runner, tmp_path):
        """Click rejects a nonexistent --input path as a usage error."""
        result = runner.invoke(main, ["-i", str(tmp_path / "missing.json"), "table"])
        assert result.exit_code == 2

    def test_missing_configured_file(self, runner, tmp_path, monkeypatch):
        """A missing table from the environment maps to INVALID_ARGS."""
        monkeypatch.setenv("M6502_TABLEGEN_INPUT", str(tmp_path / "missing.json"))
        result = runner.invoke(main, ["table"])

        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "missing.json" in result.output

    def test_failure_leaves_output_file_untouched(self, runner, write_table, tmp_path):
        path = write_table([{"name": "LDA", "address_mode": "bogus", "machine_cycles": 2}])
        output = tmp_path / "out.rs"
        result = runner.invoke(main, ["-i", str(path), "table", "-o", str(output)])

        assert result.exit_code == ExitCode.GENERATION_ERROR
        assert not output.exists()


# =============================================================================
# Configuration
# =============================================================================

class TestConfiguration:
    """Tests for GeneratorConfig and environment defaults."""

    def test_defaults(self):
        config = GeneratorConfig()

        assert config.input_path == DEFAULT_TABLE_PATH
        assert config.style == "plain"
        assert config.cycles is None

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("M6502_TABLEGEN_INPUT", "/tmp/ops.json")
        monkeypatch.setenv("M6502_TABLEGEN_STYLE", "RUST")
        monkeypatch.setenv("M6502_TABLEGEN_CYCLES", "3")
        config = GeneratorConfig.from_env()

        assert config.input_path == Path("/tmp/ops.json")
        assert config.style == "rust"
        assert config.cycles == 3

    def test_invalid_env_values_ignored(self, monkeypatch):
        monkeypatch.setenv("M6502_TABLEGEN_STYLE", "cobol")
        monkeypatch.setenv("M6502_TABLEGEN_CYCLES", "two")
        config = GeneratorConfig.from_env()

        assert config.style == "plain"
        assert config.cycles is None

    @pytest.mark.parametrize("value", ["0", "-2"])
    def test_non_positive_env_cycles_ignored(self, monkeypatch, caplog, value):
        """The environment follows the same lower bound as --cycles."""
        monkeypatch.setenv("M6502_TABLEGEN_CYCLES", value)
        config = GeneratorConfig.from_env()

        assert config.cycles is None
        assert "must be at least 1" in caplog.text

    def test_non_positive_env_cycles_prints_full_table(self, runner, monkeypatch):
        monkeypatch.setenv("M6502_TABLEGEN_CYCLES", "0")
        result = runner.invoke(main, ["table"])

        assert result.exit_code == 0
        assert len(result.output.splitlines()) == 151

    def test_env_style_used_by_cli(self, runner, write_table, monkeypatch):
        path = write_table([{"name": "LDA", "address_mode": "imm", "machine_cycles": 2}])
        monkeypatch.setenv("M6502_TABLEGEN_STYLE", "rust")
        result = runner.invoke(main, ["-i", str(path), "mnemonics"])

        assert result.output == '"LDA" => Some(Instruct::LDA),\n'

    def test_option_overrides_env(self, runner, write_table, monkeypatch):
        path = write_table([{"name": "LDA", "address_mode": "imm", "machine_cycles": 2}])
        monkeypatch.setenv("M6502_TABLEGEN_STYLE", "rust")
        result = runner.invoke(main, ["-i", str(path), "mnemonics", "--style", "plain"])

        assert result.output == '"LDA" => Some(LDA)\n'

    def test_env_cycles_used_by_table(self, runner, monkeypatch):
        monkeypatch.setenv("M6502_TABLEGEN_CYCLES", "7")
        result = runner.invoke(main, ["table"])

        assert result.exit_code == 0
        assert len(result.output.splitlines()) == 7
