"""
m6502-tablegen Configuration
============================

Defaults for the command-line driver. Configuration can come from:
- Default values (defined here)
- Environment variables
- Command-line options (applied by the CLI, highest priority)

The compiler and renderers never read configuration themselves; the CLI
resolves it and passes plain values down.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from m6502_tablegen.records import DEFAULT_TABLE_PATH
from m6502_tablegen.render import STYLES

logger = logging.getLogger(__name__)


@dataclass
class GeneratorConfig:
    """
    Configuration for a generator run.

    Attributes:
        input_path: Opcode table to read (default: packaged 6502 table)
        style: Render style name, one of STYLES (default: "plain")
        cycles: Cycle count filter for the opcode table (default: none)
    """

    input_path: Path = DEFAULT_TABLE_PATH
    style: str = "plain"
    cycles: Optional[int] = None

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """
        Create GeneratorConfig from environment variables.

        Environment variables (all optional):
            M6502_TABLEGEN_INPUT: Path to the opcode table JSON
            M6502_TABLEGEN_STYLE: Render style ("plain" or "rust")
            M6502_TABLEGEN_CYCLES: Cycle count filter (integer, at least 1)

        Invalid values are reported as warnings and the default is kept.

        Returns:
            GeneratorConfig with values from environment variables
        """
        config = cls()

        if input_path := os.environ.get("M6502_TABLEGEN_INPUT"):
            config.input_path = Path(input_path)

        if style := os.environ.get("M6502_TABLEGEN_STYLE"):
            if style.lower() in STYLES:
                config.style = style.lower()
            else:
                logger.warning(f"Ignoring M6502_TABLEGEN_STYLE={style!r}: unknown style")

        if cycles := os.environ.get("M6502_TABLEGEN_CYCLES"):
            try:
                value = int(cycles)
            except ValueError:
                logger.warning(f"Ignoring M6502_TABLEGEN_CYCLES={cycles!r}: not an integer")
            else:
                if value >= 1:
                    config.cycles = value
                else:
                    logger.warning(f"Ignoring M6502_TABLEGEN_CYCLES={cycles!r}: must be at least 1")

        return config
