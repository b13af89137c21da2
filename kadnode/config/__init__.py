"""Startup configuration.

Turns the command line and an optional configuration file into a validated
NodeConfig.
"""

from __future__ import annotations

from kadnode.config.dispatcher import OptionDispatcher
from kadnode.config.loader import load_config, log_config_summary, run
from kadnode.config.options import OptionCode, find_code
from kadnode.config.sources import (
    ArgumentStream,
    OptionPair,
    load_config_file,
    merge_args,
    parse_command_line,
)
from kadnode.config.validator import apply_defaults

__all__ = [
    "ArgumentStream",
    "OptionCode",
    "OptionDispatcher",
    "OptionPair",
    "apply_defaults",
    "find_code",
    "load_config",
    "load_config_file",
    "log_config_summary",
    "merge_args",
    "parse_command_line",
    "run",
]
