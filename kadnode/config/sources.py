"""Argument sources: command line and configuration file.

Both sources are flattened into one ArgumentStream, an immutable tuple of
OptionPair entries. Loading a configuration file never modifies a stream;
merge_args returns a new one with the file's entries appended.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from kadnode.exceptions import ConfigFileError, NestedConfigError, TooManyTokensError
from kadnode.utils.logging_config import get_logger

logger = get_logger(__name__)

CONFIG_OPTION = "--config"

_QUOTES = str.maketrans({"'": " ", '"': " "})


@dataclass(frozen=True)
class OptionPair:
    """One option with its optional value."""

    option: str
    value: str | None = None
    source: str = "command line"
    line: int | None = None

    def describe(self) -> str:
        """Return where this entry came from."""
        if self.line is None:
            return self.source
        return f"{self.source}, line {self.line}"


ArgumentStream = tuple[OptionPair, ...]


def parse_command_line(argv: Sequence[str]) -> ArgumentStream:
    """Pair command line tokens into options and values.

    ``argv[0]`` is the program name. A token following an option is taken
    as its value unless it starts with '-', in which case the option has
    no value and the token is read as the next option.
    """
    pairs: list[OptionPair] = []
    tokens = list(argv[1:])
    i = 0
    while i < len(tokens):
        option = tokens[i]
        value = tokens[i + 1] if i + 1 < len(tokens) else None
        if value is not None and not value.startswith("-"):
            pairs.append(OptionPair(option, value))
            i += 2
        else:
            pairs.append(OptionPair(option))
            i += 1
    return tuple(pairs)


def parse_config_line(text: str, line: int, source: str) -> OptionPair | None:
    """Parse one configuration file line.

    Returns:
        The option pair, or None for blank and comment-only lines

    Raises:
        TooManyTokensError: If the line holds more than two tokens
        NestedConfigError: If the line is a --config option

    """
    text = text.split("#", 1)[0].translate(_QUOTES)
    tokens = text.split()
    if not tokens:
        return None
    if len(tokens) > 2:
        raise TooManyTokensError(line)
    if tokens[0] == CONFIG_OPTION:
        raise NestedConfigError(line)
    value = tokens[1] if len(tokens) == 2 else None
    return OptionPair(tokens[0], value, source=source, line=line)


def load_config_file(filename: str | Path) -> ArgumentStream:
    """Read a configuration file into option pairs.

    One option, optionally followed by its value, per line. Text after '#'
    is a comment, quote characters count as whitespace.

    Raises:
        ConfigFileError: If the path is not a regular file or cannot be read

    """
    path = Path(filename)
    if path.exists() and not path.is_file():
        msg = f"File expected: {filename}"
        raise ConfigFileError(msg)

    pairs: list[OptionPair] = []
    try:
        with open(path, encoding="utf-8") as f:
            for lineno, text in enumerate(f, start=1):
                pair = parse_config_line(text, lineno, str(filename))
                if pair is not None:
                    pairs.append(pair)
    except (OSError, UnicodeDecodeError) as e:
        reason = e.strerror if isinstance(e, OSError) and e.strerror else str(e)
        msg = f"Cannot open file '{filename}': {reason}"
        raise ConfigFileError(msg) from e

    logger.debug("Read %d option(s) from %s", len(pairs), filename)
    return tuple(pairs)


def merge_args(stream: ArgumentStream, filename: str | Path) -> ArgumentStream:
    """Return a new stream with the file's entries appended.

    The file's entries are handled after everything already in the stream,
    not at the position of the --config option.
    """
    return stream + load_config_file(filename)
