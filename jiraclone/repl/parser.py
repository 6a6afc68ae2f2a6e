"""
FILE: jiraclone/repl/parser.py
PURPOSE: Parse user input into commands, arguments and flags for the REPL
EXPORTS:
  - ParseResult (dataclass for parsed commands)
  - parse_command(input_str) -> ParseResult
DEPENDENCIES:
  - shlex (for shell-like parsing with quotes)
  - dataclasses (for ParseResult)
NOTES:
  - Handles quoted strings: add "ticket with spaces"
  - Long flags (--priority high) and short aliases (-p high)
  - Repeated flags collect into a list (-i "Repro" -i "Fix")
  - Boolean flags never consume the next token (--yes, --json)
  - Case-insensitive command names
"""

import shlex
from dataclasses import dataclass, field
from typing import Dict, List, Union

# Short flag -> long flag name
FLAG_ALIASES = {
    "d": "desc",
    "s": "status",
    "p": "priority",
    "i": "instruction",
    "y": "yes",
}

# Flags that never take a value
BOOLEAN_FLAGS = {"yes", "json"}

FlagValue = Union[str, bool, List[str]]


@dataclass
class ParseResult:
    """
    Result of parsing a REPL command.

    Attributes:
        command: The command name (e.g., "add", "mv", "project")
        args: Positional arguments in order
        flags: Flag values; repeated flags hold a list
        raw_input: Original input string
    """
    command: str
    args: List[str] = field(default_factory=list)
    flags: Dict[str, FlagValue] = field(default_factory=dict)
    raw_input: str = ""

    def flag_list(self, name: str) -> List[str]:
        """Values of a (possibly repeated) flag, as a list of strings."""
        value = self.flags.get(name)
        if value is None or isinstance(value, bool):
            return []
        if isinstance(value, list):
            return value
        return [value]

    def text(self, start: int = 0) -> str:
        """Positional args from start joined with spaces (unquoted multi-word input)."""
        return " ".join(self.args[start:])


def _flag_name(token: str):
    if token.startswith("--") and len(token) > 2:
        return token[2:].lower()
    if token.startswith("-") and len(token) == 2 and token[1].isalpha():
        return FLAG_ALIASES.get(token[1].lower(), token[1].lower())
    return None


def parse_command(input_str: str) -> ParseResult:
    """
    Parse REPL input into command, args, and flags.

    Examples:
        >>> parse_command('add "Fix login" -p high -i Repro -i Fix')
        ParseResult(command="add", args=["Fix login"],
                    flags={"priority": "high", "instruction": ["Repro", "Fix"]})

        >>> parse_command("project rm 2 --yes")
        ParseResult(command="project", args=["rm", "2"], flags={"yes": True})

    Args:
        input_str: Raw user input from REPL prompt

    Returns:
        ParseResult with command, args, and flags extracted
    """
    input_str = input_str.strip()
    if not input_str:
        return ParseResult(command="", raw_input=input_str)

    try:
        tokens = shlex.split(input_str)
    except ValueError:
        # Unclosed quote: fall back to plain split
        tokens = input_str.split()

    if not tokens:
        return ParseResult(command="", raw_input=input_str)

    command = tokens[0].lower()
    args: List[str] = []
    flags: Dict[str, FlagValue] = {}
    i = 1

    while i < len(tokens):
        token = tokens[i]
        name = _flag_name(token)

        if name is None:
            args.append(token)
            i += 1
            continue

        has_value = (
            name not in BOOLEAN_FLAGS
            and i + 1 < len(tokens)
            and _flag_name(tokens[i + 1]) is None
        )
        if not has_value:
            flags[name] = True
            i += 1
            continue

        value = tokens[i + 1]
        existing = flags.get(name)
        if isinstance(existing, list):
            existing.append(value)
        elif isinstance(existing, str):
            flags[name] = [existing, value]
        else:
            flags[name] = value
        i += 2

    return ParseResult(command=command, args=args, flags=flags, raw_input=input_str)
