"""
FILE: jiraclone/cli/commands/__init__.py
PURPOSE: CLI command modules
"""

# Export all command handlers for easy importing
from .system import (
    version,
    repl,
    seed,
)
from .projects import (
    board,
    project_add,
    project_ls,
    project_rm,
    project_rename,
)
from .tickets import (
    add,
    show,
    mv,
    priority,
    edit,
    rm,
)
from .instructions import (
    instruction_add,
    instruction_toggle,
    instruction_rm,
    instruction_edit,
)

__all__ = [
    "version",
    "repl",
    "seed",
    "board",
    "project_add",
    "project_ls",
    "project_rm",
    "project_rename",
    "add",
    "show",
    "mv",
    "priority",
    "edit",
    "rm",
    "instruction_add",
    "instruction_toggle",
    "instruction_rm",
    "instruction_edit",
]
