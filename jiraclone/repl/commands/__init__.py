"""
FILE: jiraclone/repl/commands/__init__.py
PURPOSE: REPL command handler modules
"""

# Export all command handlers for easy importing
from .projects import (
    handle_projects_command,
    handle_use_command,
    handle_board_command,
    handle_project_add_command,
    handle_project_rm_command,
    handle_project_rename_command,
    handle_project_command,
)
from .tickets import (
    handle_add_command,
    handle_show_command,
    handle_mv_command,
    handle_priority_command,
    handle_edit_command,
    handle_desc_command,
    handle_rm_command,
)
from .instructions import (
    handle_check_command,
    handle_instruction_command,
)
from .system import (
    handle_help_command,
    handle_clear_command,
    handle_seed_command,
    handle_autoboard_command,
)

__all__ = [
    "handle_projects_command",
    "handle_use_command",
    "handle_board_command",
    "handle_project_add_command",
    "handle_project_rm_command",
    "handle_project_rename_command",
    "handle_project_command",
    "handle_add_command",
    "handle_show_command",
    "handle_mv_command",
    "handle_priority_command",
    "handle_edit_command",
    "handle_desc_command",
    "handle_rm_command",
    "handle_check_command",
    "handle_instruction_command",
    "handle_help_command",
    "handle_clear_command",
    "handle_seed_command",
    "handle_autoboard_command",
]
