"""
FILE: jiraclone/__init__.py
PURPOSE: Single-user kanban board (projects, tickets, checklists) with CLI and REPL
"""

__version__ = "0.1.0"
