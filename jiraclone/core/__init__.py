"""
FILE: jiraclone/core/__init__.py
PURPOSE: Domain model, board operations, change events and SQLite persistence
"""
