"""
FILE: jiraclone/cli/__init__.py
PURPOSE: Typer CLI package (one-shot commands)
"""
