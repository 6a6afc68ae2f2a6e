"""
FILE: jiraclone/__main__.py
PURPOSE: Allow `python -m jiraclone`
"""

from .cli.main import main

if __name__ == "__main__":
    main()
