# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
lintask CLI - Linear issue commands

Usage:
    lintask issues --team ENG --limit 20   # List recent issues
    lintask i -q "crash" --offset 50       # Search, skipping 50 matches
    lintask states ENG-123                 # States ENG-123 can move to
    lintask set-state ENG-123 Done         # Move ENG-123 to Done
"""

from .main import cli

__all__ = ['cli']
