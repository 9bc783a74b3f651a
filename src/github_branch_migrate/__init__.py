"""GitHub Branch Migration Tool

Renames the legacy default branch of every active repository in a GitHub
organization, carries its protection rules over to the new branch, locks the
old branch and switches the repository default.
"""

__version__ = '0.1.0'

from .cli.main import main

__all__ = ['main']
