"""
CLI command implementations.

- base.py: Base command class and error to exit code mapping
- ontology.py: Single and batch import commands
"""

from .base import BaseCommand
from .ontology import BatchImportCommand, ImportCommand

__all__ = [
    'BaseCommand',
    'BatchImportCommand',
    'ImportCommand',
]
