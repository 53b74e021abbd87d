"""Batch creation of GitHub support branches and releases."""

__version__ = "1.0.0"

from .runner import main, process_project, run

__all__ = ["__version__", "main", "process_project", "run"]
