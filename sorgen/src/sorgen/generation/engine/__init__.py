"""Data generation engine."""

from .pipeline import GenerationOptions, GenerationResult, run_generation
from .generator import RowGenerator
from .writer import write_csv, write_row_sets

__all__ = [
    "GenerationOptions",
    "GenerationResult",
    "run_generation",
    "RowGenerator",
    "write_csv",
    "write_row_sets",
]
