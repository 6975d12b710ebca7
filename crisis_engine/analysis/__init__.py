"""Analysis: history summary statistics."""
from .summary import summary_statistics

__all__ = ["summary_statistics"]
