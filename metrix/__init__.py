"""metrix: interactive explorer for pre-computed source-code metrics."""

__version__ = "0.3.0"
