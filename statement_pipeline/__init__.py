"""Page-by-page bank statement processing pipeline."""

__version__ = "0.1.0"
