"""Command-line interface for cazyme-pipeline."""
