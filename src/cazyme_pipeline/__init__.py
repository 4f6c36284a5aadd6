"""CAZyme gene cluster detection from functional-annotation tables."""

__version__ = "0.1.0"
