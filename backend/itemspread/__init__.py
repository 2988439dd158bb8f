"""ItemSpread — spread apart overlapping items by point repulsion."""

__version__ = "0.1.0"
