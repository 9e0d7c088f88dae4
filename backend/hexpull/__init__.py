"""Hex tile board engine.

Maintains a packed hexagonal tile board, refills it by spiral displacement
after every removal and classifies tiles into edges, lines, cores and loops.
"""
__version__ = "1.0.0"
