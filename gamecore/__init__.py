"""
Game Core.

Rule engines and play-mode wrappers for Ayo, Ludo and Whot.
"""

__version__ = "0.1.0"
