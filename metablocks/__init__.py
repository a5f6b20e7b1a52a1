"""A rolling-block puzzle with a shortest-path solver, a Monte Carlo level generator and a game window."""

__version__ = "0.1.0"
__all__ = ["__version__"]