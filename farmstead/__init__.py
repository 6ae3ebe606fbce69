from .game import FarmGame

__version__ = "1.0.0"
