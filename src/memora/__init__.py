"""memora: spaced-repetition flashcards for the terminal."""

from importlib.metadata import version

__version__ = version("memora")
