"""Open web searches from the terminal with any configured search engine."""

__version__ = "0.1.0"
