"""Weather playground: rendering strategies and a weather chat assistant."""

__version__ = "0.1.0"
