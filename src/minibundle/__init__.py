"""minibundle - a minimal JavaScript module bundler."""

__version__ = "0.1.0"
