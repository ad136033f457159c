"""A small interactive shell with pipelines, redirections, here-documents and builtins."""

__version__ = "0.1.0"