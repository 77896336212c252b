"""kdoc: documentation from doc comments, without parsing the language."""

__version__ = "0.1.0"
