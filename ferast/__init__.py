"""Token cursor, parser, syntax tree dump and constant folding for a small scripting language."""

__version__ = "0.1.0"