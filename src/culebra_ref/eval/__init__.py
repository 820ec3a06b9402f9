"""Evaluator helper modules for the Culebra runtime."""

__all__ = [
    "bind",
    "blocks",
    "chains",
    "common",
    "expr",
    "fn",
    "helpers",
    "literals",
    "loops",
    "objects",
]
