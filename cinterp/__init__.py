"""Lexer, memory, commands, labels, interpreter and option reading for a small assembly-like language."""

__version__ = "0.1.0"