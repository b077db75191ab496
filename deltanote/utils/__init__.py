"""Utility modules for deltanote."""
