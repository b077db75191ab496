"""Configuration, command dispatch and user-facing error messages."""
