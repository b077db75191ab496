"""Application services: the delta core plus editor-facing operations."""
