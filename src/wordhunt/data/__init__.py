"""Packaged word pool and loaders."""
