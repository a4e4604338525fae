"""Shared errors and interfaces."""
