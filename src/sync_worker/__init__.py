"""Periodic relational-schema to graph sync worker."""
