"""Neo4j graph store for schema projection."""

from .graph_store import Neo4jSchemaGraphStore

__all__ = ["Neo4jSchemaGraphStore"]
