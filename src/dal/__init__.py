"""Data Abstraction Layer (DAL) for schema sync.

Relational catalog access lives under ``dal.postgres`` and graph writes under
``dal.neo4j``; both expose the protocols from ``common.interfaces``.
"""
