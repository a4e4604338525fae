from typing import Tuple

from pydantic import BaseModel


class TableInfo(BaseModel):
    """A base table discovered in a relational catalog.

    Graph identity is ``(database_name, table_name)``; ``schema_name`` is
    carried as a descriptive attribute only.

    Attributes:
        database_name: Logical database identifier the table was discovered in.
        schema_name: Catalog schema the table lives in (e.g. "public").
        table_name: Table name as reported by the catalog.
    """

    database_name: str
    schema_name: str
    table_name: str

    model_config = {"frozen": True}

    @property
    def identity(self) -> Tuple[str, str]:
        """Key that identifies the table node in the graph."""
        return (self.database_name, self.table_name)


class ForeignKeyInfo(BaseModel):
    """One column-level foreign key constraint.

    Source and target tables are always scoped to ``database_name``.
    """

    database_name: str
    constraint_name: str
    source_table: str
    source_column: str
    target_table: str
    target_column: str

    model_config = {"frozen": True}

    @property
    def identity(self) -> Tuple[str, str, str, str, str, str]:
        """Key that identifies the relationship edge in the graph."""
        return (
            self.database_name,
            self.source_table,
            self.target_table,
            self.constraint_name,
            self.source_column,
            self.target_column,
        )
