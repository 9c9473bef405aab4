"""Schema inspection and repair for databases created by older revisions."""
import logging
from sqlalchemy import inspect, text
from sqlalchemy.ext.asyncio import AsyncEngine

from volley_stats.database import Base

logger = logging.getLogger(__name__)


def _existing_columns(sync_conn) -> dict[str, set[str]]:
    inspector = inspect(sync_conn)
    return {
        table: {col["name"] for col in inspector.get_columns(table)}
        for table in inspector.get_table_names()
    }


def _column_ddl(column, dialect) -> str:
    ddl = f"{column.name} {column.type.compile(dialect=dialect)}"
    default = column.default
    if default is not None and default.is_scalar:
        value = default.arg
        if isinstance(value, bool):
            value = "TRUE" if value else "FALSE"
        elif isinstance(value, str):
            value = f"'{value}'"
        ddl += f" DEFAULT {value}"
    return ddl


class SchemaService:
    """Compare the live database with the models and patch the difference."""

    @staticmethod
    async def status(engine: AsyncEngine) -> dict:
        """Per managed table: whether it exists and which model columns it lacks."""
        import volley_stats.models  # noqa: F401

        async with engine.connect() as conn:
            existing = await conn.run_sync(_existing_columns)

        report = {}
        for name, table in Base.metadata.tables.items():
            columns = existing.get(name)
            report[name] = {
                "exists": columns is not None,
                "missing_columns": (
                    [c.name for c in table.columns if c.name not in columns]
                    if columns is not None else []
                ),
            }
        return report

    @staticmethod
    async def repair(engine: AsyncEngine) -> list[str]:
        """
        Create missing tables and add missing columns to existing ones.

        Added columns are nullable (plus the model's scalar default where it
        has one) so that ALTER TABLE works on tables that already hold rows.
        Returns the "table.column" names that were added.
        """
        import volley_stats.models  # noqa: F401

        added = []
        async with engine.begin() as conn:
            existing = await conn.run_sync(_existing_columns)
            for name, table in Base.metadata.tables.items():
                columns = existing.get(name)
                if columns is None:
                    continue
                for column in table.columns:
                    if column.name in columns:
                        continue
                    ddl = _column_ddl(column, conn.dialect)
                    await conn.execute(text(f"ALTER TABLE {name} ADD COLUMN {ddl}"))
                    added.append(f"{name}.{column.name}")
                    logger.info("Added column %s.%s", name, column.name)

            await conn.run_sync(Base.metadata.create_all)

        return added
