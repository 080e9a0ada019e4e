# -*- coding: utf-8 -*-
"""
Database module

This module re-exports the SQLAlchemy database object and provides
a base model class with a primary key (id), a helper for foreign key
columns, a transaction scope and an insert-or-ignore primitive.
"""

from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError

from .extensions import db

# Aliases for common SQLAlchemy objects
Column = db.Column
relationship = db.relationship

_UPSERT_DIALECTS = {
    "sqlite": sqlite_insert,
    "postgresql": postgresql_insert,
}


def utcnow():
    return datetime.now(timezone.utc)


class PkModel(db.Model):
    """
    Abstract base model class with a primary key.

    Adds:
        - id (int): Primary key column.
    """
    __abstract__ = True
    id = Column(db.Integer, primary_key=True)


def reference_col(
    tablename, nullable=False, pk_name="id", foreign_key_kwargs=None, column_kwargs=None
):
    """
    Create a foreign key column referencing a primary key in another table.

    Args:
        tablename (str): Target table name.
        nullable (bool): Whether the foreign key can be null.
        pk_name (str): Primary key column name of the referenced table.
        foreign_key_kwargs (dict): Additional kwargs for ForeignKey.
        column_kwargs (dict): Additional kwargs for Column.

    Usage:
        ```python
        database_id = reference_col('databases')
        database = relationship('Database', backref='posts')
        ```

    Returns:
        sqlalchemy.Column: A foreign key column definition.
    """
    foreign_key_kwargs = foreign_key_kwargs or {}
    column_kwargs = column_kwargs or {}

    return Column(
        db.ForeignKey(f"{tablename}.{pk_name}", **foreign_key_kwargs),
        nullable=nullable,
        **column_kwargs,
    )


@contextmanager
def transaction():
    """
    Run a block of store statements as one unit of work.

    Commits when the block finishes and rolls everything back if it
    raises, so callers never observe a half-applied change.
    """
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


def insert_or_ignore(model, index_elements, **values):
    """
    Insert a row unless it collides with a unique constraint.

    Uses ``ON CONFLICT DO NOTHING`` where the dialect supports it, so two
    concurrent callers inserting the same key both succeed and exactly
    one row survives. Other backends fall back to a savepoint that is
    rolled back on ``IntegrityError``.

    Args:
        model: Mapped model class to insert into.
        index_elements (list[str]): Columns of the unique constraint.
        **values: Column values for the new row.
    """
    dialect = db.session.get_bind().dialect.name
    insert = _UPSERT_DIALECTS.get(dialect)
    if insert is not None:
        stmt = insert(model.__table__).values(**values).on_conflict_do_nothing(
            index_elements=index_elements
        )
        db.session.execute(stmt)
        return

    try:
        with db.session.begin_nested():
            db.session.execute(model.__table__.insert().values(**values))
    except IntegrityError:
        pass
