# -*- coding: utf-8 -*-
"""Database (shared collection) models."""

import enum

from knowledge_manager.database import Column, PkModel, db, reference_col, relationship, utcnow


NAME_MAX_LENGTH = 255


class Permission(str, enum.Enum):
    OWNER = "owner"
    VIEWER = "viewer"


class Database(PkModel):
    """
    A named, shared collection of posts.

    Attributes:
        id (int): Primary key, inherited from PkModel.
        name (str): Display name.
        created_at (datetime): Creation time.
        updated_at (datetime): Last modification time.
        posts (list[Post]): Posts stored in the collection.
        members (list[UserDatabaseRel]): Access roster.
    """
    __tablename__ = "databases"

    name = Column(db.String(NAME_MAX_LENGTH), nullable=False)
    created_at = Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    members = relationship("UserDatabaseRel", back_populates="database")

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


class UserDatabaseRel(PkModel):
    """Grants a user owner or viewer access to a database."""
    __tablename__ = "user_database_rel"
    __table_args__ = (db.UniqueConstraint("user_id", "database_id"),)

    user_id = reference_col("users")
    database_id = reference_col("databases")
    permission_type = Column(db.String(16), nullable=False)

    user = relationship("User")
    database = relationship("Database", back_populates="members")
