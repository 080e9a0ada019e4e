# -*- coding: utf-8 -*-
"""User models."""

from knowledge_manager.database import Column, PkModel, db, utcnow
from knowledge_manager.extensions import bcrypt


NAME_MAX_LENGTH = 80
EMAIL_MAX_LENGTH = 255


class User(PkModel):
    """
    A registered user.

    Attributes:
        id (int): Primary key, inherited from PkModel.
        name (str): Unique display name, never containing '@'.
        email (str): Unique email address.
        password_digest (str): Bcrypt hash of the password.
        created_at (datetime): Registration time.
    """
    __tablename__ = "users"

    name = Column(db.String(NAME_MAX_LENGTH), unique=True, nullable=False)
    email = Column(db.String(EMAIL_MAX_LENGTH), unique=True, nullable=False)
    password_digest = Column(db.String(128), nullable=False)
    created_at = Column(db.DateTime, nullable=False, default=utcnow)

    @property
    def password(self):
        raise AttributeError("password is not readable")

    @password.setter
    def password(self, value):
        self.password_digest = bcrypt.generate_password_hash(value).decode("utf-8")

    def check_password(self, value):
        return bcrypt.check_password_hash(self.password_digest, value)

    def to_public_dict(self):
        return {"id": self.id, "name": self.name, "email": self.email}

    def __repr__(self):
        return f"<User({self.name!r})>"
