from knowledge_manager.database import Column, PkModel, db, reference_col, relationship, utcnow


TITLE_MAX_LENGTH = 255


class Post(PkModel):
    """
    A titled content item belonging to exactly one database.

    Attributes:
        id (int): Primary key, inherited from PkModel.
        title (str): Post title.
        content (str): Post body.
        database_id (int): Owning database.
        created_at (datetime): Creation time.
        updated_at (datetime): Last edit time.
    """
    __tablename__ = "posts"

    title = Column(db.String(TITLE_MAX_LENGTH), nullable=False)
    content = Column(db.Text, nullable=False)
    database_id = reference_col("databases")
    created_at = Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    database = relationship("Database", backref="posts")

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "database_id": self.database_id,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
