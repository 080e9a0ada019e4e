from knowledge_manager.database import Column, PkModel, db, reference_col


TITLE_MAX_LENGTH = 64


class Tag(PkModel):
    """A global label; ``title`` is the canonical form and is unique."""
    __tablename__ = "tags"

    title = Column(db.String(TITLE_MAX_LENGTH), unique=True, nullable=False)

    def to_dict(self):
        return {"id": self.id, "title": self.title}


# Many-to-many intermediate table between posts and tags
class PostTagRel(PkModel):
    __tablename__ = "post_tag_rel"
    __table_args__ = (db.UniqueConstraint("post_id", "tag_id"),)

    post_id = reference_col("posts")
    tag_id = reference_col("tags")


# Records that a tag is known inside a database, independent of its posts
class TagDatabaseRel(PkModel):
    __tablename__ = "tag_database_rel"
    __table_args__ = (db.UniqueConstraint("database_id", "tag_id"),)

    database_id = reference_col("databases")
    tag_id = reference_col("tags")
