"""SQLAlchemy ORM models for the vector index — namespaces, entries, and embedded chunks."""

import uuid

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)

from pgvector.sqlalchemy import Vector

from marketplace.infrastructure.database.base import Base

# Size of the embedding column; HNSW indexes accept at most 2000
EMBEDDING_DIMENSIONS = 768


def _generate_uuid() -> str:
    return str(uuid.uuid4())


class VectorNamespaceModel(Base):
    """A named group of entries (e.g. the global 'products' namespace)."""

    __tablename__ = "vector_namespaces"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class VectorEntryModel(Base):
    """One indexed document, keyed by the id of the record it was built from."""

    __tablename__ = "vector_entries"

    id = Column(String(36), primary_key=True, default=_generate_uuid)
    namespace_id = Column(
        Integer,
        ForeignKey("vector_namespaces.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    key = Column(String(255), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class VectorChunkModel(Base):
    """A text chunk of an entry with its embedding vector."""

    __tablename__ = "vector_chunks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    entry_id = Column(
        String(36),
        ForeignKey("vector_entries.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    chunk_index = Column(Integer, nullable=False)
    content = Column(Text, nullable=False)
    embedding = Column(Vector(EMBEDDING_DIMENSIONS), nullable=False)

    __table_args__ = (
        UniqueConstraint("entry_id", "chunk_index", name="uq_vector_chunk_order"),
        Index("idx_vector_chunks_embedding_hnsw", embedding, postgresql_using="hnsw",
              postgresql_ops={"embedding": "vector_cosine_ops"}),
    )
