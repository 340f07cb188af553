"""SQLModel data models.

Each class maps to one table of the store. Table names follow the
existing database (`usuarios`, `tema`, `postagem`).
"""

from typing import List, Optional
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime, timezone


class User(SQLModel, table=True):
    """A registered author.

    Fields:
    - `nome`: display name (at least 3 characters)
    - `email`: unique address in `local@domain.tld` form
    - `foto`: optional picture URL or opaque reference
    """
    __tablename__ = "usuarios"

    id: Optional[int] = Field(default=None, primary_key=True)
    nome: str = Field(nullable=False)
    email: str = Field(index=True, nullable=False, unique=True)
    foto: Optional[str] = None
    postagens: List["Post"] = Relationship(back_populates="usuario")


class Theme(SQLModel, table=True):
    """A topic posts are filed under."""
    __tablename__ = "tema"

    id: Optional[int] = Field(default=None, primary_key=True)
    descricao: str = Field(nullable=False)
    postagens: List["Post"] = Relationship(back_populates="tema")


class Post(SQLModel, table=True):
    """A post written by a `User` under a `Theme`.

    `data` is assigned when the row is created and never changes.
    """
    __tablename__ = "postagem"

    id: Optional[int] = Field(default=None, primary_key=True)
    titulo: str = Field(nullable=False)
    texto: str = Field(nullable=False)
    data: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    usuario_id: int = Field(foreign_key="usuarios.id", index=True)
    tema_id: int = Field(foreign_key="tema.id", index=True)
    usuario: Optional[User] = Relationship(back_populates="postagens")
    tema: Optional[Theme] = Relationship(back_populates="postagens")
