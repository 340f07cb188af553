"""Pydantic request schemas used by the API.

Only JSON types are enforced here. Every field is optional at the schema
level; presence and length rules live in `services`.
"""

from pydantic import BaseModel, Field
from typing import Optional

# largest value a signed 64-bit INTEGER column can hold
MAX_ID = 2**63 - 1


class UserIn(BaseModel):
    """Payload for user registration and update."""
    nome: Optional[str] = None
    email: Optional[str] = None
    foto: Optional[str] = None


class ThemeIn(BaseModel):
    """Payload for theme creation and update."""
    descricao: Optional[str] = None


class PostIn(BaseModel):
    """Payload for post creation and update."""
    titulo: Optional[str] = None
    texto: Optional[str] = None
    usuario_id: Optional[int] = Field(default=None, ge=1, le=MAX_ID)
    tema_id: Optional[int] = Field(default=None, ge=1, le=MAX_ID)
