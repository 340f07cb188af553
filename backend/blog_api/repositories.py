"""Repository classes encapsulating database operations.

Each repository is small and focused on a single table (usuarios, tema,
postagem). Repositories receive the `Session` they work with, return
SQLModel objects and perform commits/refreshes where appropriate.
Failed commits are rolled back and reported as `StoreError`.
"""

import logging
from typing import List, Optional
from sqlmodel import Session, select
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import selectinload
from . import models
from .errors import ConflictError, StoreError

logger = logging.getLogger("blog_api.repositories")


class BaseRepository:
    """Shared persistence helpers for a single model class."""
    model = None

    def __init__(self, session: Session):
        self.session = session

    def get(self, row_id: int):
        """Get a row by primary key or `None`."""
        try:
            return self.session.get(self.model, row_id)
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e

    def list_all(self) -> list:
        """Return every row ordered by id."""
        stmt = select(self.model).order_by(self.model.id)
        try:
            return self.session.exec(stmt).all()
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e

    def save(self, obj, conflict_message=None):
        """Insert or update `obj` and return the refreshed instance.

        When `conflict_message` is given, a unique-constraint violation is
        reported as `ConflictError` with that message.
        """
        self.session.add(obj)
        self._commit(conflict_message)
        self.session.refresh(obj)
        return obj

    def delete(self, obj) -> None:
        """Delete `obj` and commit."""
        self.session.delete(obj)
        self._commit()

    def _commit(self, conflict_message=None):
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            if conflict_message:
                logger.warning("unique constraint hit for %s: %s", self.model.__name__, e.orig)
                raise ConflictError(conflict_message) from e
            logger.error("commit failed for %s: %s", self.model.__name__, e)
            raise StoreError(str(e)) from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("commit failed for %s: %s", self.model.__name__, e)
            raise StoreError(str(e)) from e


class UserRepository(BaseRepository):
    """CRUD operations for `User` rows."""
    model = models.User

    def save(self, user, conflict_message="O email já existe."):
        """Persist `user`; a duplicate email raises `ConflictError`."""
        return super().save(user, conflict_message)

    def get_by_email(self, email: str) -> Optional[models.User]:
        """Return a `User` by email or `None` if not found."""
        stmt = select(models.User).where(models.User.email == email)
        try:
            return self.session.exec(stmt).first()
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e


class ThemeRepository(BaseRepository):
    """CRUD operations for `Theme` rows."""
    model = models.Theme


class PostRepository(BaseRepository):
    """CRUD operations for `Post` rows plus the reference lookups."""
    model = models.Post

    def list_all(self) -> List[models.Post]:
        """Return every post with its author and theme loaded.

        The related rows are fetched in the same round of queries so that
        enriching a whole listing does not issue one lookup per post.
        """
        stmt = (
            select(models.Post)
            .options(selectinload(models.Post.usuario), selectinload(models.Post.tema))
            .order_by(models.Post.id)
        )
        try:
            return self.session.exec(stmt).all()
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e

    def count_by_user(self, user_id: int) -> int:
        """Count posts written by `user_id`."""
        stmt = select(func.count()).select_from(models.Post).where(models.Post.usuario_id == user_id)
        return self._scalar(stmt)

    def count_by_theme(self, theme_id: int) -> int:
        """Count posts filed under `theme_id`."""
        stmt = select(func.count()).select_from(models.Post).where(models.Post.tema_id == theme_id)
        return self._scalar(stmt)

    def delete_by_user(self, user_id: int) -> int:
        """Delete every post of `user_id` without committing; return how many."""
        return self._delete_where(models.Post.usuario_id == user_id)

    def delete_by_theme(self, theme_id: int) -> int:
        """Delete every post under `theme_id` without committing; return how many."""
        return self._delete_where(models.Post.tema_id == theme_id)

    def _delete_where(self, condition) -> int:
        try:
            posts = self.session.exec(select(models.Post).where(condition)).all()
            for p in posts:
                self.session.delete(p)
            self.session.flush()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreError(str(e)) from e
        return len(posts)

    def _scalar(self, stmt) -> int:
        try:
            return self.session.exec(stmt).one()
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e
