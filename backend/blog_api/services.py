"""Business logic services used by HTTP controllers.

One service per resource. Services validate input, coordinate the
repositories and build the response payloads. They raise the errors from
`errors` and never deal with HTTP themselves.
"""

import logging
import re
from typing import List, Optional
from sqlmodel import Session
from . import models, repositories
from .config import settings
from .errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger("blog_api.services")

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

NOME_MIN = 3
DESCRICAO_MIN = 3
TITULO_MIN = 5
TEXTO_MIN = 10


def _too_short(value: Optional[str], minimum: int) -> bool:
    return not isinstance(value, str) or len(value) < minimum


def validate_user(nome: Optional[str], email: Optional[str]) -> None:
    """Raise `ValidationError` unless `nome` and `email` are acceptable."""
    if _too_short(nome, NOME_MIN):
        raise ValidationError(f"O nome é obrigatório e deve ter no mínimo {NOME_MIN} caracteres.")
    if not email or not EMAIL_RE.fullmatch(email):
        raise ValidationError("O e-mail é obrigatório e deve ter um formato válido.")


def validate_theme(descricao: Optional[str]) -> None:
    """Raise `ValidationError` unless `descricao` is acceptable."""
    if _too_short(descricao, DESCRICAO_MIN):
        raise ValidationError(f"A descrição é obrigatória e deve ter no mínimo {DESCRICAO_MIN} caracteres.")


def validate_post(titulo: Optional[str], texto: Optional[str], usuario_id: Optional[int], tema_id: Optional[int]) -> None:
    """Raise `ValidationError` unless the post fields are acceptable.

    Only presence is checked for the references; whether they exist is
    the service's job since it needs the store.
    """
    if _too_short(titulo, TITULO_MIN):
        raise ValidationError(f"O título é obrigatório e deve ter no mínimo {TITULO_MIN} caracteres.")
    if _too_short(texto, TEXTO_MIN):
        raise ValidationError(f"O texto é obrigatório e deve ter no mínimo {TEXTO_MIN} caracteres.")
    if usuario_id is None:
        raise ValidationError("O usuario_id é obrigatório.")
    if tema_id is None:
        raise ValidationError("O tema_id é obrigatório.")


def user_payload(user: models.User) -> dict:
    """Public shape returned by user create/update (no id)."""
    return {'nome': user.nome, 'email': user.email, 'foto': user.foto}


def user_row(user: models.User) -> dict:
    return {'id': user.id, 'nome': user.nome, 'email': user.email, 'foto': user.foto}


def theme_row(theme: models.Theme) -> dict:
    return {'id': theme.id, 'descricao': theme.descricao}


def post_payload(post: models.Post, user: models.User, theme: models.Theme) -> dict:
    """Enriched post: stored columns plus author name and theme description."""
    return {
        'id': post.id,
        'titulo': post.titulo,
        'texto': post.texto,
        'data': post.data,
        'usuario_id': post.usuario_id,
        'tema_id': post.tema_id,
        'usuario_nome': user.nome,
        'tema_descricao': theme.descricao,
    }


class UserService:
    """Register, read, update and remove users."""
    def __init__(self, session: Session, delete_policy: Optional[str] = None):
        self.session = session
        self.user_repo = repositories.UserRepository(session)
        self.post_repo = repositories.PostRepository(session)
        self.delete_policy = delete_policy or settings.REFERENCE_DELETE_POLICY

    def create(self, nome: Optional[str], email: Optional[str], foto: Optional[str] = None) -> dict:
        """Validate and insert a new user.

        Raises `ConflictError` when the email is already registered.
        Returns `{nome, email, foto}`; the generated id is not part of
        the registration response.
        """
        validate_user(nome, email)
        if self.user_repo.get_by_email(email):
            raise ConflictError("O email já existe.")
        user = self.user_repo.save(models.User(nome=nome, email=email, foto=foto))
        logger.info("user created id=%s", user.id)
        return user_payload(user)

    def list(self) -> List[dict]:
        return [user_row(u) for u in self.user_repo.list_all()]

    def get(self, user_id: int) -> dict:
        return user_row(self._get_or_404(user_id))

    def update(self, user_id: int, nome: Optional[str], email: Optional[str], foto: Optional[str] = None) -> dict:
        """Re-validate every field and overwrite the user.

        The email may stay the same; it only conflicts when another user
        already owns it.
        """
        validate_user(nome, email)
        user = self._get_or_404(user_id)
        owner = self.user_repo.get_by_email(email)
        if owner and owner.id != user.id:
            raise ConflictError("O email já existe.")
        user.nome = nome
        user.email = email
        user.foto = foto
        user = self.user_repo.save(user)
        return user_payload(user)

    def delete(self, user_id: int) -> str:
        """Remove a user, applying the reference policy to their posts."""
        user = self._get_or_404(user_id)
        if self.post_repo.count_by_user(user.id):
            if self.delete_policy != "cascade":
                raise ConflictError("O usuário possui postagens e não pode ser excluído.")
            removed = self.post_repo.delete_by_user(user.id)
            logger.info("cascade removed %s posts of user id=%s", removed, user.id)
        self.user_repo.delete(user)
        logger.info("user deleted id=%s", user_id)
        return "Usuário excluído com sucesso."

    def _get_or_404(self, user_id: int) -> models.User:
        user = self.user_repo.get(user_id)
        if not user:
            raise NotFoundError("Usuário não encontrado.")
        return user


class ThemeService:
    """CRUD for themes."""
    def __init__(self, session: Session, delete_policy: Optional[str] = None):
        self.session = session
        self.theme_repo = repositories.ThemeRepository(session)
        self.post_repo = repositories.PostRepository(session)
        self.delete_policy = delete_policy or settings.REFERENCE_DELETE_POLICY

    def create(self, descricao: Optional[str]) -> dict:
        validate_theme(descricao)
        theme = self.theme_repo.save(models.Theme(descricao=descricao))
        logger.info("theme created id=%s", theme.id)
        return theme_row(theme)

    def list(self) -> List[dict]:
        return [theme_row(t) for t in self.theme_repo.list_all()]

    def get(self, theme_id: int) -> dict:
        return theme_row(self._get_or_404(theme_id))

    def update(self, theme_id: int, descricao: Optional[str]) -> dict:
        validate_theme(descricao)
        theme = self._get_or_404(theme_id)
        theme.descricao = descricao
        return theme_row(self.theme_repo.save(theme))

    def delete(self, theme_id: int) -> str:
        """Remove a theme, applying the reference policy to its posts."""
        theme = self._get_or_404(theme_id)
        if self.post_repo.count_by_theme(theme.id):
            if self.delete_policy != "cascade":
                raise ConflictError("O tema possui postagens e não pode ser excluído.")
            removed = self.post_repo.delete_by_theme(theme.id)
            logger.info("cascade removed %s posts of theme id=%s", removed, theme.id)
        self.theme_repo.delete(theme)
        logger.info("theme deleted id=%s", theme_id)
        return "Tema excluído com sucesso."

    def _get_or_404(self, theme_id: int) -> models.Theme:
        theme = self.theme_repo.get(theme_id)
        if not theme:
            raise NotFoundError("Tema não encontrado.")
        return theme


class PostService:
    """CRUD for posts, always answering with enriched payloads."""
    def __init__(self, session: Session):
        self.session = session
        self.post_repo = repositories.PostRepository(session)
        self.user_repo = repositories.UserRepository(session)
        self.theme_repo = repositories.ThemeRepository(session)

    def create(self, titulo: Optional[str], texto: Optional[str], usuario_id: Optional[int], tema_id: Optional[int]) -> dict:
        """Validate, check both references exist, insert and enrich.

        Nothing is written when the author or the theme is missing.
        """
        validate_post(titulo, texto, usuario_id, tema_id)
        user, theme = self._resolve_references(usuario_id, tema_id)
        post = self.post_repo.save(models.Post(titulo=titulo, texto=texto, usuario_id=user.id, tema_id=theme.id))
        logger.info("post created id=%s usuario_id=%s tema_id=%s", post.id, user.id, theme.id)
        return self._enrich(post)

    def list(self) -> List[dict]:
        return [self._enrich(p) for p in self.post_repo.list_all()]

    def get(self, post_id: int) -> dict:
        return self._enrich(self._get_or_404(post_id))

    def update(self, post_id: int, titulo: Optional[str], texto: Optional[str], usuario_id: Optional[int], tema_id: Optional[int]) -> dict:
        """Overwrite all four editable fields and return the enriched post."""
        post = self._get_or_404(post_id)
        validate_post(titulo, texto, usuario_id, tema_id)
        user, theme = self._resolve_references(usuario_id, tema_id)
        post.titulo = titulo
        post.texto = texto
        post.usuario_id = user.id
        post.tema_id = theme.id
        return self._enrich(self.post_repo.save(post))

    def delete(self, post_id: int) -> str:
        post = self._get_or_404(post_id)
        self.post_repo.delete(post)
        logger.info("post deleted id=%s", post_id)
        return "Postagem excluída com sucesso."

    def _resolve_references(self, usuario_id: int, tema_id: int):
        user = self.user_repo.get(usuario_id)
        if not user:
            raise NotFoundError("Usuário não encontrado.")
        theme = self.theme_repo.get(tema_id)
        if not theme:
            raise NotFoundError("Tema não encontrado.")
        return user, theme

    def _enrich(self, post: models.Post) -> dict:
        # a reference deleted concurrently after the write leaves nothing to join
        if post.usuario is None or post.tema is None:
            raise NotFoundError("Usuário ou tema da postagem não encontrado.")
        return post_payload(post, post.usuario, post.tema)

    def _get_or_404(self, post_id: int) -> models.Post:
        post = self.post_repo.get(post_id)
        if not post:
            raise NotFoundError("Postagem não encontrada.")
        return post
