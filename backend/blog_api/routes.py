"""HTTP controllers for users, themes and posts.

Controllers are intentionally thin: they accept requests, delegate to
services, and return JSON. Errors raised by the services are translated
by the handlers in `errors`.

Endpoints implemented:
- POST/GET /usuarios, GET/PUT/DELETE /usuarios/{id}
- POST/GET /temas, GET/PUT/DELETE /temas/{id}
- POST/GET /postagem, GET/PUT/DELETE /postagem/{id}
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request
from sqlmodel import Session
from . import services
from .database import get_session
from .schemas import MAX_ID, PostIn, ThemeIn, UserIn

usuarios = APIRouter(prefix="/usuarios", tags=["Usuários"])
temas = APIRouter(prefix="/temas", tags=["Temas"])
postagem = APIRouter(prefix="/postagem", tags=["Postagem"])

RowId = Annotated[int, Path(ge=1, le=MAX_ID)]


def _delete_policy(request: Request) -> str:
    return request.app.state.settings.REFERENCE_DELETE_POLICY


def get_user_service(request: Request, db: Session = Depends(get_session)) -> services.UserService:
    return services.UserService(db, delete_policy=_delete_policy(request))


def get_theme_service(request: Request, db: Session = Depends(get_session)) -> services.ThemeService:
    return services.ThemeService(db, delete_policy=_delete_policy(request))


def get_post_service(db: Session = Depends(get_session)) -> services.PostService:
    return services.PostService(db)


@usuarios.post('')
def create_user(payload: UserIn, svc: services.UserService = Depends(get_user_service)):
    """Register a new user.

    `nome` needs at least 3 characters and `email` must look like
    `local@domain.tld` and be unused. Returns `{nome, email, foto}`.
    """
    return svc.create(payload.nome, payload.email, payload.foto)


@usuarios.get('')
def list_users(svc: services.UserService = Depends(get_user_service)):
    """List every registered user."""
    return svc.list()


@usuarios.get('/{user_id}')
def get_user(user_id: RowId, svc: services.UserService = Depends(get_user_service)):
    """Return a single user by id."""
    return svc.get(user_id)


@usuarios.put('/{user_id}')
def update_user(user_id: RowId, payload: UserIn, svc: services.UserService = Depends(get_user_service)):
    """Overwrite a user's `nome`, `email` and `foto` (all re-validated)."""
    return svc.update(user_id, payload.nome, payload.email, payload.foto)


@usuarios.delete('/{user_id}')
def delete_user(user_id: RowId, svc: services.UserService = Depends(get_user_service)):
    """Delete a user.

    Users that still own posts are kept (409) unless the server runs with
    `REFERENCE_DELETE_POLICY=cascade`, in which case their posts go too.
    """
    return svc.delete(user_id)


@temas.post('')
def create_theme(payload: ThemeIn, svc: services.ThemeService = Depends(get_theme_service)):
    """Create a theme; `descricao` needs at least 3 characters."""
    return svc.create(payload.descricao)


@temas.get('')
def list_themes(svc: services.ThemeService = Depends(get_theme_service)):
    return svc.list()


@temas.get('/{theme_id}')
def get_theme(theme_id: RowId, svc: services.ThemeService = Depends(get_theme_service)):
    return svc.get(theme_id)


@temas.put('/{theme_id}')
def update_theme(theme_id: RowId, payload: ThemeIn, svc: services.ThemeService = Depends(get_theme_service)):
    """Replace a theme's `descricao` and return the updated row."""
    return svc.update(theme_id, payload.descricao)


@temas.delete('/{theme_id}')
def delete_theme(theme_id: RowId, svc: services.ThemeService = Depends(get_theme_service)):
    """Delete a theme, following the same reference policy as users."""
    return svc.delete(theme_id)


@postagem.post('')
def create_post(payload: PostIn, svc: services.PostService = Depends(get_post_service)):
    """Create a post for an existing user and theme.

    The response carries the stored columns plus `usuario_nome` and
    `tema_descricao` looked up from the referenced rows.
    """
    return svc.create(payload.titulo, payload.texto, payload.usuario_id, payload.tema_id)


@postagem.get('')
def list_posts(svc: services.PostService = Depends(get_post_service)):
    """List every post, enriched like the create response."""
    return svc.list()


@postagem.get('/{post_id}')
def get_post(post_id: RowId, svc: services.PostService = Depends(get_post_service)):
    return svc.get(post_id)


@postagem.put('/{post_id}')
def update_post(post_id: RowId, payload: PostIn, svc: services.PostService = Depends(get_post_service)):
    """Overwrite a post's title, text, author and theme."""
    return svc.update(post_id, payload.titulo, payload.texto, payload.usuario_id, payload.tema_id)


@postagem.delete('/{post_id}')
def delete_post(post_id: RowId, svc: services.PostService = Depends(get_post_service)):
    return svc.delete(post_id)
