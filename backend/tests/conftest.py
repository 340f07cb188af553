import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from blog_api.config import Settings
from blog_api.database import build_engine, create_db_and_tables
from blog_api.main import create_app


@pytest.fixture
def engine():
    """Fresh in-memory SQLite store with the blog schema."""
    eng = build_engine("sqlite://")
    create_db_and_tables(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as s:
        yield s


def _client_for(engine, monkeypatch, policy):
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("REFERENCE_DELETE_POLICY", policy)
    monkeypatch.setenv("ALLOW_DEV_CORS", "false")
    return TestClient(create_app(Settings(), engine=engine))


@pytest.fixture
def client(engine, monkeypatch):
    with _client_for(engine, monkeypatch, "restrict") as c:
        yield c


@pytest.fixture
def cascade_client(engine, monkeypatch):
    with _client_for(engine, monkeypatch, "cascade") as c:
        yield c


@pytest.fixture
def make_user(client):
    """Register a user through the API and return its stored row (with id)."""
    def _make(nome='Ana', email='ana@x.com', foto=None):
        r = client.post('/usuarios', json={'nome': nome, 'email': email, 'foto': foto})
        assert r.status_code == 200, r.text
        return next(u for u in client.get('/usuarios').json() if u['email'] == email)
    return _make


@pytest.fixture
def make_theme(client):
    def _make(descricao='Tech'):
        r = client.post('/temas', json={'descricao': descricao})
        assert r.status_code == 200, r.text
        return r.json()
    return _make


@pytest.fixture
def make_post(client, make_user, make_theme):
    """Create a post, creating a default author/theme when none is given."""
    def _make(titulo='Hello!', texto='this is text', usuario_id=None, tema_id=None):
        if usuario_id is None:
            usuario_id = make_user()['id']
        if tema_id is None:
            tema_id = make_theme()['id']
        r = client.post('/postagem', json={'titulo': titulo, 'texto': texto, 'usuario_id': usuario_id, 'tema_id': tema_id})
        assert r.status_code == 200, r.text
        return r.json()
    return _make
