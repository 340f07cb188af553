import pytest


def test_register_returns_public_fields_without_id(client):
    r = client.post('/usuarios', json={'nome': 'Ana', 'email': 'ana@x.com'})
    assert r.status_code == 200
    assert r.json() == {'nome': 'Ana', 'email': 'ana@x.com', 'foto': None}


def test_duplicate_email_is_a_conflict(client):
    payload = {'nome': 'Ana', 'email': 'ana@x.com'}
    assert client.post('/usuarios', json=payload).status_code == 200
    r = client.post('/usuarios', json=payload)
    assert r.status_code == 409
    assert r.json() == 'O email já existe.'
    assert len(client.get('/usuarios').json()) == 1


@pytest.mark.parametrize('nome', [None, '', 'A', 'Al'])
def test_short_or_missing_nome_is_rejected_without_write(client, nome):
    r = client.post('/usuarios', json={'nome': nome, 'email': 'ana@x.com'})
    assert r.status_code == 400
    assert 'nome' in r.json()
    assert client.get('/usuarios').json() == []


@pytest.mark.parametrize('email', [None, '', 'ana', 'ana@x', '@x.com', 'ana@x.', 'a na@x.com', 'ana@@x.com'])
def test_malformed_email_is_rejected(client, email):
    r = client.post('/usuarios', json={'nome': 'Ana', 'email': email})
    assert r.status_code == 400
    assert 'e-mail' in r.json()
    assert client.get('/usuarios').json() == []


def test_list_and_get_include_id(client, make_user):
    ana = make_user(foto='http://img/ana.png')
    make_user(nome='Bruno', email='bruno@x.com')
    rows = client.get('/usuarios').json()
    assert [u['nome'] for u in rows] == ['Ana', 'Bruno']
    r = client.get(f"/usuarios/{ana['id']}")
    assert r.status_code == 200
    assert r.json() == {'id': ana['id'], 'nome': 'Ana', 'email': 'ana@x.com', 'foto': 'http://img/ana.png'}


def test_get_missing_user(client):
    r = client.get('/usuarios/999')
    assert r.status_code == 404
    assert r.json() == 'Usuário não encontrado.'


def test_non_integer_id_is_a_bad_request(client):
    r = client.get('/usuarios/abc')
    assert r.status_code == 400
    assert isinstance(r.json(), str)


def test_update_overwrites_all_fields(client, make_user):
    ana = make_user(foto='old.png')
    r = client.put(f"/usuarios/{ana['id']}", json={'nome': 'Ana Maria', 'email': 'ana.maria@x.com'})
    assert r.status_code == 200
    assert r.json() == {'nome': 'Ana Maria', 'email': 'ana.maria@x.com', 'foto': None}
    assert client.get(f"/usuarios/{ana['id']}").json()['email'] == 'ana.maria@x.com'


def test_update_keeping_own_email_is_allowed(client, make_user):
    ana = make_user()
    r = client.put(f"/usuarios/{ana['id']}", json={'nome': 'Ana B', 'email': 'ana@x.com'})
    assert r.status_code == 200


def test_update_to_another_users_email_conflicts(client, make_user):
    make_user()
    bruno = make_user(nome='Bruno', email='bruno@x.com')
    r = client.put(f"/usuarios/{bruno['id']}", json={'nome': 'Bruno', 'email': 'ana@x.com'})
    assert r.status_code == 409
    assert client.get(f"/usuarios/{bruno['id']}").json()['email'] == 'bruno@x.com'


def test_update_validates_before_touching_the_store(client, make_user):
    ana = make_user()
    r = client.put(f"/usuarios/{ana['id']}", json={'nome': 'Al', 'email': 'ana@x.com'})
    assert r.status_code == 400
    assert client.get(f"/usuarios/{ana['id']}").json()['nome'] == 'Ana'


def test_update_missing_user(client):
    r = client.put('/usuarios/42', json={'nome': 'Ana', 'email': 'ana@x.com'})
    assert r.status_code == 404


def test_delete_user(client, make_user):
    ana = make_user()
    r = client.delete(f"/usuarios/{ana['id']}")
    assert r.status_code == 200
    assert r.json() == 'Usuário excluído com sucesso.'
    assert client.get(f"/usuarios/{ana['id']}").status_code == 404


def test_delete_missing_user_leaves_store_unchanged(client, make_user):
    make_user()
    before = client.get('/usuarios').json()
    r = client.delete('/usuarios/999')
    assert r.status_code == 404
    assert client.get('/usuarios').json() == before


def test_delete_user_with_posts_is_restricted(client, make_post):
    post = make_post()
    r = client.delete(f"/usuarios/{post['usuario_id']}")
    assert r.status_code == 409
    assert client.get(f"/postagem/{post['id']}").status_code == 200


@pytest.mark.parametrize('path', ['/usuarios/0', '/usuarios/-1', '/usuarios/99999999999999999999', '/temas/99999999999999999999', '/postagem/99999999999999999999'])
def test_out_of_range_id_is_a_bad_request(client, path):
    for method in ('get', 'delete'):
        r = getattr(client, method)(path)
        assert r.status_code == 400
        assert isinstance(r.json(), str)


@pytest.mark.parametrize('email', [None, 'ana', 'ana@x', 'ana@@x.com'])
def test_update_with_malformed_email_keeps_stored_email(client, make_user, email):
    ana = make_user()
    r = client.put(f"/usuarios/{ana['id']}", json={'nome': 'Ana', 'email': email})
    assert r.status_code == 400
    assert 'e-mail' in r.json()
    assert client.get(f"/usuarios/{ana['id']}").json()['email'] == 'ana@x.com'
