# blogapi/api/auth/test_routes.py
from blogapi.conftest import auth_headers, register


def test_register_returns_tokens_without_password_hash(client):
    account = register(client, "carol")

    user = account['user']
    assert user['username'] == "carol"
    assert user['email'] == "carol@example.com"
    assert 'password' not in user
    assert 'password_hash' not in user


def test_duplicate_registration_conflicts(client, alice):
    response = client.post('/api/v1/users/register', json={
        "username": "alice",
        "email": "someone-else@example.com",
        "full_name": "Alice Again",
        "password": "password123",
    })
    body = response.get_json()

    assert response.status_code == 409
    assert body['success'] is False
    assert body['error_code'] == "USERNAME_TAKEN"


def test_register_validation_error(client):
    response = client.post('/api/v1/users/register', json={"username": "x", "email": "nope", "password": "short"})
    body = response.get_json()

    assert response.status_code == 400
    assert body['error_code'] == "VALIDATION_ERROR"
    assert {'username', 'email', 'password', 'full_name'} <= set(body['details'])


def test_login_with_email_or_username(client, alice):
    by_email = client.post('/api/v1/users/login', json={"email": "ALICE@example.com", "password": "password123"})
    by_username = client.post('/api/v1/users/login', json={"username": "alice", "password": "password123"})

    assert by_email.status_code == 200
    assert by_username.status_code == 200
    assert by_email.get_json()['data']['user']['user_id'] == alice['user']['user_id']


def test_login_wrong_password(client, alice):
    response = client.post('/api/v1/users/login', json={"username": "alice", "password": "wrong-password"})

    assert response.status_code == 401
    assert response.get_json()['error_code'] == "INVALID_CREDENTIALS"


def test_me_requires_token(client):
    response = client.get('/api/v1/users/me')

    assert response.status_code == 401
    assert response.get_json()['success'] is False


def test_me(client, alice):
    response = client.get('/api/v1/users/me', headers=alice['headers'])

    assert response.status_code == 200
    assert response.get_json()['data']['user']['username'] == "alice"


def test_refresh_token(client, alice):
    response = client.post('/api/v1/users/token/refresh', headers=auth_headers(alice['refresh_token']))
    new_token = response.get_json()['data']['access_token']

    assert response.status_code == 200
    assert client.get('/api/v1/users/me', headers=auth_headers(new_token)).status_code == 200


def test_logged_out_tokens_are_rejected(client, alice):
    response = client.post('/api/v1/users/logout', headers=alice['headers'],
                           json={"refresh_token": alice['refresh_token']})
    assert response.status_code == 200

    me = client.get('/api/v1/users/me', headers=alice['headers'])
    assert me.status_code == 401
    assert me.get_json()['error_code'] == "TOKEN_REVOKED"

    refresh = client.post('/api/v1/users/token/refresh', headers=auth_headers(alice['refresh_token']))
    assert refresh.status_code == 401


def test_logout_rejects_someone_elses_refresh_token(client, alice, bob):
    response = client.post('/api/v1/users/logout', headers=alice['headers'],
                           json={"refresh_token": bob['refresh_token']})

    assert response.status_code == 400
    assert response.get_json()['error_code'] == "INVALID_TOKEN"
