"""Route tests for /api/auth (register, login, me)."""

import unittest

from fastapi.testclient import TestClient

from api.main import app
from api.dependencies import get_user_repo
from api.security import create_access_token, verify_token
from adapter.fake.user_repository import FakeUserRepository
from domain.model.errors import StorageError


def _assert_no_password_fields(test: unittest.TestCase, body: dict):
    test.assertNotIn('password', body)
    test.assertNotIn('password_hash', body)
    user = body.get('user', {})
    for key in user:
        test.assertNotIn('password', key.lower())


class AuthRouteTestCase(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)
        self.repo = FakeUserRepository()
        app.dependency_overrides[get_user_repo] = lambda: self.repo

    def tearDown(self):
        app.dependency_overrides.clear()

    def _register(self, name='A', email='a@x.com', password='secret1'):
        return self.client.post('/api/auth/register', json={
            'name': name, 'email': email, 'password': password,
        })


class TestRegister(AuthRouteTestCase):

    def test_register_success(self):
        response = self._register()

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body['message'], 'User created successfully')
        self.assertIsInstance(body['token'], str)
        self.assertTrue(body['token'])
        self.assertEqual(body['user']['email'], 'a@x.com')
        self.assertEqual(body['user']['name'], 'A')
        self.assertIn('id', body['user'])
        _assert_no_password_fields(self, body)
        self.assertNotIn('$2b$', response.text)

    def test_register_token_carries_new_user_id(self):
        body = self._register().json()

        claims = verify_token(body['token']).claims

        self.assertEqual(claims.user_id, body['user']['id'])
        self.assertEqual(claims.email, 'a@x.com')

    def test_register_duplicate_email(self):
        self._register()

        response = self._register(name='B', password='other1')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {'message': 'User already exists'})
        self.assertEqual(
            len([u for u in self.repo.store.values() if u.email == 'a@x.com']), 1
        )

    def test_register_missing_field(self):
        response = self.client.post('/api/auth/register', json={'email': 'a@x.com', 'password': 'x'})

        self.assertEqual(response.status_code, 400)
        self.assertIn('name', response.json()['message'])
        self.assertEqual(self.repo.store, {})

    def test_register_empty_name(self):
        response = self._register(name='')
        self.assertEqual(response.status_code, 400)

    def test_register_invalid_email(self):
        response = self._register(email='not-an-email')

        self.assertEqual(response.status_code, 400)
        self.assertIn('email', response.json()['message'])

    def test_register_storage_failure_is_500(self):
        class BrokenRepo(FakeUserRepository):
            def get_by_email(self, email):
                raise StorageError("connection refused")

        app.dependency_overrides[get_user_repo] = lambda: BrokenRepo()

        response = self._register()

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {'message': 'Server error'})


class TestLogin(AuthRouteTestCase):

    def test_register_then_login(self):
        registered = self._register().json()

        response = self.client.post('/api/auth/login', json={
            'email': 'a@x.com', 'password': 'secret1',
        })

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body['message'], 'Login successful')
        self.assertEqual(
            verify_token(body['token']).claims.user_id,
            verify_token(registered['token']).claims.user_id,
        )
        self.assertEqual(body['user']['phone'], '')
        self.assertEqual(body['user']['birthdate'], '')
        self.assertEqual(
            body['user']['profileImage'],
            'https://ui-avatars.com/api/?name=A&background=random',
        )
        _assert_no_password_fields(self, body)

    def test_wrong_password_and_unknown_email_look_the_same(self):
        self._register()

        wrong_password = self.client.post('/api/auth/login', json={
            'email': 'a@x.com', 'password': 'nope',
        })
        unknown_email = self.client.post('/api/auth/login', json={
            'email': 'b@x.com', 'password': 'secret1',
        })

        self.assertEqual(wrong_password.status_code, 400)
        self.assertEqual(unknown_email.status_code, 400)
        self.assertEqual(wrong_password.json(), {'message': 'Invalid credentials'})
        self.assertEqual(unknown_email.json(), wrong_password.json())

    def test_lone_surrogate_password_registers_and_logs_in(self):
        headers = {'Content-Type': 'application/json'}

        registered = self.client.post(
            '/api/auth/register',
            content=b'{"name": "A", "email": "a@x.com", "password": "\\ud800x"}',
            headers=headers,
        )
        login = self.client.post(
            '/api/auth/login',
            content=b'{"email": "a@x.com", "password": "\\ud800x"}',
            headers=headers,
        )
        wrong = self.client.post(
            '/api/auth/login',
            content=b'{"email": "a@x.com", "password": "\\ud801x"}',
            headers=headers,
        )

        self.assertEqual(registered.status_code, 201)
        self.assertEqual(login.status_code, 200)
        self.assertEqual(wrong.status_code, 400)


class TestMe(AuthRouteTestCase):

    def test_no_header_is_401(self):
        response = self.client.get('/api/auth/me')

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {'message': 'No token provided'})

    def test_tampered_token_is_401(self):
        token = self._register().json()['token']
        header, payload, signature = token.split('.')
        forged = create_access_token('someone-else', 'b@x.com').split('.')[1]

        response = self.client.get(
            '/api/auth/me',
            headers={'Authorization': f'Bearer {header}.{forged}.{signature}'},
        )

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {'message': 'Invalid token'})

    def test_valid_token_returns_profile(self):
        body = self._register(name='Jane Doe').json()

        response = self.client.get(
            '/api/auth/me',
            headers={'Authorization': f"Bearer {body['token']}"},
        )

        self.assertEqual(response.status_code, 200)
        user = response.json()['user']
        self.assertEqual(user['id'], body['user']['id'])
        self.assertEqual(user['email'], 'a@x.com')
        self.assertEqual(
            user['profileImage'],
            'https://ui-avatars.com/api/?name=Jane%20Doe&background=random',
        )
        _assert_no_password_fields(self, response.json())

    def test_user_gone_is_404(self):
        token = create_access_token('deleted-user', 'gone@x.com')

        response = self.client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {'message': 'User not found'})


if __name__ == '__main__':
    unittest.main()
