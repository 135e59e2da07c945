"""Unit tests for API dependencies: get_user_repo() dependency injection."""

import unittest
from unittest.mock import patch, MagicMock

from fastapi.testclient import TestClient

from api.main import app
from api.dependencies import get_user_repo
from adapter.mongodb.user_repository import MongoUserRepository
from domain.model.errors import StorageError


class TestGetUserRepo(unittest.TestCase):

    @patch('api.dependencies.get_mongodb_client')
    def test_returns_mongo_repository_when_connected(self, mock_get_client):
        mock_get_client.return_value = MagicMock()

        repo = get_user_repo()

        self.assertIsInstance(repo, MongoUserRepository)
        mock_get_client.assert_called_once()

    @patch('api.dependencies.get_mongodb_client')
    def test_raises_storage_error_when_mongodb_unavailable(self, mock_get_client):
        mock_get_client.return_value = None

        with self.assertRaises(StorageError) as context:
            get_user_repo()

        self.assertEqual(str(context.exception), "Database unavailable")

    @patch('api.dependencies.get_mongodb_client')
    def test_unreachable_database_is_500_server_error(self, mock_get_client):
        mock_get_client.return_value = None
        client = TestClient(app)

        response = client.post('/api/auth/register', json={
            'name': 'A', 'email': 'a@x.com', 'password': 'secret1',
        })

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {'message': 'Server error'})

    @patch('api.dependencies.get_database')
    @patch('api.dependencies.get_mongodb_client')
    def test_passes_db_to_mongo_repository(self, mock_get_client, mock_get_database):
        mock_db = MagicMock()
        mock_get_client.return_value = MagicMock()
        mock_get_database.return_value = mock_db

        with patch('api.dependencies.MongoUserRepository') as mock_repo_class:
            get_user_repo()
            mock_repo_class.assert_called_once_with(mock_db)

    @patch('api.dependencies.get_mongodb_client')
    def test_returns_protocol_compatible_object(self, mock_get_client):
        mock_get_client.return_value = MagicMock()

        repo = get_user_repo()

        for method in ['create', 'get_by_email', 'get_by_id', 'update']:
            self.assertTrue(
                hasattr(repo, method),
                f"MongoUserRepository missing protocol method: {method}"
            )


if __name__ == '__main__':
    unittest.main()
