"""Tests for MongoConnection lifecycle and reconnect behaviour."""

import threading
import unittest
from unittest.mock import MagicMock, patch

from pymongo.errors import ConnectionFailure

from adapter.mongodb.connection import CONNECT_ATTEMPTS, MongoConnection


@patch('tenacity.nap.time.sleep')
@patch('adapter.mongodb.connection.MongoClient')
class TestMongoConnection(unittest.TestCase):

    def test_missing_url(self, mock_client_cls, _sleep):
        connection = MongoConnection(url=None)

        self.assertFalse(connection.connect())
        self.assertIsNone(connection.get_database())
        mock_client_cls.assert_not_called()

    def test_connect_success(self, mock_client_cls, _sleep):
        connection = MongoConnection(url='mongodb://localhost', database_name='testdb')

        self.assertTrue(connection.connect())
        self.assertTrue(connection.connected)
        mock_client_cls.return_value.admin.command.assert_called_with('ping')

    def test_get_database_uses_name(self, mock_client_cls, _sleep):
        connection = MongoConnection(url='mongodb://localhost', database_name='testdb')

        db = connection.get_database()

        self.assertIs(db, mock_client_cls.return_value.__getitem__.return_value)
        mock_client_cls.return_value.__getitem__.assert_called_with('testdb')

    def test_retries_with_backoff_then_succeeds(self, mock_client_cls, mock_sleep):
        failing = MagicMock()
        failing.admin.command.side_effect = ConnectionFailure('down')
        healthy = MagicMock()
        mock_client_cls.side_effect = [failing, failing, healthy]
        connection = MongoConnection(url='mongodb://localhost')

        self.assertTrue(connection.connect())
        self.assertEqual(mock_client_cls.call_count, 3)
        self.assertEqual(mock_sleep.call_count, 2)
        failing.close.assert_called()

    def test_gives_up_after_max_attempts(self, mock_client_cls, _sleep):
        mock_client_cls.return_value.admin.command.side_effect = ConnectionFailure('down')
        connection = MongoConnection(url='mongodb://localhost')

        self.assertFalse(connection.connect())
        self.assertFalse(connection.connected)
        self.assertEqual(mock_client_cls.call_count, CONNECT_ATTEMPTS)

    def test_connect_without_retry_makes_one_attempt(self, mock_client_cls, mock_sleep):
        mock_client_cls.return_value.admin.command.side_effect = ConnectionFailure('down')
        connection = MongoConnection(url='mongodb://localhost')

        self.assertFalse(connection.connect(retry=False))
        self.assertEqual(mock_client_cls.call_count, 1)
        mock_sleep.assert_not_called()

    def test_reconnects_when_cached_client_dies(self, mock_client_cls, _sleep):
        first = MagicMock()
        second = MagicMock()
        mock_client_cls.side_effect = [first, second]
        connection = MongoConnection(url='mongodb://localhost')
        connection.connect()

        first.admin.command.side_effect = ConnectionFailure('lost')
        connection.get_database()

        first.close.assert_called_once()
        self.assertEqual(mock_client_cls.call_count, 2)

    def test_close(self, mock_client_cls, _sleep):
        connection = MongoConnection(url='mongodb://localhost')
        connection.connect()

        connection.close()

        mock_client_cls.return_value.close.assert_called_once()
        self.assertFalse(connection.connected)
        self.assertFalse(connection.ping())


@patch('tenacity.nap.time.sleep')
@patch('adapter.mongodb.connection.MongoClient')
class TestReconnectUnderLoad(unittest.TestCase):

    def _connected_then_lost(self, mock_client_cls):
        stale = MagicMock()
        mock_client_cls.return_value = stale
        connection = MongoConnection(url='mongodb://localhost', database_name='testdb')
        connection.connect()
        stale.admin.command.side_effect = ConnectionFailure('lost')
        mock_client_cls.return_value = MagicMock()
        mock_client_cls.reset_mock()
        return connection, stale

    def test_concurrent_callers_share_one_reconnect(self, mock_client_cls, _sleep):
        connection, stale = self._connected_then_lost(mock_client_cls)
        created = []

        def slow_client(*args, **kwargs):
            # Hold the reconnect open long enough for every caller to queue up.
            threading.Event().wait(0.05)
            client = MagicMock()
            created.append(client)
            return client

        mock_client_cls.side_effect = slow_client
        barrier = threading.Barrier(8)
        results = []

        def call():
            barrier.wait()
            results.append(connection.get_database())

        threads = [threading.Thread(target=call) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(len(created), 1)
        stale.close.assert_called_once()
        created[0].close.assert_not_called()
        self.assertEqual(len(results), 8)
        for db in results:
            self.assertIs(db, created[0].__getitem__.return_value)

    def test_request_path_fails_fast_while_server_is_down(self, mock_client_cls, mock_sleep):
        connection, _ = self._connected_then_lost(mock_client_cls)
        mock_client_cls.return_value.admin.command.side_effect = ConnectionFailure('down')

        self.assertIsNone(connection.get_database())
        self.assertEqual(mock_client_cls.call_count, 1)
        mock_sleep.assert_not_called()
        self.assertFalse(connection.connected)
