import os
import tempfile
import unittest

from core.errors import StorageError
from core.models import Session
from db import database as db_database
from db import session_store
from db.session_store import SessionStore


class SessionStoreTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        # point the db to a temporary file and force re-initialization
        self.temp_dir = tempfile.TemporaryDirectory()
        self.db_path = os.path.join(self.temp_dir.name, "nested", "session.sqlite")
        db_database.configure(self.db_path)
        self.store = SessionStore()

    def tearDown(self):
        self.temp_dir.cleanup()

    async def test_empty_store_is_logged_out(self):
        session = await self.store.load()
        self.assertEqual(session, Session())
        self.assertTrue(os.path.exists(self.db_path))

    async def test_save_and_load(self):
        saved = Session(token="abc", user={"name": "alice", "roles": ["cashier"]}, selected_location="L01")
        await self.store.save(saved)
        self.assertEqual(await self.store.load(), saved)

    async def test_save_without_location_drops_old_location(self):
        await self.store.save(Session(token="abc", user=None, selected_location="L01"))
        await self.store.save(Session(token="def", user=None))
        loaded = await self.store.load()
        self.assertEqual(loaded.token, "def")
        self.assertIsNone(loaded.selected_location)

    async def test_clear_removes_all_keys(self):
        await self.store.save(Session(token="abc", user={"name": "alice"}, selected_location="L01"))
        await self.store.clear()
        self.assertEqual(await session_store.get_values(), {})
        self.assertEqual(await self.store.load(), Session())

    async def test_bad_user_json_is_ignored(self):
        await session_store.put_values({"token": "abc", "user": "{not json"})
        loaded = await self.store.load()
        self.assertEqual(loaded.token, "abc")
        self.assertIsNone(loaded.user)

    async def test_unopenable_db_raises_storage_error(self):
        # a directory cannot be opened as a database file
        db_database.configure(self.temp_dir.name)
        with self.assertRaises(StorageError):
            await self.store.load()
        with self.assertRaises(StorageError):
            await self.store.save(Session(token="abc"))
        with self.assertRaises(StorageError):
            await self.store.clear()


if __name__ == "__main__":
    unittest.main()
