import asyncio
import tempfile
import unittest
from datetime import date
from pathlib import Path

from dashboard import dependencies
from database.preferences import PreferenceStore
from services.auth import AuthUser, LocalAuthProvider
from tests.doubles import FlakyRecordStore


class TestWorkspaces(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.stores = {}

        def store_for(access_token):
            store = FlakyRecordStore()
            store.delay = 0.01
            store.authorize(access_token)
            self.stores.setdefault(access_token, []).append(store)
            return store

        dependencies.init_components(
            auth_provider=LocalAuthProvider(),
            preferences=PreferenceStore(Path(self._tmp.name) / "prefs.json"),
            clock=lambda: date(2026, 10, 19),
            record_store_factory=store_for,
        )

    async def asyncTearDown(self) -> None:
        await dependencies.close_workspaces()
        dependencies.reset_state()
        self._tmp.cleanup()

    async def test_concurrent_first_requests_share_one_workspace(self) -> None:
        user = AuthUser(id="u1")

        first, second = await asyncio.gather(
            dependencies.load_workspace(user, "token-a"),
            dependencies.load_workspace(user, "token-a"),
        )

        self.assertIs(first, second)
        self.assertEqual(len(self.stores["token-a"]), 1)
        self.assertEqual(self.stores["token-a"][0].count("list"), 1)

    async def test_each_user_gets_store_bound_to_own_token(self) -> None:
        alice = await dependencies.load_workspace(AuthUser(id="alice"), "token-alice")
        bob = await dependencies.load_workspace(AuthUser(id="bob"), "token-bob")

        self.assertIsNot(alice.store.record_store, bob.store.record_store)
        self.assertEqual(alice.store.record_store.tokens, ["token-alice"])
        self.assertEqual(bob.store.record_store.tokens, ["token-bob"])

    async def test_new_token_rebinds_existing_workspace(self) -> None:
        user = AuthUser(id="u1")
        workspace = await dependencies.load_workspace(user, "token-old")
        again = await dependencies.load_workspace(user, "token-new")

        self.assertIs(workspace, again)
        self.assertEqual(workspace.store.record_store.tokens[-1], "token-new")


if __name__ == "__main__":
    unittest.main(verbosity=2)
