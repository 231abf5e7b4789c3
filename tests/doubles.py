"""Тестовые двойники удалённого хранилища и клиента Supabase"""

import asyncio
from types import SimpleNamespace

from database.remote_store import InMemoryRecordStore


class FlakyRecordStore(InMemoryRecordStore):
    """Хранилище в памяти, которое падает по запросу и считает вызовы"""

    def __init__(self, records=None):
        super().__init__(records)
        self.fail_list = False
        self.fail_insert = False
        self.fail_update = False
        self.fail_delete = False
        self.delay = 0
        self.calls = []
        self.tokens = []

    def authorize(self, access_token):
        if access_token:
            self.tokens.append(access_token)

    async def list(self, owner_id):
        self.calls.append(("list", owner_id))
        await asyncio.sleep(self.delay)
        if self.fail_list:
            raise ConnectionError("list failed")
        return await super().list(owner_id)

    async def insert(self, record):
        self.calls.append(("insert", record["name"]))
        if self.fail_insert:
            raise ConnectionError("insert failed")
        return await super().insert(record)

    async def update(self, identity, record):
        self.calls.append(("update", identity))
        if self.fail_update:
            raise ConnectionError("update failed")
        await super().update(identity, record)

    async def delete(self, identity):
        self.calls.append(("delete", identity))
        await asyncio.sleep(self.delay)
        if self.fail_delete:
            raise ConnectionError("delete failed")
        await super().delete(identity)

    def count(self, operation):
        return sum(1 for call in self.calls if call[0] == operation)


# ===== SUPABASE =====

class FakeQuery:
    """Цепочка table().select().eq()... с записью шагов"""

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.steps = []

    def _step(self, name, *args, **kwargs):
        self.steps.append((name, args, kwargs))
        return self

    def select(self, *args, **kwargs):
        return self._step("select", *args, **kwargs)

    def insert(self, *args, **kwargs):
        return self._step("insert", *args, **kwargs)

    def update(self, *args, **kwargs):
        return self._step("update", *args, **kwargs)

    def delete(self, *args, **kwargs):
        return self._step("delete", *args, **kwargs)

    def eq(self, *args, **kwargs):
        return self._step("eq", *args, **kwargs)

    def order(self, *args, **kwargs):
        return self._step("order", *args, **kwargs)

    def execute(self):
        self.client.queries.append(self)
        data = self.client.results.pop(0) if self.client.results else []
        return SimpleNamespace(data=data)


class FakePostgrest:
    def __init__(self, client):
        self.client = client

    def auth(self, token):
        self.client.tokens.append(token)


def auth_response(user_id="user-1", email="runner@example.com",
                  access_token="access-1", refresh_token="refresh-1", confirmed=True):
    session = None
    if confirmed:
        session = SimpleNamespace(access_token=access_token, refresh_token=refresh_token)
    return SimpleNamespace(user=SimpleNamespace(id=user_id, email=email), session=session)


class FakeAuthAdmin:
    def __init__(self, auth):
        self._auth = auth

    def sign_out(self, jwt, scope="global"):
        self._auth.calls.append(("admin.sign_out", jwt))


class FakeAuth:
    def __init__(self):
        self.calls = []
        self.admin = FakeAuthAdmin(self)
        self.response = auth_response()
        self.error = None

    def _call(self, name, *args):
        self.calls.append((name,) + args)
        if self.error is not None:
            raise self.error
        return self.response

    def sign_up(self, credentials):
        return self._call("sign_up", credentials["email"])

    def sign_in_with_password(self, credentials):
        return self._call("sign_in_with_password", credentials["email"])

    def get_user(self, jwt=None):
        return self._call("get_user", jwt)

    def reset_password_for_email(self, email, options=None):
        return self._call("reset_password_for_email", email, options)

    def set_session(self, access_token, refresh_token):
        return self._call("set_session", access_token, refresh_token)

    def update_user(self, attributes):
        return self._call("update_user", attributes)

    def sign_out(self, options=None):
        return self._call("sign_out")


class FakeSupabaseClient:
    """Минимальный клиент Supabase: таблицы, postgrest.auth и auth"""

    def __init__(self, results=None):
        self.queries = []
        self.tokens = []
        self.results = list(results or [])
        self.postgrest = FakePostgrest(self)
        self.auth = FakeAuth()

    def table(self, name):
        return FakeQuery(self, name)


class FakeClientFactory:
    """Фабрика клиентов, запоминающая каждый созданный клиент"""

    def __init__(self):
        self.clients = []

    def __call__(self):
        client = FakeSupabaseClient()
        self.clients.append(client)
        return client
