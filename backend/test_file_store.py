"""
FileUserStore: bootstrap, recovery and the snapshot-per-mutation cycle.
Run: pytest backend/test_file_store.py
"""

import asyncio
import json
import logging

import pytest

from repositories import FileUserStore, StoreNotReadyError, StoreWriteError


def read_snapshot(path):
    return json.loads(path.read_text(encoding="utf-8"))


def test_fresh_directory_bootstraps_empty_snapshot(tmp_path):
    path = tmp_path / "server" / "data" / "users.json"

    async def scenario():
        store = await FileUserStore.open(path)
        assert store.ready
        assert store.load_error is None
        assert await store.list_users() == []

    asyncio.run(scenario())
    assert path.exists()
    assert read_snapshot(path) == []


def test_default_path_is_under_data_in_working_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    store = FileUserStore()
    assert store.path == tmp_path / "data" / "users.json"


def test_duplicate_ids_in_file_last_one_wins(tmp_path):
    path = tmp_path / "users.json"
    path.write_text(
        json.dumps([
            {"id": "dup", "username": "first", "password": "a"},
            {"id": "other", "username": "kim", "password": "b"},
            {"id": "dup", "username": "second", "password": "c"},
        ]),
        encoding="utf-8",
    )

    async def scenario():
        store = await FileUserStore.open(path)
        users = await store.list_users()
        assert sorted(u.id for u in users) == ["dup", "other"]
        assert (await store.get_user("dup")).username == "second"

    asyncio.run(scenario())


def test_snapshot_reload_gives_same_collection(tmp_path):
    path = tmp_path / "users.json"

    async def write_some():
        store = await FileUserStore.open(path)
        a = await store.create_user({"username": "lena", "password": "h", "secret": "s1"})
        b = await store.create_user({"username": "mo", "password": "h2"})
        await store.create_user({"username": "nia"})
        await store.update_user(b.id, {"password": "h3"})
        await store.delete_user(a.id)
        return {u.id: u.model_dump() for u in await store.list_users()}

    async def reload():
        store = await FileUserStore.open(path)
        return {u.id: u.model_dump() for u in await store.list_users()}

    before = asyncio.run(write_some())
    after = asyncio.run(reload())
    assert after == before
    assert {u["id"]: u for u in read_snapshot(path)} == before


def test_every_mutation_rewrites_the_snapshot(tmp_path):
    path = tmp_path / "users.json"

    async def scenario():
        store = await FileUserStore.open(path)
        user = await store.create_user({"username": "olga", "password": "p"})
        assert read_snapshot(path) == [{"id": user.id, "username": "olga", "password": "p"}]

        await store.update_user(user.id, {"password": "q"})
        assert read_snapshot(path)[0]["password"] == "q"

        await store.delete_user(user.id)
        assert read_snapshot(path) == []

    asyncio.run(scenario())
    raw = path.read_text(encoding="utf-8")
    assert raw == "[]"


def test_snapshot_is_pretty_printed(tmp_path):
    path = tmp_path / "users.json"

    async def scenario():
        store = await FileUserStore.open(path)
        await store.create_user({"username": "pia"})

    asyncio.run(scenario())
    assert path.read_text(encoding="utf-8").startswith('[\n  {\n    "id": ')


def test_corrupt_file_degrades_to_empty_store(tmp_path, caplog):
    path = tmp_path / "users.json"
    path.write_text("{not json", encoding="utf-8")

    async def scenario():
        with caplog.at_level(logging.WARNING, logger="repositories.file_store"):
            store = await FileUserStore.open(path)
        assert store.ready
        assert store.load_error is not None
        assert store.describe()["degraded"] is True
        assert await store.list_users() == []
        # still usable
        user = await store.create_user({"username": "quinn"})
        assert await store.get_user(user.id) is not None

    asyncio.run(scenario())
    assert "starting with an empty store" in caplog.text


@pytest.mark.parametrize(
    "content",
    [
        '{"id": "x", "username": "not-a-list"}',
        '[{"username": "missing-id"}]',
        "[1, 2, 3]",
    ],
)
def test_wrong_shape_degrades_to_empty_store(tmp_path, content):
    path = tmp_path / "users.json"
    path.write_text(content, encoding="utf-8")

    async def scenario():
        store = await FileUserStore.open(path)
        assert isinstance(store.load_error, ValueError)
        assert await store.list_users() == []

    asyncio.run(scenario())


def test_deeply_nested_json_degrades_to_empty_store(tmp_path):
    path = tmp_path / "users.json"
    path.write_text("[" * 200000 + "]" * 200000, encoding="utf-8")

    async def scenario():
        store = await FileUserStore.open(path)
        assert store.ready
        assert isinstance(store.load_error, RecursionError)
        assert await store.list_users() == []

    asyncio.run(scenario())


def test_first_write_after_degraded_load_replaces_unreadable_file(tmp_path):
    path = tmp_path / "users.json"
    path.write_text("{not json", encoding="utf-8")

    async def scenario():
        store = await FileUserStore.open(path)
        assert store.load_error is not None
        return await store.create_user({"username": "tess", "password": "p"})

    user = asyncio.run(scenario())
    assert read_snapshot(path) == [{"id": user.id, "username": "tess", "password": "p"}]


def test_failed_replace_leaves_no_temp_file(tmp_path):
    # a directory where the snapshot should be: reads and replaces both fail
    path = tmp_path / "users.json"
    path.mkdir()

    async def scenario():
        store = await FileUserStore.open(path)
        assert store.load_error is not None
        with pytest.raises(StoreWriteError):
            await store.create_user({"username": "uma"})

    asyncio.run(scenario())
    assert not (tmp_path / "users.tmp").exists()
    assert path.is_dir()


def test_unreadable_location_degrades_instead_of_crashing(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory", encoding="utf-8")

    async def scenario():
        store = await FileUserStore.open(blocker / "users.json")
        assert store.ready
        assert isinstance(store.load_error, OSError)
        assert await store.list_users() == []

    asyncio.run(scenario())


def test_operations_before_load_raise(tmp_path):
    store = FileUserStore(tmp_path / "users.json")
    assert not store.ready

    async def scenario():
        with pytest.raises(StoreNotReadyError):
            await store.list_users()
        with pytest.raises(StoreNotReadyError):
            await store.create_user({"username": "early"})

    asyncio.run(scenario())
    assert not (tmp_path / "users.json").exists()


def test_load_runs_once(tmp_path, monkeypatch):
    path = tmp_path / "users.json"
    path.write_text('[{"id": "1", "username": "ruth"}]', encoding="utf-8")
    store = FileUserStore(path)
    calls = []
    original = store._read_snapshot

    def counting_read():
        calls.append(1)
        return original()

    monkeypatch.setattr(store, "_read_snapshot", counting_read)

    async def scenario():
        await asyncio.gather(store.load(), store.load(), store.load())
        await store.load()
        assert len(await store.list_users()) == 1

    asyncio.run(scenario())
    assert len(calls) == 1


def test_write_failure_propagates_to_caller(tmp_path, monkeypatch):
    path = tmp_path / "users.json"

    async def scenario():
        store = await FileUserStore.open(path)

        def disk_full(payload):
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(store, "_write", disk_full)
        with pytest.raises(StoreWriteError) as excinfo:
            await store.create_user({"username": "sam"})
        assert isinstance(excinfo.value.__cause__, OSError)
        # memory already holds the record; disk does not
        assert [u.username for u in await store.list_users()] == ["sam"]

    asyncio.run(scenario())
    assert read_snapshot(path) == []


def test_concurrent_mutations_converge_on_disk(tmp_path):
    path = tmp_path / "users.json"

    async def scenario():
        store = await FileUserStore.open(path)
        users = await asyncio.gather(
            *(store.create_user({"username": f"c{i}"}) for i in range(30))
        )
        await asyncio.gather(
            *(store.update_user(u.id, {"password": "set"}) for u in users[:10]),
            *(store.delete_user(u.id) for u in users[20:]),
        )
        return {u.id: u.model_dump() for u in await store.list_users()}

    in_memory = asyncio.run(scenario())
    on_disk = {u["id"]: u for u in read_snapshot(path)}
    assert on_disk == in_memory
    assert len(on_disk) == 20
