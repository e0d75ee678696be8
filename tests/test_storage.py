import json
import re
import time
import uuid
from datetime import datetime, timezone

import pytest
from pymongo.errors import OperationFailure

from turboscraper.errors import StorageError
from turboscraper.storage import (
    DiskConfig,
    DiskStorage,
    DiskStorageSpec,
    MongoConfig,
    MongoStorage,
    MongoStorageSpec,
    StorageItem,
    create_storage,
    uuid7,
)

FIXED = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


class FakeCollection:
    def __init__(self):
        self.docs = []

    def insert_one(self, doc):
        self.docs.append(doc)


class FailingCollection:
    def insert_one(self, doc):
        raise OperationFailure("boom")


class FakeDatabase(dict):
    def __missing__(self, key):
        collection = FakeCollection()
        self[key] = collection
        return collection


def test_uuid7_version_and_variant():
    value = uuid7()
    assert value.version == 7
    assert value.variant == uuid.RFC_4122


def test_uuid7_embeds_current_time():
    before = time.time_ns() // 1_000_000
    value = uuid7()
    after = time.time_ns() // 1_000_000
    assert before <= value.int >> 80 <= after


def test_uuid7_values_are_unique():
    values = {uuid7() for _ in range(200)}
    assert len(values) == 200


def test_disk_storage_creates_base_directory(tmp_path):
    base = tmp_path / "a" / "b"
    DiskStorage(base)
    assert base.is_dir()


def test_disk_create_config_uses_subfolder(tmp_path):
    config = DiskStorage(tmp_path).create_config("books")
    assert config == DiskConfig(subfolder="books", filename_prefix=None)


@pytest.mark.asyncio
async def test_disk_store_writes_json(tmp_path):
    storage = DiskStorage(tmp_path)
    config = storage.create_config("books")
    item = StorageItem(
        url="https://example.com/page",
        timestamp=FIXED,
        data={"title": "Book"},
        metadata={"depth": 1},
    )
    path = await storage.store(item, config)

    assert path.parent == tmp_path / "books" / "example.com"
    assert path.name.startswith("20240102_030405_")
    assert re.fullmatch(r"\d{8}_\d{6}_[0-9a-f-]{36}\.json", path.name)

    content = json.loads(path.read_text(encoding="utf-8"))
    assert content["url"] == "https://example.com/page"
    assert content["timestamp"] == "2024-01-02T03:04:05Z"
    assert content["data"] == {"title": "Book"}
    assert content["metadata"] == {"depth": 1}


@pytest.mark.asyncio
async def test_disk_store_prefix_and_no_subfolder(tmp_path):
    storage = DiskStorage(tmp_path)
    item = StorageItem(url="https://example.com/", timestamp=FIXED, data=[1, 2])
    path = await storage.store(item, DiskConfig(filename_prefix="pre_"))
    assert path.parent == tmp_path / "example.com"
    assert path.name.startswith("pre_")
    assert json.loads(path.read_text(encoding="utf-8"))["metadata"] is None


@pytest.mark.asyncio
async def test_disk_store_rejects_wrong_config(tmp_path):
    storage = DiskStorage(tmp_path)
    item = StorageItem(url="https://example.com/", timestamp=FIXED, data={})
    with pytest.raises(TypeError):
        await storage.store(item, MongoConfig(collection="books"))


@pytest.mark.asyncio
async def test_mongo_store_inserts_document():
    db = FakeDatabase()
    storage = MongoStorage(db)
    config = storage.create_config("books")
    assert config == MongoConfig(collection="books")

    item = StorageItem(url="https://example.com/x", timestamp=FIXED, data={"a": 1})
    await storage.store(item, config)

    [doc] = db["books"].docs
    assert doc["url"] == "https://example.com/x"
    assert doc["timestamp"] == FIXED.isoformat()
    assert doc["data"] == {"a": 1}
    assert doc["metadata"] is None


@pytest.mark.asyncio
async def test_mongo_store_wraps_driver_errors():
    storage = MongoStorage({"books": FailingCollection()})
    item = StorageItem(url="https://example.com/x", timestamp=FIXED, data={})
    with pytest.raises(StorageError):
        await storage.store(item, MongoConfig(collection="books"))


@pytest.mark.asyncio
async def test_mongo_store_rejects_wrong_config():
    storage = MongoStorage(FakeDatabase())
    item = StorageItem(url="https://example.com/x", timestamp=FIXED, data={})
    with pytest.raises(TypeError):
        await storage.store(item, DiskConfig())


@pytest.mark.asyncio
async def test_create_storage_disk(tmp_path):
    target = tmp_path / "data"
    storage = await create_storage(DiskStorageSpec(str(target)))
    assert isinstance(storage, DiskStorage)
    assert storage.base_path == target
    assert target.is_dir()


@pytest.mark.asyncio
async def test_create_storage_bad_mongo_uri():
    with pytest.raises(StorageError):
        await create_storage(MongoStorageSpec("not-a-uri", "book_scraper"))


@pytest.mark.asyncio
async def test_create_storage_unknown_spec():
    with pytest.raises(TypeError):
        await create_storage("disk")