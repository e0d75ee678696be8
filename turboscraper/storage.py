"""Storage backends that persist scraped items to disk or MongoDB."""

import abc
import asyncio
import json
import os
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union
from urllib.parse import urlsplit

from bson.errors import BSONError
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from .errors import IoError, JsonError, StorageError


def uuid7() -> uuid.UUID:
    """A time-ordered UUID: 48 bits of Unix milliseconds followed by random bits."""
    millis = (time.time_ns() // 1_000_000) & ((1 << 48) - 1)
    rand = int.from_bytes(os.urandom(10), "big")
    rand_a = (rand >> 68) & 0xFFF
    rand_b = rand & ((1 << 62) - 1)
    value = (millis << 80) | (0x7 << 76) | (rand_a << 64) | (0b10 << 62) | rand_b
    return uuid.UUID(int=value)


def _utc(timestamp: datetime) -> datetime:
    return timestamp.astimezone(timezone.utc)


def _rfc3339(timestamp: datetime, zulu: bool = True) -> str:
    text = _utc(timestamp).isoformat()
    return text.replace("+00:00", "Z") if zulu else text


@dataclass
class StorageItem:
    """A scraped item with the URL it came from and when it was scraped."""

    url: str
    timestamp: datetime
    data: Any
    metadata: Any = None


@dataclass
class DiskConfig:
    """Where a disk backend writes items of one collection."""

    subfolder: Optional[str] = None
    filename_prefix: Optional[str] = None


@dataclass
class MongoConfig:
    """The MongoDB collection that receives items."""

    collection: str


class StorageBackend(abc.ABC):
    """Persists storage items."""

    @abc.abstractmethod
    def create_config(self, collection_name: str) -> Any:
        """A backend configuration for the named collection."""

    @abc.abstractmethod
    async def store(self, item: StorageItem, config: Any) -> Any:
        """Persist ``item`` according to ``config``."""


class DiskStorage(StorageBackend):
    """Writes each item as a pretty-printed JSON file below a base directory."""

    def __init__(self, base_path: Union[str, os.PathLike]) -> None:
        self.base_path = Path(base_path)
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise IoError(exc) from exc

    def create_config(self, collection_name: str) -> DiskConfig:
        return DiskConfig(subfolder=collection_name)

    @staticmethod
    def _write(path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")

    async def store(self, item: StorageItem, config: Any) -> Path:
        """Write ``item`` and return the path of the file written."""
        if not isinstance(config, DiskConfig):
            raise TypeError("Invalid config type")

        directory = self.base_path
        if config.subfolder is not None:
            directory = directory / config.subfolder
        host = urlsplit(str(item.url)).hostname or "unknown"
        stamp = _utc(item.timestamp).strftime("%Y%m%d_%H%M%S")
        filename = f"{config.filename_prefix or ''}{stamp}_{uuid7()}.json"
        path = directory / host / filename

        payload = {
            "url": str(item.url),
            "timestamp": _rfc3339(item.timestamp),
            "data": item.data,
            "metadata": item.metadata,
        }
        try:
            text = json.dumps(payload, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise JsonError(exc) from exc
        try:
            await asyncio.to_thread(self._write, path, text)
        except OSError as exc:
            raise IoError(exc) from exc
        return path


class MongoStorage(StorageBackend):
    """Inserts each item as a document into a MongoDB collection."""

    def __init__(self, database: Any) -> None:
        self.db = database

    @classmethod
    def from_uri(cls, uri: str, database: str) -> "MongoStorage":
        """Connect to the server at ``uri`` and use the named database."""
        try:
            client: MongoClient = MongoClient(uri)
        except PyMongoError as exc:
            raise StorageError(exc) from exc
        return cls(client[database])

    def create_config(self, collection_name: str) -> MongoConfig:
        return MongoConfig(collection=collection_name)

    async def store(self, item: StorageItem, config: Any) -> None:
        if not isinstance(config, MongoConfig):
            raise TypeError("Invalid config type")
        document = {
            "url": str(item.url),
            "timestamp": _rfc3339(item.timestamp, zulu=False),
            "data": item.data,
            "metadata": item.metadata,
        }
        try:
            collection = self.db[config.collection]
            await asyncio.to_thread(collection.insert_one, document)
        except (PyMongoError, BSONError) as exc:
            raise StorageError(exc) from exc


@dataclass(frozen=True)
class DiskStorageSpec:
    """Selects disk storage below ``path``."""

    path: str


@dataclass(frozen=True)
class MongoStorageSpec:
    """Selects MongoDB storage in ``database`` on the server at ``uri``."""

    uri: str
    database: str


async def create_storage(spec: Union[DiskStorageSpec, MongoStorageSpec]) -> StorageBackend:
    """Build the storage backend that ``spec`` describes."""
    if isinstance(spec, DiskStorageSpec):
        return DiskStorage(spec.path)
    if isinstance(spec, MongoStorageSpec):
        return await asyncio.to_thread(MongoStorage.from_uri, spec.uri, spec.database)
    raise TypeError(f"unknown storage spec: {spec!r}")