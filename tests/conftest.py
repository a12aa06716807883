"""
Pytest configuration and fixtures for the course AI tests.
"""

import os

# Settings are read at import time; give them a complete environment first.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("ALLOWED_ORIGIN", "http://localhost:5173")
os.environ.setdefault("RATE_LIMIT_TIMES", "1000")
os.environ.setdefault("RATE_LIMIT_SECONDS", "60")
os.environ.setdefault("ANTHROPIC_API_URL", "https://api.anthropic.test/v1/messages")
os.environ.setdefault("ANTHROPIC_API_KEY", "test-key")
os.environ.setdefault("ANTHROPIC_MODEL", "claude-test")

import asyncio
import re
import zipfile
import zlib
from typing import Dict, List

import numpy as np
import pytest
from docx import Document
from redis.exceptions import ConnectionError as RedisConnectionError

from config.settings import settings
from core import embeddings
from repository import course_document_repository, course_index_repository

EMBED_DIM = 256


class FakeEncoder:
    """Bag-of-words hashing encoder with the SentenceTransformer.encode signature."""

    def encode(
        self,
        sentences,
        batch_size=32,
        convert_to_numpy=True,
        normalize_embeddings=False,
        **kwargs,
    ):
        out = np.zeros((len(sentences), EMBED_DIM), dtype=np.float32)
        for row, text in enumerate(sentences):
            for tok in re.findall(r"\w+", text.lower()):
                out[row, zlib.crc32(tok.encode("utf-8")) % EMBED_DIM] += 1.0
        if normalize_embeddings:
            norms = np.linalg.norm(out, axis=1, keepdims=True)
            norms[norms == 0] = 1.0
            out = out / norms
        return out


class FakeRedis:
    """In-memory stand-in for the handful of redis.asyncio calls the repositories make."""

    def __init__(self) -> None:
        self.hashes: Dict[str, Dict[bytes, bytes]] = {}
        self.lists: Dict[str, List[bytes]] = {}
        self.fail = False
        self.hset_calls = 0

    async def _io(self) -> None:
        # Yield to the loop like a real network round trip would.
        await asyncio.sleep(0)
        if self.fail:
            raise RedisConnectionError("redis down")

    @staticmethod
    def _b(v) -> bytes:
        return v if isinstance(v, bytes) else str(v).encode("utf-8")

    async def ping(self) -> bool:
        await self._io()
        return True

    async def hgetall(self, key: str) -> Dict[bytes, bytes]:
        await self._io()
        return dict(self.hashes.get(key, {}))

    async def hset(self, key: str, mapping: Dict) -> int:
        await self._io()
        self.hset_calls += 1
        h = self.hashes.setdefault(key, {})
        h.update({self._b(k): self._b(v) for k, v in mapping.items()})
        return len(mapping)

    async def rpush(self, key: str, *values) -> int:
        await self._io()
        lst = self.lists.setdefault(key, [])
        lst.extend(self._b(v) for v in values)
        return len(lst)

    async def lrange(self, key: str, start: int, end: int) -> List[bytes]:
        await self._io()
        lst = self.lists.get(key, [])
        return list(lst[start:] if end == -1 else lst[start : end + 1])

    async def llen(self, key: str) -> int:
        await self._io()
        return len(self.lists.get(key, []))


@pytest.fixture(autouse=True)
def fake_embedder(monkeypatch):
    """Every test embeds with the deterministic FakeEncoder instead of a real model."""
    encoder = FakeEncoder()
    monkeypatch.setattr(embeddings, "_load_model", lambda: encoder)
    return encoder


@pytest.fixture
def fake_redis(monkeypatch):
    client = FakeRedis()

    async def _get_redis():
        return client

    monkeypatch.setattr(course_index_repository, "get_redis", _get_redis)
    monkeypatch.setattr(course_document_repository, "get_redis", _get_redis)
    return client


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(path))
    return path

@pytest.fixture
def broken_docx(tmp_path):
    """A valid .docx package whose main part is not well-formed XML."""
    source = tmp_path / "source.docx"
    document = Document()
    document.add_paragraph("placeholder")
    document.save(str(source))

    path = tmp_path / "broken.docx"
    with zipfile.ZipFile(source) as src, zipfile.ZipFile(path, "w") as dst:
        for item in src.infolist():
            data = src.read(item.filename)
            if item.filename == "word/document.xml":
                data = b"<w:document><unclosed>"
            dst.writestr(item, data)
    return path
