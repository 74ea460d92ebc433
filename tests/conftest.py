# tests/conftest.py
from __future__ import annotations

import json
from collections.abc import Iterator
from typing import Any, Dict, List, Optional, Tuple, Union

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.main import app as fastapi_app
from app.main import get_oracle, get_policy, get_store
from greeter.core.policy import GreetingPolicy

GREETING = "🌙 Eid Mubarak to the whole family! ✨"


class InMemoryStore:
    """KeyValueStore double with expiry driven by a manual clock."""

    def __init__(self) -> None:
        self.now = 0.0
        self.values: Dict[str, Tuple[str, Optional[float]]] = {}
        self.lists: Dict[str, List[str]] = {}
        self.writes: List[Tuple[str, str]] = []

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def ttl(self, key: str) -> Optional[float]:
        _, expires_at = self.values[key]
        return None if expires_at is None else expires_at - self.now

    def get(self, key: str) -> Optional[str]:
        item = self.values.get(key)
        if item is None:
            return None
        value, expires_at = item
        if expires_at is not None and expires_at <= self.now:
            del self.values[key]
            return None
        return value

    def set(self, key: str, value: Union[str, int], ex: Optional[int] = None) -> None:
        self.writes.append(("set", key))
        expires_at = self.now + ex if ex is not None else None
        self.values[key] = (str(value), expires_at)

    def incr(self, key: str) -> int:
        self.writes.append(("incr", key))
        current = self.get(key)
        _, expires_at = self.values.get(key, (None, None))
        new_value = int(current or 0) + 1
        self.values[key] = (str(new_value), expires_at)
        return new_value

    def lpush(self, key: str, value: str) -> int:
        self.writes.append(("lpush", key))
        self.lists.setdefault(key, []).insert(0, value)
        return len(self.lists[key])

    def entries(self, key: str) -> List[Dict[str, Any]]:
        return [json.loads(raw) for raw in self.lists.get(key, [])]


class FakeOracle:
    """Returns scripted replies and records every call."""

    def __init__(self, reply: Optional[str] = GREETING) -> None:
        self.reply = reply
        self.calls: List[Tuple[List[dict], str]] = []

    def generate(self, history: List[dict], prompt: str) -> Optional[str]:
        self.calls.append((history, prompt))
        return self.reply


class ExplodingOracle:
    def generate(self, history: List[dict], prompt: str) -> Optional[str]:
        raise ConnectionError("upstream unreachable")


@pytest.fixture()
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture()
def oracle() -> FakeOracle:
    return FakeOracle()


@pytest.fixture()
def policy() -> GreetingPolicy:
    return GreetingPolicy()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI, store: InMemoryStore, oracle: FakeOracle, policy: GreetingPolicy
) -> Iterator[None]:
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_oracle] = lambda: oracle
    app.dependency_overrides[get_policy] = lambda: policy
    try:
        yield
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        test_client.headers.update({"x-forwarded-for": "203.0.113.7", "user-agent": "pytest-agent"})
        yield test_client


@pytest.fixture()
def client_id() -> str:
    return "203.0.113.7:pytest-agent"
