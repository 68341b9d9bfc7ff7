import itertools
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from growgraph.backend import MindMapBackend
from growgraph.mindmap_store import MindMapStore
from server import create_app


class FakeChatLlm:
    """Returns queued responses; an Exception in the queue is raised instead."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def invoke(self, messages, *, temperature=0.7, max_tokens=1024):
        self.calls.append({"messages": messages, "temperature": temperature, "max_tokens": max_tokens})
        if not self.responses:
            raise AssertionError("FakeChatLlm ran out of responses")
        resp = self.responses.pop(0)
        if isinstance(resp, Exception):
            raise resp
        return resp


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data
        self.exists = data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class FakeCollection:
    def __init__(self, docs, ids):
        self._docs = docs
        self._ids = ids

    def add(self, data):
        doc_id = f"doc{next(self._ids)}"
        self._docs[doc_id] = dict(data)
        return "update-time", SimpleNamespace(id=doc_id)

    def stream(self):
        return [FakeSnapshot(k, v) for k, v in self._docs.items()]

    def document(self, doc_id):
        return SimpleNamespace(get=lambda: FakeSnapshot(doc_id, self._docs.get(doc_id)))


class FakeFirestore:
    def __init__(self):
        self.collections = {}
        self._ids = itertools.count(1)

    def collection(self, name):
        return FakeCollection(self.collections.setdefault(name, {}), self._ids)


class BrokenFirestore:
    def collection(self, name):
        raise RuntimeError("firestore unavailable")


@pytest.fixture
def broken_firestore():
    return BrokenFirestore()


@pytest.fixture
def fake_firestore():
    return FakeFirestore()


@pytest.fixture
def make_client(fake_firestore):
    def _make(*responses, firestore=None):
        llm = FakeChatLlm(*responses)
        store = MindMapStore(firestore or fake_firestore)
        client = TestClient(create_app(MindMapBackend(llm, store)))
        client.llm = llm
        return client

    return _make
