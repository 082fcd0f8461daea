"""
Shared fixtures for DAO tests
"""

import pytest
from unittest.mock import MagicMock
from bson import ObjectId
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult


class FakeCollection:
    """In-memory collection supporting equality filters and ``$set`` updates"""

    def __init__(self, name):
        self.name = name
        self.documents = []

    @staticmethod
    def _matches(doc, filter_doc):
        return all(doc.get(key) == value for key, value in filter_doc.items())

    def insert_one(self, doc):
        stored = dict(doc)
        stored.setdefault('_id', ObjectId())
        self.documents.append(stored)
        return InsertOneResult(stored['_id'], True)

    def find_one(self, filter_doc):
        for doc in self.documents:
            if self._matches(doc, filter_doc):
                return dict(doc)
        return None

    def update_one(self, filter_doc, update):
        for doc in self.documents:
            if self._matches(doc, filter_doc):
                before = dict(doc)
                doc.update(update['$set'])
                return UpdateResult({'n': 1, 'nModified': int(doc != before)}, True)
        return UpdateResult({'n': 0, 'nModified': 0}, True)

    def delete_one(self, filter_doc):
        for index, doc in enumerate(self.documents):
            if self._matches(doc, filter_doc):
                del self.documents[index]
                return DeleteResult({'n': 1}, True)
        return DeleteResult({'n': 0}, True)


class FakeDatabase:
    """Database stand-in handing out one FakeCollection per name"""

    def __init__(self):
        self.collections = {}

    def __getitem__(self, name):
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]


@pytest.fixture
def mock_db():
    """Create mock database with a distinct mock per collection"""
    db = MagicMock()
    collections = {}

    def get_collection(name):
        if name not in collections:
            collections[name] = MagicMock(name=name)
        return collections[name]

    db.__getitem__.side_effect = get_collection
    return db


@pytest.fixture
def fake_db():
    """Create in-memory database"""
    return FakeDatabase()
