"""In-memory stand-ins for the async MongoDB collection API used by the services."""

import copy
from dataclasses import dataclass
from typing import Any

from pymongo.errors import DuplicateKeyError


@dataclass
class InsertResult:
    inserted_id: Any


@dataclass
class UpdateResult:
    matched_count: int
    modified_count: int


@dataclass
class DeleteResult:
    deleted_count: int


def _matches_condition(value: Any, condition: Any) -> bool:
    if isinstance(condition, dict) and condition and all(key.startswith("$") for key in condition):
        for op, operand in condition.items():
            if op == "$gt":
                if value is None or not value > operand:
                    return False
            elif op == "$lte":
                if value is None or not value <= operand:
                    return False
            elif op == "$type":
                if operand != "string" or not isinstance(value, str):
                    return False
            else:
                raise NotImplementedError(op)
        return True
    return bool(value == condition)


def matches(document: dict[str, Any], query: dict[str, Any]) -> bool:
    return all(_matches_condition(document.get(key), condition) for key, condition in query.items())


class FakeCursor:
    def __init__(self, documents: list[dict[str, Any]]) -> None:
        self._documents = documents

    def sort(self, key: str, direction: int = 1) -> "FakeCursor":
        self._documents.sort(key=lambda d: d.get(key), reverse=direction < 0)
        return self

    def skip(self, count: int) -> "FakeCursor":
        self._documents = self._documents[count:]
        return self

    def limit(self, count: int) -> "FakeCursor":
        self._documents = self._documents[:count]
        return self

    def __aiter__(self) -> "FakeCursor":
        self._iter = iter(self._documents)
        return self

    async def __anext__(self) -> dict[str, Any]:
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration from None


class FakeCollection:
    def __init__(self, name: str) -> None:
        self.name = name
        self.documents: list[dict[str, Any]] = []
        self.unique_fields: list[str] = []

    async def create_index(self, keys: list[tuple[str, int]], unique: bool = False, **_: Any) -> str:
        if unique:
            self.unique_fields.extend(field for field, _direction in keys)
        return "_".join(field for field, _direction in keys)

    async def insert_one(self, document: dict[str, Any]) -> InsertResult:
        for field in self.unique_fields:
            value = document.get(field)
            if value is not None and any(existing.get(field) == value for existing in self.documents):
                raise DuplicateKeyError(f"E11000 duplicate key error: {field}", 11000, {"keyPattern": {field: 1}})
        self.documents.append(copy.deepcopy(document))
        return InsertResult(inserted_id=document.get("_id"))

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        for document in self.documents:
            if matches(document, query):
                return copy.deepcopy(document)
        return None

    def find(self, query: dict[str, Any] | None = None) -> FakeCursor:
        return FakeCursor([copy.deepcopy(d) for d in self.documents if matches(d, query or {})])

    async def count_documents(self, query: dict[str, Any]) -> int:
        return sum(1 for d in self.documents if matches(d, query))

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]) -> UpdateResult:
        for document in self.documents:
            if matches(document, query):
                document.update(copy.deepcopy(update["$set"]))
                return UpdateResult(matched_count=1, modified_count=1)
        return UpdateResult(matched_count=0, modified_count=0)

    async def delete_one(self, query: dict[str, Any]) -> DeleteResult:
        for index, document in enumerate(self.documents):
            if matches(document, query):
                del self.documents[index]
                return DeleteResult(deleted_count=1)
        return DeleteResult(deleted_count=0)

    async def delete_many(self, query: dict[str, Any]) -> DeleteResult:
        kept = [d for d in self.documents if not matches(d, query)]
        deleted = len(self.documents) - len(kept)
        self.documents = kept
        return DeleteResult(deleted_count=deleted)


class FakeDatabase:
    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]
