import copy
import re
import uuid
from types import SimpleNamespace

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from database import get_db
from main import app
from routes.auth import create_access_token, hash_password


def _matches(doc, query):
    for key, expected in query.items():
        if key == "$or":
            if not any(_matches(doc, clause) for clause in expected):
                return False
            continue
        value = doc.get(key)
        if isinstance(expected, dict) and "$in" in expected:
            if value not in expected["$in"]:
                return False
        elif isinstance(expected, dict) and "$regex" in expected:
            flags = re.IGNORECASE if "i" in expected.get("$options", "") else 0
            if not isinstance(value, str) or not re.search(expected["$regex"], value, flags):
                return False
        elif value != expected:
            return False
    return True


def _sort_key(field):
    def key(doc):
        value = doc.get(field)
        return (value is None, value if value is not None else 0)
    return key


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs
        self._limit = None

    def sort(self, key, direction=1):
        fields = key if isinstance(key, list) else [(key, direction)]
        for field, order in reversed(fields):
            self._docs.sort(key=_sort_key(field), reverse=order == -1)
        return self

    def limit(self, count):
        self._limit = count
        return self

    async def to_list(self, length=None):
        docs = self._docs if self._limit is None else self._docs[: self._limit]
        return [copy.deepcopy(d) for d in docs]


class FakeCollection:
    def __init__(self):
        self.docs = []

    async def find_one(self, query=None):
        for doc in self.docs:
            if _matches(doc, query or {}):
                return copy.deepcopy(doc)
        return None

    def find(self, query=None):
        return FakeCursor([d for d in self.docs if _matches(d, query or {})])

    async def insert_one(self, doc):
        doc.setdefault("_id", ObjectId())
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def update_one(self, query, update, upsert=False):
        for doc in self.docs:
            if _matches(doc, query):
                before = copy.deepcopy(doc)
                self._apply(doc, update)
                return SimpleNamespace(matched_count=1, modified_count=int(before != doc), upserted_id=None)
        if upsert:
            doc = {k: v for k, v in query.items() if not isinstance(v, dict)}
            self._apply(doc, update)
            result = await self.insert_one(doc)
            return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=result.inserted_id)
        return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=None)

    async def count_documents(self, query):
        return len([d for d in self.docs if _matches(d, query)])

    async def distinct(self, key, query=None):
        values = []
        for doc in self.docs:
            if _matches(doc, query or {}) and doc.get(key) not in values:
                values.append(doc.get(key))
        return values

    @staticmethod
    def _apply(doc, update):
        for key, value in update.get("$set", {}).items():
            doc[key] = copy.deepcopy(value)
        for key in update.get("$unset", {}):
            doc.pop(key, None)
        for key, value in update.get("$push", {}).items():
            doc.setdefault(key, []).append(value)
        for key, value in update.get("$addToSet", {}).items():
            values = value["$each"] if isinstance(value, dict) and "$each" in value else [value]
            target = doc.setdefault(key, [])
            target.extend(v for v in values if v not in target)
        for key, value in update.get("$pull", {}).items():
            doc[key] = [v for v in doc.get(key, []) if v != value]
        for key, value in update.get("$inc", {}).items():
            doc[key] = doc.get(key, 0) + value


class FakeDB:
    def __init__(self):
        self._collections = {}

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        return self._collections.setdefault(name, FakeCollection())


@pytest.fixture
def db():
    return FakeDB()


@pytest.fixture
def client(db):
    async def override_get_db():
        return db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _add_user(db, role, group=None):
    user = {
        "id": str(uuid.uuid4()),
        "email": f"{role}-{uuid.uuid4().hex[:8]}@example.com",
        "password": hash_password("password123"),
        "firstName": role.capitalize(),
        "lastName": "Tester",
        "role": role,
        "isActive": True,
        "group": group,
    }
    db.users.docs.append(user)
    headers = {"Authorization": f"Bearer {create_access_token(user['id'], role)}"}
    return user, headers


@pytest.fixture
def student(db):
    return _add_user(db, "student")


@pytest.fixture
def teacher(db):
    return _add_user(db, "teacher")


@pytest.fixture
def admin(db):
    return _add_user(db, "admin")


@pytest.fixture
def restricted_course(db, teacher):
    instructor, _ = teacher
    course = {
        "id": str(uuid.uuid4()),
        "title": "Cisco routing",
        "description": "OSPF and BGP labs",
        "category": "network",
        "level": "advanced",
        "instructor": instructor["id"],
        "lessons": [],
        "enrolledStudents": [],
        "groups": ["haitech"],
        "order": 2,
        "isPublished": True,
    }
    db.courses.docs.append(course)
    return course


@pytest.fixture
def course_doc(db):
    course = {
        "id": str(uuid.uuid4()),
        "title": "Linux administration",
        "description": "Users, services and networking",
        "category": "system-linux",
        "level": "beginner",
        "lessons": [],
        "order": 1,
        "isPublished": True,
    }
    db.courses.docs.append(course)
    return course


@pytest.fixture
def lesson_doc(db, course_doc):
    lesson = {
        "id": str(uuid.uuid4()),
        "title": "systemd units",
        "description": "Managing services",
        "content": "Unit files live in /etc/systemd/system",
        "course": course_doc["id"],
        "order": 1,
        "exercises": [
            {"title": "Write a unit", "type": "practical"},
            {"title": "Read about targets", "type": "theoretical"},
            {"title": "Enable a timer", "type": "practical"},
        ],
        "isPublished": True,
    }
    db.lessons.docs.append(lesson)
    course_doc["lessons"].append(lesson["id"])
    return lesson
