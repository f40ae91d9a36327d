# tests/conftest.py
import pytest
from mongomock_motor import AsyncMongoMockClient
from pymongo.errors import ServerSelectionTimeoutError

from database import init_db


@pytest.fixture
async def db():
    client = AsyncMongoMockClient()
    database = client["student_records_test"]
    await init_db(database)
    return database


class BrokenCursor:
    async def to_list(self, length):
        raise ServerSelectionTimeoutError("No servers available")


class BrokenCollection:
    """Collection whose every call fails as if MongoDB were unreachable."""

    def find(self, *args, **kwargs):
        return BrokenCursor()

    def __getattr__(self, name):
        async def fail(*args, **kwargs):
            raise ServerSelectionTimeoutError("No servers available")
        return fail


class BrokenDatabase:
    students = BrokenCollection()
    courses = BrokenCollection()


@pytest.fixture
def broken_db():
    return BrokenDatabase()


class VanishingStudents:
    """Removes the student right after it is read, as a concurrent delete would."""

    def __init__(self, students):
        self.students = students

    async def find_one(self, *args, **kwargs):
        student = await self.students.find_one(*args, **kwargs)
        if student:
            await self.students.delete_one({"_id": student["_id"]})
        return student

    def __getattr__(self, name):
        return getattr(self.students, name)


class SplitDatabase:
    def __init__(self, students, courses):
        self.students = students
        self.courses = courses
