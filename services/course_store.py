# services/course_store.py
import logging
from datetime import datetime
from typing import Dict, List, Optional
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from models.course import Course
from models.result import StoreResult, ok, not_found, invalid, store_error

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def serialize_course(course: dict) -> dict:
    return {
        "id": str(course["_id"]),
        "name": course.get("name", ""),
        "description": course.get("description", ""),
        "grade": course.get("grade", ""),
        "isActive": course.get("isActive", True),
        "createdAt": course.get("createdAt"),
    }


async def fetch_courses(db: AsyncIOMotorDatabase, course_ids: List[ObjectId]) -> Dict[ObjectId, dict]:
    """Load the referenced courses in one query, keyed by ObjectId."""
    if not course_ids:
        return {}
    courses = await db.courses.find({"_id": {"$in": list(set(course_ids))}}).to_list(None)
    return {c["_id"]: c for c in courses}


class CourseStore:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    async def create(self, course: Course) -> StoreResult:
        course_dict = course.dict()
        course_dict["createdAt"] = datetime.utcnow()
        try:
            result = await self.db.courses.insert_one(course_dict)
        except PyMongoError as e:
            logger.error(f"Error creating course {course.name}: {str(e)}")
            return store_error(str(e))
        course_dict["_id"] = result.inserted_id
        logger.info(f"Course created: {result.inserted_id}")
        return ok(serialize_course(course_dict))

    async def read_all(self) -> StoreResult:
        try:
            courses = await self.db.courses.find().to_list(None)
        except PyMongoError as e:
            logger.error(f"Error reading courses: {str(e)}")
            return store_error(str(e))
        return ok([serialize_course(c) for c in courses])

    async def read_one(self, course_id: Optional[str]) -> StoreResult:
        if not ObjectId.is_valid(course_id):
            logger.error(f"Invalid course id: {course_id}")
            return invalid("Error - Invalid Course ID")
        try:
            course = await self.db.courses.find_one({"_id": ObjectId(course_id)})
        except PyMongoError as e:
            logger.error(f"Error reading course {course_id}: {str(e)}")
            return store_error(str(e))
        if not course:
            logger.warning(f"Course not found for id: {course_id}")
            return not_found(f"Cannot find course with id: {course_id}")
        return ok(serialize_course(course))
