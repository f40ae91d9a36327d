# services/student_store.py
"""
CRUD operations over the students collection.

Every operation is awaited to completion and reports its outcome as a
StoreResult; database failures are logged and returned, never raised.
Students are addressed by their external studentTag, except delete_one,
which takes the internal ObjectId.
"""

import logging
from typing import List, Optional
from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError, PyMongoError

from models.result import StoreResult, ok, not_found, invalid, conflict, store_error
from services.course_store import fetch_courses, serialize_course

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

MISSING_TAG_ON_CREATE = (
    "Error - studentTag must be included when using studentsCreate."
    " Also, make sure proper types passed for student attributes."
)
NO_STUDENTS = "No students in collection"


def serialize_student(student: dict, courses_by_id: dict) -> dict:
    return {
        "id": str(student["_id"]),
        "studentTag": student["studentTag"],
        "name": student.get("name", ""),
        "classification": student.get("classification", ""),
        "major": student.get("major", ""),
        "adminStatus": student.get("adminStatus", False),
        # Stored order and duplicates are kept; dangling references are dropped
        "courses": [
            serialize_course(courses_by_id[course_id])
            for course_id in student.get("courses", [])
            if course_id in courses_by_id
        ],
    }


class StudentStore:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    async def _populate(self, students: List[dict]) -> List[dict]:
        course_ids = [c for s in students for c in s.get("courses", [])]
        courses_by_id = await fetch_courses(self.db, course_ids)
        return [serialize_student(s, courses_by_id) for s in students]

    async def create(
        self,
        student_tag: Optional[str],
        name: str = "",
        classification: str = "",
        major: str = "",
        admin_status: bool = False,
        courses: Optional[List[str]] = None,
    ) -> StoreResult:
        """Insert a student. Only the tag is required; the rest default to empty."""
        if not student_tag:
            logger.error(MISSING_TAG_ON_CREATE)
            return invalid(MISSING_TAG_ON_CREATE)

        courses = courses or []
        if not all(ObjectId.is_valid(c) for c in courses):
            logger.error(f"Invalid course id in courses for student {student_tag}: {courses}")
            return invalid("Error - courses must be a list of valid course ids")

        student_dict = {
            "studentTag": student_tag,
            "name": name,
            "classification": classification,
            "major": major,
            "adminStatus": admin_status,
            "courses": [ObjectId(c) for c in courses],
        }
        try:
            result = await self.db.students.insert_one(student_dict)
        except DuplicateKeyError:
            logger.error(f"Student with tag {student_tag} already exists")
            return conflict(f"Student with tag {student_tag} already exists")
        except PyMongoError as e:
            logger.error(f"Error creating student {student_tag}: {str(e)}")
            return store_error(str(e))

        student_dict["_id"] = result.inserted_id
        logger.info(f"Student created: {student_tag} ({result.inserted_id})")
        try:
            created = await self._populate([student_dict])
        except PyMongoError as e:
            # The insert stands; only the course lookup failed
            logger.error(f"Error loading courses for new student {student_tag}: {str(e)}")
            return ok(serialize_student(student_dict, {}), "Student created, courses could not be loaded")
        return ok(created[0])

    async def read_all(self) -> StoreResult:
        """All students, regardless of course, with courses populated."""
        try:
            students = await self.db.students.find().to_list(None)
            populated = await self._populate(students)
        except PyMongoError as e:
            logger.error(f"Error reading students: {str(e)}")
            return store_error(str(e))

        if not populated:
            return ok([], NO_STUDENTS)
        return ok(populated)

    async def read_one(self, student_tag: Optional[str]) -> StoreResult:
        if not student_tag:
            logger.error("Error - Student Tag must be included in studentsReadOne arguments.")
            return invalid("Error - Student Tag must be included in studentsReadOne arguments.")

        try:
            student = await self.db.students.find_one({"studentTag": student_tag})
            if not student:
                logger.warning(f"Error - Cannot find student with tag: {student_tag}")
                return not_found(f"Error - Cannot find student with tag: {student_tag}")
            populated = await self._populate([student])
        except PyMongoError as e:
            logger.error(f"Error reading student {student_tag}: {str(e)}")
            return store_error(str(e))

        return ok(populated[0])

    async def update_one(
        self,
        student_tag: Optional[str],
        new_student_name: str = "",
        new_student_classification: str = "",
        new_student_major: str = "",
        toggle_admin_status: bool = False,
        delete_courses: bool = False,
        course_to_remove_id: str = "",
        course_to_add_id: str = "",
    ) -> StoreResult:
        """
        Apply every supplied change to one student and save it.

        Empty strings and False mean "leave unchanged". toggle_admin_status
        flips the flag, delete_courses empties the course list (the courses
        themselves are untouched), course_to_remove_id drops every matching
        reference and course_to_add_id appends one. A malformed
        course_to_add_id is skipped silently. The read and the save are two
        separate requests; a concurrent update in between is overwritten.
        """
        if not student_tag:
            logger.error("Error - Student Tag must be passed to studentsUpdateOne")
            return invalid("Error - Student Tag must be passed to studentsUpdateOne")

        try:
            student = await self.db.students.find_one({"studentTag": student_tag})
        except PyMongoError as e:
            logger.error(f"Error reading student {student_tag}: {str(e)}")
            return store_error(str(e))
        if not student:
            logger.warning(f"Student {student_tag} does not exist. Cannot update.")
            return not_found("Student does not exist. Cannot update.")

        if new_student_name:
            student["name"] = new_student_name
        if new_student_classification:
            student["classification"] = new_student_classification
        if new_student_major:
            student["major"] = new_student_major
        if toggle_admin_status:
            student["adminStatus"] = not student.get("adminStatus", False)

        courses = list(student.get("courses", []))
        if delete_courses:
            courses = []

        if course_to_remove_id:
            try:
                to_remove = ObjectId(course_to_remove_id)
            except (InvalidId, TypeError):
                logger.error(
                    "Error removing course from student courses - "
                    f"Make sure string of course id passed and valid id: {course_to_remove_id}"
                )
                return invalid("Error removing course from student courses - invalid course id")
            courses = [c for c in courses if c != to_remove]

        if ObjectId.is_valid(course_to_add_id):
            courses.append(ObjectId(course_to_add_id))

        student["courses"] = courses

        try:
            result = await self.db.students.update_one(
                {"_id": student["_id"]},
                {"$set": {
                    "name": student.get("name", ""),
                    "classification": student.get("classification", ""),
                    "major": student.get("major", ""),
                    "adminStatus": student.get("adminStatus", False),
                    "courses": courses,
                }},
            )
            if result.matched_count == 0:
                logger.warning(f"Student {student_tag} was removed before the update was saved")
                return not_found("Student does not exist. Cannot update.")
            populated = await self._populate([student])
        except PyMongoError as e:
            logger.error(f"Error saving student {student_tag}: {str(e)}")
            return store_error(str(e))

        logger.info(f"Student updated: {student_tag}")
        return ok(populated[0])

    async def delete_all(self) -> StoreResult:
        """Deletes all students, regardless of course. Careful using this in production."""
        try:
            result = await self.db.students.delete_many({})
        except PyMongoError as e:
            logger.error(f"Error deleting all students: {str(e)}")
            return store_error(str(e))

        logger.info("All students deleted.")
        return ok({"deletedCount": result.deleted_count})

    async def delete_one(self, student_id: Optional[str]) -> StoreResult:
        """Remove a student by its internal ObjectId."""
        if not ObjectId.is_valid(student_id):
            logger.error("Error - Invalid Student ID passed to studentsDeleteOne")
            return invalid("Error - Invalid Student ID passed to studentsDeleteOne")

        return await self._delete({"_id": ObjectId(student_id)}, student_id)

    async def delete_by_tag(self, student_tag: Optional[str]) -> StoreResult:
        if not student_tag:
            logger.error("Error - Student Tag must be passed to studentsDeleteByTag")
            return invalid("Error - Student Tag must be passed to studentsDeleteByTag")

        return await self._delete({"studentTag": student_tag}, student_tag)

    async def _delete(self, query: dict, key: str) -> StoreResult:
        try:
            deleted = await self.db.students.find_one_and_delete(query)
            if not deleted:
                logger.warning(
                    f"Student {key} doesn't exist. Cannot remove student which doesn't exist."
                )
                return not_found("Student doesn't exist. Cannot remove student which doesn't exist.")
            populated = await self._populate([deleted])
        except PyMongoError as e:
            logger.error(f"Error deleting student {key}: {str(e)}")
            return store_error(str(e))

        logger.info(f"Student Deleted: {key}")
        return ok(populated[0])
