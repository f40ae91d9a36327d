# tests/test_student_store.py
import logging
from bson import ObjectId

from models.result import ResultStatus
from services.course_store import CourseStore
from services.student_store import StudentStore, MISSING_TAG_ON_CREATE, NO_STUDENTS
from models.course import Course
from tests.conftest import BrokenCollection, SplitDatabase, VanishingStudents


async def make_course(db, name="Calculus I"):
    result = await CourseStore(db).create(Course(name=name, description="Limits and derivatives", grade="Freshman"))
    return result.data["id"]


async def test_create_without_tag_is_invalid_and_writes_nothing(db):
    store = StudentStore(db)
    result = await store.create(None, name="Nobody")

    assert result.status == ResultStatus.INVALID
    assert result.message == MISSING_TAG_ON_CREATE
    assert await db.students.count_documents({}) == 0


async def test_create_with_only_tag_uses_defaults(db):
    result = await StudentStore(db).create("t1")

    assert result.succeeded
    student = result.data
    assert student["studentTag"] == "t1"
    assert student["name"] == ""
    assert student["classification"] == ""
    assert student["major"] == ""
    assert student["adminStatus"] is False
    assert student["courses"] == []
    assert ObjectId.is_valid(student["id"])


async def test_create_duplicate_tag_is_conflict(db):
    store = StudentStore(db)
    await store.create("t1", name="Ann")
    result = await store.create("t1", name="Other Ann")

    assert result.status == ResultStatus.CONFLICT
    assert await db.students.count_documents({}) == 1


async def test_create_with_malformed_course_is_invalid(db):
    result = await StudentStore(db).create("t1", courses=["not-an-id"])

    assert result.status == ResultStatus.INVALID
    assert await db.students.count_documents({}) == 0


async def test_create_then_read_one(db):
    store = StudentStore(db)
    await store.create("t1", name="Ann")
    result = await store.read_one("t1")

    assert result.succeeded
    assert result.data["name"] == "Ann"
    assert result.data["adminStatus"] is False
    assert len(result.data["courses"]) == 0


async def test_read_one_populates_courses_in_stored_order(db):
    first = await make_course(db, "Calculus I")
    second = await make_course(db, "Physics I")
    store = StudentStore(db)
    await store.create("t1", name="Ann", classification="Sophomore", major="Math", courses=[second, first, second])

    result = await store.read_one("t1")

    assert result.succeeded
    assert result.data["classification"] == "Sophomore"
    assert result.data["major"] == "Math"
    assert [c["name"] for c in result.data["courses"]] == ["Physics I", "Calculus I", "Physics I"]


async def test_read_one_drops_missing_course_references(db):
    kept = await make_course(db)
    store = StudentStore(db)
    await store.create("t1", courses=[kept, str(ObjectId())])

    result = await store.read_one("t1")

    assert [c["id"] for c in result.data["courses"]] == [kept]


async def test_read_one_without_tag_is_invalid(db, caplog):
    with caplog.at_level(logging.ERROR):
        result = await StudentStore(db).read_one("")

    assert result.status == ResultStatus.INVALID
    assert "Student Tag must be included" in caplog.text


async def test_read_one_unknown_tag_is_not_found(db):
    result = await StudentStore(db).read_one("missing")

    assert result.status == ResultStatus.NOT_FOUND
    assert result.data is None


async def test_read_all_empty_collection(db):
    result = await StudentStore(db).read_all()

    assert result.succeeded
    assert result.data == []
    assert result.message == NO_STUDENTS


async def test_read_all_populates_every_student(db):
    course_id = await make_course(db)
    store = StudentStore(db)
    await store.create("t1", name="Ann", courses=[course_id])
    await store.create("t2", name="Ben")

    result = await store.read_all()

    assert result.succeeded
    by_tag = {s["studentTag"]: s for s in result.data}
    assert set(by_tag) == {"t1", "t2"}
    assert by_tag["t1"]["courses"][0]["name"] == "Calculus I"
    assert by_tag["t2"]["courses"] == []


async def test_update_applies_only_supplied_fields(db):
    store = StudentStore(db)
    await store.create("t1", name="Ann", classification="Freshman", major="Biology")

    result = await store.update_one("t1", new_student_name="", new_student_major="Chemistry")

    assert result.succeeded
    stored = (await store.read_one("t1")).data
    assert stored["name"] == "Ann"
    assert stored["classification"] == "Freshman"
    assert stored["major"] == "Chemistry"


async def test_toggle_admin_status_twice_restores_value(db):
    store = StudentStore(db)
    await store.create("t1")

    await store.update_one("t1", toggle_admin_status=True)
    assert (await store.read_one("t1")).data["adminStatus"] is True

    await store.update_one("t1", toggle_admin_status=True)
    assert (await store.read_one("t1")).data["adminStatus"] is False


async def test_delete_courses_empties_list(db):
    first = await make_course(db)
    second = await make_course(db, "Physics I")
    store = StudentStore(db)
    await store.create("t1", courses=[first, second])

    result = await store.update_one("t1", delete_courses=True)

    assert result.data["courses"] == []
    assert (await db.students.find_one({"studentTag": "t1"}))["courses"] == []


async def test_add_and_remove_course(db):
    first = await make_course(db)
    second = await make_course(db, "Physics I")
    store = StudentStore(db)
    await store.create("t1", courses=[first, first])

    await store.update_one("t1", course_to_add_id=second)
    result = await store.update_one("t1", course_to_remove_id=first)

    assert [c["id"] for c in result.data["courses"]] == [second]


async def test_add_malformed_course_leaves_courses_unchanged(db):
    course_id = await make_course(db)
    store = StudentStore(db)
    await store.create("t1", courses=[course_id])

    result = await store.update_one("t1", course_to_add_id="12345")

    assert result.succeeded
    assert [c["id"] for c in result.data["courses"]] == [course_id]


async def test_remove_malformed_course_is_invalid_and_nothing_saved(db):
    store = StudentStore(db)
    await store.create("t1", name="Ann")

    result = await store.update_one("t1", new_student_name="Changed", course_to_remove_id="bogus")

    assert result.status == ResultStatus.INVALID
    assert (await store.read_one("t1")).data["name"] == "Ann"


async def test_update_unknown_student_is_not_found(db):
    result = await StudentStore(db).update_one("missing", new_student_name="Ann")

    assert result.status == ResultStatus.NOT_FOUND


async def test_update_without_tag_is_invalid(db):
    result = await StudentStore(db).update_one(None, new_student_name="Ann")

    assert result.status == ResultStatus.INVALID


async def test_delete_all(db, caplog):
    store = StudentStore(db)
    await store.create("t1")
    await store.create("t2")

    with caplog.at_level(logging.INFO):
        result = await store.delete_all()

    assert result.succeeded
    assert result.data == {"deletedCount": 2}
    assert "All students deleted." in caplog.text
    assert await db.students.count_documents({}) == 0


async def test_delete_one_by_internal_id(db):
    store = StudentStore(db)
    created = (await store.create("t1", name="Ann")).data

    result = await store.delete_one(created["id"])

    assert result.succeeded
    assert result.data["studentTag"] == "t1"
    assert (await store.read_one("t1")).status == ResultStatus.NOT_FOUND


async def test_delete_one_malformed_id_removes_nothing(db, caplog):
    store = StudentStore(db)
    await store.create("t1")

    with caplog.at_level(logging.ERROR):
        result = await store.delete_one("t1")

    assert result.status == ResultStatus.INVALID
    assert "Invalid Student ID" in caplog.text
    assert await db.students.count_documents({}) == 1


async def test_delete_one_unknown_id_logs_missing(db, caplog):
    store = StudentStore(db)
    await store.create("t1")

    with caplog.at_level(logging.WARNING):
        result = await store.delete_one(str(ObjectId()))

    assert result.status == ResultStatus.NOT_FOUND
    assert "doesn't exist" in caplog.text
    assert await db.students.count_documents({}) == 1


async def test_delete_by_tag(db):
    store = StudentStore(db)
    await store.create("t1")
    await store.create("t2")

    result = await store.delete_by_tag("t1")

    assert result.succeeded
    assert (await store.delete_by_tag("t1")).status == ResultStatus.NOT_FOUND
    assert await db.students.count_documents({}) == 1


async def test_store_failures_are_reported_not_raised(broken_db, caplog):
    store = StudentStore(broken_db)

    with caplog.at_level(logging.ERROR):
        results = [
            await store.create("t1"),
            await store.read_all(),
            await store.read_one("t1"),
            await store.update_one("t1", new_student_name="Ann"),
            await store.delete_all(),
            await store.delete_one(str(ObjectId())),
            await store.delete_by_tag("t1"),
        ]

    assert all(r.status == ResultStatus.STORE_ERROR for r in results)
    assert "No servers available" in caplog.text


async def test_update_of_student_removed_mid_update_is_not_found(db):
    await StudentStore(db).create("t1", name="Ann")
    store = StudentStore(SplitDatabase(VanishingStudents(db.students), db.courses))

    result = await store.update_one("t1", new_student_name="Changed")

    assert result.status == ResultStatus.NOT_FOUND
    assert await db.students.count_documents({}) == 0


async def test_create_reports_insert_when_course_lookup_fails(db):
    course_id = await make_course(db)
    store = StudentStore(SplitDatabase(db.students, BrokenCollection()))

    result = await store.create("t1", courses=[course_id])

    assert result.succeeded
    assert result.data["studentTag"] == "t1"
    assert result.data["courses"] == []
    assert await db.students.count_documents({"studentTag": "t1"}) == 1
