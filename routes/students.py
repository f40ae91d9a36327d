# routes/students.py
from fastapi import APIRouter, HTTPException, Depends
from typing import List, Optional
import logging

from database import get_database
from models.student import StudentCreate, StudentUpdate, StudentResponse
from services.student_store import StudentStore
from .auth import get_current_student, get_optional_student, require_admin
from .errors import unwrap

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/students", tags=["students"])

def get_student_store(db=Depends(get_database)) -> StudentStore:
    return StudentStore(db)

@router.post("/", response_model=StudentResponse, status_code=201)
async def create_student(
    student: StudentCreate,
    store: StudentStore = Depends(get_student_store),
    current_student: Optional[dict] = Depends(get_optional_student),
):
    logger.info(f"Creating student: {student.studentTag}")
    if student.adminStatus and not (current_student and current_student["adminStatus"]):
        logger.warning(f"Refused admin creation of {student.studentTag}")
        raise HTTPException(status_code=403, detail="Only admins can create admin students")
    result = await store.create(
        student.studentTag,
        name=student.name,
        classification=student.classification,
        major=student.major,
        admin_status=student.adminStatus,
        courses=student.courses,
    )
    return unwrap(result)

@router.get("/", response_model=List[StudentResponse])
async def get_students(store: StudentStore = Depends(get_student_store)):
    return unwrap(await store.read_all())

@router.get("/{student_tag}", response_model=StudentResponse)
async def get_student(student_tag: str, store: StudentStore = Depends(get_student_store)):
    return unwrap(await store.read_one(student_tag))

@router.put("/{student_tag}", response_model=StudentResponse)
async def update_student(
    student_tag: str,
    update: StudentUpdate,
    store: StudentStore = Depends(get_student_store),
    current_student: dict = Depends(get_current_student),
):
    logger.info(f"Updating student {student_tag} with data: {update.dict()}, current_student: {current_student['studentTag']}")
    is_admin = current_student["adminStatus"]
    if current_student["studentTag"] != student_tag and not is_admin:
        raise HTTPException(status_code=403, detail="Students can only update their own record")
    if update.toggleAdminStatus and not is_admin:
        raise HTTPException(status_code=403, detail="Only admins can change admin status")
    result = await store.update_one(
        student_tag,
        new_student_name=update.newStudentName,
        new_student_classification=update.newStudentClassification,
        new_student_major=update.newStudentMajor,
        toggle_admin_status=update.toggleAdminStatus,
        delete_courses=update.deleteCourses,
        course_to_remove_id=update.courseToRemoveId,
        course_to_add_id=update.courseToAddId,
    )
    return unwrap(result)

@router.delete("/")
async def delete_students(store: StudentStore = Depends(get_student_store), admin: dict = Depends(require_admin)):
    logger.info(f"Deleting all students, current_student: {admin['studentTag']}")
    data = unwrap(await store.delete_all())
    return {"message": "All students deleted.", **data}

@router.delete("/id/{student_id}", response_model=StudentResponse)
async def delete_student_by_id(student_id: str, store: StudentStore = Depends(get_student_store), admin: dict = Depends(require_admin)):
    logger.info(f"Deleting student with id {student_id}, current_student: {admin['studentTag']}")
    return unwrap(await store.delete_one(student_id))

@router.delete("/{student_tag}", response_model=StudentResponse)
async def delete_student(student_tag: str, store: StudentStore = Depends(get_student_store), admin: dict = Depends(require_admin)):
    logger.info(f"Deleting student {student_tag}, current_student: {admin['studentTag']}")
    return unwrap(await store.delete_by_tag(student_tag))
