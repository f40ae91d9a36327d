# routes/courses.py
from fastapi import APIRouter, Depends
from typing import List

from database import get_database
from models.course import Course, CourseResponse
from services.course_store import CourseStore
from .auth import require_admin
from .errors import unwrap

router = APIRouter(prefix="/api/courses", tags=["courses"])

def get_course_store(db=Depends(get_database)) -> CourseStore:
    return CourseStore(db)

@router.post("/", response_model=CourseResponse, status_code=201)
async def create_course(course: Course, store: CourseStore = Depends(get_course_store), admin: dict = Depends(require_admin)):
    return unwrap(await store.create(course))

@router.get("/", response_model=List[CourseResponse])
async def get_courses(store: CourseStore = Depends(get_course_store)):
    return unwrap(await store.read_all())

@router.get("/{id}", response_model=CourseResponse)
async def get_course(id: str, store: CourseStore = Depends(get_course_store)):
    return unwrap(await store.read_one(id))
