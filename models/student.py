# models/student.py
from pydantic import BaseModel
from typing import List, Optional
from .course import CourseResponse

class Student(BaseModel):
    studentTag: str
    name: str = ""
    classification: str = ""  # Academic year, e.g. "Sophomore"
    major: str = ""
    adminStatus: bool = False
    courses: List[str] = []  # Course ObjectIds as strings

class StudentCreate(Student):
    # Left optional so a missing tag is reported by the store, not the validator
    studentTag: Optional[str] = None

class StudentUpdate(BaseModel):
    newStudentName: str = ""
    newStudentClassification: str = ""
    newStudentMajor: str = ""
    toggleAdminStatus: bool = False
    deleteCourses: bool = False  # Clears the reference list, not the courses
    courseToRemoveId: str = ""
    courseToAddId: str = ""

class StudentResponse(BaseModel):
    id: str
    studentTag: str
    name: str = ""
    classification: str = ""
    major: str = ""
    adminStatus: bool = False
    courses: List[CourseResponse] = []
