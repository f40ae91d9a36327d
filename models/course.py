# models/course.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional

class Course(BaseModel):
    name: str
    description: str = ""
    grade: str = ""
    isActive: bool = True

class CourseResponse(Course):
    id: str  # ObjectId as string
    createdAt: Optional[datetime] = None
