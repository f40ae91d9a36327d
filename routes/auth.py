# routes/auth.py
from fastapi import APIRouter, HTTPException, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from datetime import datetime, timedelta
from typing import Optional
import logging

from config import JWT_SECRET, JWT_ALGORITHM, JWT_ACCESS_TOKEN_EXPIRES
from database import get_database
from models.result import ResultStatus
from models.student import StudentResponse
from services.student_store import StudentStore

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])
bearer_scheme = HTTPBearer(auto_error=False)

def create_access_token(student_tag: str, expires_delta: Optional[timedelta] = None) -> str:
    """Tokens are minted by the hosting bot; the API only verifies them."""
    payload = {
        "studentTag": student_tag,
        "exp": datetime.utcnow() + (expires_delta or JWT_ACCESS_TOKEN_EXPIRES),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)

async def get_current_student(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db=Depends(get_database),
):
    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        payload = jwt.decode(credentials.credentials, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.error(f"JWTError: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token")

    student_tag = payload.get("studentTag")
    if not student_tag:
        logger.error("Invalid token: Missing studentTag")
        raise HTTPException(status_code=401, detail="Invalid token")

    result = await StudentStore(db).read_one(student_tag)
    if result.status == ResultStatus.NOT_FOUND:
        raise HTTPException(status_code=401, detail="Student not found")
    if not result.succeeded:
        raise HTTPException(status_code=500, detail=result.message)
    return result.data

async def get_optional_student(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db=Depends(get_database),
):
    """The caller when a token is sent, None for anonymous requests."""
    if credentials is None:
        return None
    return await get_current_student(credentials, db)

async def require_admin(current_student: dict = Depends(get_current_student)):
    if not current_student["adminStatus"]:
        logger.warning(f"Admin action refused for student: {current_student['studentTag']}")
        raise HTTPException(status_code=403, detail="Only admins can perform this action")
    return current_student

@router.get("/current-student", response_model=StudentResponse)
async def get_current_student_endpoint(current_student: dict = Depends(get_current_student)):
    return current_student
