# routes/errors.py
from fastapi import HTTPException
from models.result import ResultStatus, StoreResult

STATUS_CODES = {
    ResultStatus.INVALID: 400,
    ResultStatus.NOT_FOUND: 404,
    ResultStatus.CONFLICT: 409,
    ResultStatus.STORE_ERROR: 500,
}

def unwrap(result: StoreResult):
    """Return the result's data, or raise the matching HTTPException."""
    if result.succeeded:
        return result.data
    raise HTTPException(status_code=STATUS_CODES[result.status], detail=result.message)
