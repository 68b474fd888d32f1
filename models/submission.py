# models/submission.py
from pydantic import BaseModel, Field
from typing import Optional

STATUS_PATTERN = "^(pending|reviewed|approved|rejected)$"
SUBMISSION_STATUSES = {"pending", "reviewed", "approved", "rejected"}

class Submission(BaseModel):
    id: str
    user: str
    course: str
    lesson: str
    exerciseIndex: Optional[int] = None
    fileUrl: str
    fileName: str
    fileSize: int
    status: str = Field("pending", pattern=STATUS_PATTERN)
    grade: Optional[float] = Field(None, ge=0, le=5)
    feedback: Optional[str] = None
    reviewedBy: Optional[str] = None
    reviewedAt: Optional[str] = None
    createdAt: str

class SubmissionCreate(BaseModel):
    lesson: str
    exerciseIndex: int = Field(..., ge=0)
    # The file itself is stored by the upload service; only its location is recorded here
    fileUrl: str
    fileName: str
    fileSize: int = Field(..., ge=0)

class SubmissionReview(BaseModel):
    grade: Optional[float] = Field(None, ge=0, le=5)
    feedback: Optional[str] = None
    status: str = Field("reviewed", pattern=STATUS_PATTERN)
