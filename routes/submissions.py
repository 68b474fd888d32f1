# routes/submissions.py
from fastapi import APIRouter, HTTPException, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from bson import ObjectId
from typing import List, Optional
from datetime import datetime
import logging

from database import get_db
from models.submission import Submission, SubmissionCreate, SubmissionReview, SUBMISSION_STATUSES
from .auth import get_current_user, require_roles

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/submissions", tags=["submissions"])

@router.post("/", response_model=Submission, status_code=201)
async def create_submission(submission: SubmissionCreate, db: AsyncIOMotorDatabase = Depends(get_db), current_user: dict = Depends(get_current_user)):
    lesson = await db.lessons.find_one({"id": submission.lesson})
    if not lesson:
        raise HTTPException(404, "Lesson not found")
    if submission.exerciseIndex >= len(lesson.get("exercises", [])):
        raise HTTPException(400, f"Lesson has no exercise {submission.exerciseIndex + 1}")

    submission_dict = submission.model_dump()
    submission_dict.update({
        "id": str(ObjectId()),
        "user": current_user["id"],
        "course": lesson["course"],
        "status": "pending",
        "createdAt": datetime.utcnow().isoformat(),
    })
    await db.submissions.insert_one(submission_dict)
    logger.info(f"Submission {submission_dict['id']} for exercise {submission.exerciseIndex} of lesson {submission.lesson} by {current_user['id']}")
    return submission_dict

@router.get("/", response_model=List[Submission])
async def get_my_submissions(lesson: Optional[str] = None, db: AsyncIOMotorDatabase = Depends(get_db), current_user: dict = Depends(get_current_user)):
    query = {"user": current_user["id"]}
    if lesson:
        query["lesson"] = lesson
    return await db.submissions.find(query).sort("createdAt", -1).to_list(None)

@router.get("/review", response_model=List[Submission])
async def get_submissions_for_review(
    status: Optional[str] = None,
    course: Optional[str] = None,
    lesson: Optional[str] = None,
    db: AsyncIOMotorDatabase = Depends(get_db),
    current_user: dict = Depends(require_roles("teacher", "admin"))
):
    query = {}
    if status:
        if status not in SUBMISSION_STATUSES:
            raise HTTPException(400, f"Invalid status. Must be one of {', '.join(sorted(SUBMISSION_STATUSES))}")
        query["status"] = status
    if course:
        query["course"] = course
    if lesson:
        query["lesson"] = lesson
    return await db.submissions.find(query).sort("createdAt", -1).to_list(None)

@router.put("/{id}/review", response_model=Submission)
async def review_submission(id: str, review: SubmissionReview, db: AsyncIOMotorDatabase = Depends(get_db), current_user: dict = Depends(require_roles("teacher", "admin"))):
    updates = {
        "status": review.status,
        "reviewedBy": current_user["id"],
        "reviewedAt": datetime.utcnow().isoformat(),
    }
    if review.grade is not None:
        updates["grade"] = review.grade
    if review.feedback:
        updates["feedback"] = review.feedback.strip()

    result = await db.submissions.update_one({"id": id}, {"$set": updates})
    if result.matched_count == 0:
        raise HTTPException(404, "Submission not found")
    logger.info(f"Submission {id} reviewed by {current_user['id']}: status={review.status}, grade={review.grade}")
    return await db.submissions.find_one({"id": id})
