# routes/lessons.py
from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import List, Optional
from datetime import datetime
import logging
import uuid

from database import get_db
from models.lesson import Lesson, LessonCreate, LessonUpdate, CompleteLessonRequest
from services.completion_gate import outstanding_exercises
from .auth import get_current_user, require_roles

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/lessons", tags=["lessons"])

def progress_response(progress: dict) -> dict:
    return {
        "user": progress["user"],
        "course": progress["course"],
        "lesson": progress["lesson"],
        "completed": progress.get("completed", False),
        "completedAt": progress.get("completedAt"),
        "timeSpent": progress.get("timeSpent", 0),
    }

@router.get("/", response_model=List[Lesson])
async def get_lessons(course: Optional[str] = None, db: AsyncIOMotorDatabase = Depends(get_db)):
    query = {"isPublished": True}
    if course:
        query["course"] = course
    return await db.lessons.find(query).sort("order", 1).to_list(None)

@router.get("/{id}", response_model=Lesson)
async def get_lesson(id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    lesson = await db.lessons.find_one({"id": id})
    if not lesson:
        raise HTTPException(status_code=404, detail="Lesson not found")
    if not lesson.get("isPublished", False):
        raise HTTPException(status_code=403, detail="Lesson is not available")
    return lesson

@router.post("/", response_model=Lesson, status_code=201)
async def create_lesson(lesson: LessonCreate, db: AsyncIOMotorDatabase = Depends(get_db), current_user: dict = Depends(require_roles("teacher", "admin"))):
    course = await db.courses.find_one({"id": lesson.course})
    if not course:
        raise HTTPException(404, "Course not found")

    lesson_dict = lesson.model_dump()
    if lesson_dict["order"] is None:
        last = await db.lessons.find({"course": lesson.course}).sort("order", -1).limit(1).to_list(None)
        lesson_dict["order"] = last[0]["order"] + 1 if last else 1
    lesson_dict["id"] = str(uuid.uuid4())
    lesson_dict["createdAt"] = datetime.utcnow().isoformat()
    lesson_dict["updatedAt"] = datetime.utcnow().isoformat()

    await db.lessons.insert_one(lesson_dict)
    await db.courses.update_one({"id": lesson.course}, {"$push": {"lessons": lesson_dict["id"]}})
    logger.info(f"Lesson {lesson_dict['id']} added to course {lesson.course} by {current_user['id']}")
    return lesson_dict

@router.put("/{id}", response_model=Lesson)
async def update_lesson(id: str, lesson: LessonUpdate, db: AsyncIOMotorDatabase = Depends(get_db), current_user: dict = Depends(require_roles("teacher", "admin"))):
    existing = await db.lessons.find_one({"id": id})
    if not existing:
        raise HTTPException(404, "Lesson not found")

    updates = lesson.model_dump(exclude_none=True)
    updates["updatedAt"] = datetime.utcnow().isoformat()
    await db.lessons.update_one({"id": id}, {"$set": updates})
    logger.info(f"Lesson {id} updated by {current_user['id']}: {sorted(updates)}")
    return await db.lessons.find_one({"id": id})

@router.post("/{id}/complete")
async def complete_lesson(id: str, request: Optional[CompleteLessonRequest] = None, db: AsyncIOMotorDatabase = Depends(get_db), current_user: dict = Depends(get_current_user)):
    lesson_doc = await db.lessons.find_one({"id": id})
    if not lesson_doc:
        raise HTTPException(status_code=404, detail="Lesson not found")
    lesson = Lesson.model_validate(lesson_doc)
    if not await db.courses.find_one({"id": lesson.course}):
        raise HTTPException(status_code=404, detail="Course not found")

    user_id = current_user["id"]
    submissions = await db.submissions.find(
        {"user": user_id, "course": lesson.course, "lesson": id}
    ).to_list(None)
    # Any submission counts, whatever its review status
    submitted = {s["exerciseIndex"] for s in submissions if s.get("exerciseIndex") is not None}

    missing = outstanding_exercises(lesson.exercises, submitted)
    if missing:
        numbers = ", ".join(str(i + 1) for i in missing)
        logger.warning(f"User {user_id} tried to complete lesson {id} with practical exercises outstanding: {missing}")
        return JSONResponse(status_code=400, content={
            "detail": f"All practical exercises must be submitted before completing the lesson. Outstanding exercises: {numbers}",
            "missingExercises": missing,
        })

    key = {"user": user_id, "course": lesson.course, "lesson": id}
    already_completed = await db.progress.find_one({**key, "completed": True})
    now = datetime.utcnow().isoformat()
    await db.progress.update_one(
        key,
        {"$set": {
            "completed": True,
            "completedAt": now,
            "timeSpent": request.timeSpent if request else 0,
            "updatedAt": now,
        }},
        upsert=True,
    )
    if not already_completed:
        logger.info(f"User {user_id} completed lesson {id} for the first time")

    return progress_response(await db.progress.find_one(key))

@router.get("/{id}/progress")
async def get_lesson_progress(id: str, db: AsyncIOMotorDatabase = Depends(get_db), current_user: dict = Depends(get_current_user)):
    progress = await db.progress.find_one({"user": current_user["id"], "lesson": id})
    if not progress:
        return {"completed": False}
    return progress_response(progress)
