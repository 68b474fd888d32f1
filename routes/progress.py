# routes/progress.py
from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import List

from database import get_db
from models.progress import Progress, ProgressStats
from .auth import get_current_user

router = APIRouter(prefix="/api/progress", tags=["progress"])

@router.get("/", response_model=List[Progress])
async def get_progress(db: AsyncIOMotorDatabase = Depends(get_db), current_user: dict = Depends(get_current_user)):
    return await db.progress.find({"user": current_user["id"]}).sort("updatedAt", -1).to_list(None)

@router.get("/stats", response_model=ProgressStats)
async def get_stats(db: AsyncIOMotorDatabase = Depends(get_db), current_user: dict = Depends(get_current_user)):
    user_id = current_user["id"]
    completed = await db.progress.find({"user": user_id, "completed": True}).to_list(None)
    total_courses = await db.courses.count_documents({"isPublished": True})
    courses_started = await db.progress.distinct("course", {"user": user_id})

    return {
        "totalCourses": total_courses,
        "coursesStarted": len(courses_started),
        "totalLessonsCompleted": len(completed),
        "totalTimeSpent": sum(p.get("timeSpent", 0) or 0 for p in completed),
    }
