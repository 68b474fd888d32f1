# routes/courses.py
from fastapi import APIRouter, HTTPException, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import List, Optional
from datetime import datetime
import logging
import uuid

from database import get_db
from models.course import CourseCreate, CourseUpdate, CourseResponse
from models.progress import CourseProgress
from models.user import VALID_GROUPS
from services.course_access import can_view_course
from services.quiz_grader import percentage
from .auth import get_current_user, get_optional_user, require_roles

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/courses", tags=["courses"])

def check_groups(groups):
    unknown = sorted(set(groups or []) - VALID_GROUPS)
    if unknown:
        raise HTTPException(400, f"Unknown groups: {', '.join(unknown)}")

@router.get("/", response_model=List[CourseResponse])
async def get_courses(
    category: Optional[str] = None,
    level: Optional[str] = None,
    db: AsyncIOMotorDatabase = Depends(get_db),
    current_user: Optional[dict] = Depends(get_optional_user)
):
    query = {"isPublished": True}
    if category:
        query["category"] = category
    if level:
        query["level"] = level
    courses = await db.courses.find(query).sort("order", 1).to_list(None)
    return [course for course in courses if can_view_course(course, current_user)]

@router.get("/{id}")
async def get_course(id: str, db: AsyncIOMotorDatabase = Depends(get_db), current_user: Optional[dict] = Depends(get_optional_user)):
    course = await db.courses.find_one({"id": id})
    if not course:
        raise HTTPException(404, "Course not found")
    if not course.get("isPublished", False):
        raise HTTPException(403, "Course is not available")
    if not can_view_course(course, current_user):
        if current_user is None:
            raise HTTPException(403, "Sign in to access this course")
        logger.warning(f"User {current_user['id']} denied access to course {id}")
        raise HTTPException(403, "You are not enrolled in this course. Ask your teacher to enroll you.")

    lessons = await db.lessons.find({"course": id, "isPublished": True}).sort("order", 1).to_list(None)
    response = CourseResponse.model_validate(course).model_dump()
    response["lessons"] = [
        {
            "id": lesson["id"],
            "title": lesson["title"],
            "order": lesson.get("order", 0),
            "duration": lesson.get("duration")
        } for lesson in lessons
    ]
    return response

@router.post("/", response_model=CourseResponse, status_code=201)
async def create_course(course: CourseCreate, db: AsyncIOMotorDatabase = Depends(get_db), current_user: dict = Depends(require_roles("teacher", "admin"))):
    check_groups(course.groups)
    if await db.courses.find_one({"title": course.title}):
        raise HTTPException(400, "Course with this title already exists")

    course_dict = course.model_dump()
    course_dict["id"] = str(uuid.uuid4())
    course_dict["instructor"] = current_user["id"]
    course_dict["lessons"] = []
    course_dict["enrolledStudents"] = []
    course_dict["createdAt"] = datetime.utcnow().isoformat()
    course_dict["updatedAt"] = datetime.utcnow().isoformat()

    await db.courses.insert_one(course_dict)
    logger.info(f"Course {course_dict['id']} created by {current_user['id']}")
    return course_dict

@router.put("/{id}", response_model=CourseResponse)
async def update_course(id: str, course: CourseUpdate, db: AsyncIOMotorDatabase = Depends(get_db), current_user: dict = Depends(require_roles("teacher", "admin"))):
    existing = await db.courses.find_one({"id": id})
    if not existing:
        raise HTTPException(404, "Course not found")
    if current_user["role"] == "teacher" and existing.get("instructor") not in (None, current_user["id"]):
        raise HTTPException(403, "Only the course instructor can update this course")

    check_groups(course.groups)
    updates = course.model_dump(exclude_none=True)
    updates["updatedAt"] = datetime.utcnow().isoformat()
    await db.courses.update_one({"id": id}, {"$set": updates})
    return await db.courses.find_one({"id": id})

@router.delete("/{id}")
async def delete_course(id: str, db: AsyncIOMotorDatabase = Depends(get_db), current_user: dict = Depends(require_roles("admin"))):
    result = await db.courses.update_one(
        {"id": id, "isPublished": True},
        {"$set": {"isPublished": False, "updatedAt": datetime.utcnow().isoformat()}}
    )
    if result.modified_count == 0:
        raise HTTPException(404, "Course not found or already unpublished")
    logger.info(f"Course {id} unpublished by {current_user['id']}")
    return {"message": "Course unpublished successfully"}

@router.get("/{id}/progress", response_model=CourseProgress)
async def get_course_progress(id: str, db: AsyncIOMotorDatabase = Depends(get_db), current_user: dict = Depends(get_current_user)):
    course = await db.courses.find_one({"id": id})
    if not course:
        raise HTTPException(404, "Course not found")

    progress = await db.progress.find({"user": current_user["id"], "course": id, "completed": True}).to_list(None)
    completed_lessons = [p["lesson"] for p in progress]
    total_lessons = len(course.get("lessons", []))
    progress_percentage = percentage(len(completed_lessons), total_lessons)

    return {
        "course": id,
        "totalLessons": total_lessons,
        "completedCount": len(completed_lessons),
        "progressPercentage": progress_percentage,
        "completedLessons": completed_lessons,
    }
