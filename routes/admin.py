# routes/admin.py
from fastapi import APIRouter, HTTPException, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import List, Optional
from datetime import datetime
import logging
import re
import uuid

from database import get_db
from models.course import CourseResponse
from models.user import AdminUserCreate, AdminUserUpdate, EnrollRequest, PasswordReset, UserPublic, VALID_GROUPS, VALID_ROLES
from .auth import hash_password, public_user, require_roles

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])

staff_only = require_roles("teacher", "admin")
admin_only = require_roles("admin")

async def get_managed_course(db: AsyncIOMotorDatabase, course_id: str, current_user: dict) -> dict:
    course = await db.courses.find_one({"id": course_id})
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")
    if current_user["role"] != "admin" and course.get("instructor") != current_user["id"]:
        raise HTTPException(status_code=403, detail="Only the course instructor can manage its students")
    return course

async def enrolled_students(db: AsyncIOMotorDatabase, course_id: str) -> List[dict]:
    course = await db.courses.find_one({"id": course_id})
    student_ids = course.get("enrolledStudents", [])
    if not student_ids:
        return []
    students = await db.users.find({"id": {"$in": student_ids}}).to_list(None)
    by_id = {s["id"]: public_user(s) for s in students}
    return [by_id[i] for i in student_ids if i in by_id]

# Users

@router.get("/users", response_model=List[UserPublic])
async def get_users(
    role: Optional[str] = None,
    group: Optional[str] = None,
    search: Optional[str] = None,
    db: AsyncIOMotorDatabase = Depends(get_db),
    current_user: dict = Depends(staff_only)
):
    if role and role not in VALID_ROLES:
        raise HTTPException(status_code=400, detail=f"Invalid role. Must be one of {', '.join(sorted(VALID_ROLES))}")

    query = {}
    if current_user["role"] == "teacher":
        # Teachers only pick active students
        query["role"] = "student"
        query["isActive"] = True
    elif role:
        query["role"] = role
        if role == "student":
            query["isActive"] = True
    else:
        query["isActive"] = True
    if group:
        query["group"] = group
    if search and search.strip():
        pattern = re.escape(search.strip())
        query["$or"] = [
            {"email": {"$regex": pattern, "$options": "i"}},
            {"firstName": {"$regex": pattern, "$options": "i"}},
            {"lastName": {"$regex": pattern, "$options": "i"}}
        ]

    users = await db.users.find(query).sort("createdAt", -1).to_list(None)
    return [public_user(user) for user in users]

@router.post("/users", response_model=UserPublic, status_code=201)
async def create_user(request: AdminUserCreate, db: AsyncIOMotorDatabase = Depends(get_db), current_user: dict = Depends(admin_only)):
    email = request.email.strip().lower()
    if await db.users.find_one({"email": email}):
        raise HTTPException(status_code=409, detail="A user with this email already exists")

    user = {
        "id": str(uuid.uuid4()),
        "email": email,
        "password": hash_password(request.password),
        "firstName": request.firstName.strip(),
        "lastName": request.lastName.strip(),
        "role": request.role,
        "group": request.group,
        "isActive": True,
        "createdAt": datetime.utcnow().isoformat(),
    }
    await db.users.insert_one(user)
    logger.info(f"User {user['id']} ({user['role']}) created by {current_user['id']}")
    return public_user(user)

@router.put("/users/{id}", response_model=UserPublic)
async def update_user(id: str, request: AdminUserUpdate, db: AsyncIOMotorDatabase = Depends(get_db), current_user: dict = Depends(admin_only)):
    fields = request.model_dump(exclude_unset=True)
    updates = {}
    unset = {}
    for field in ("firstName", "lastName"):
        if fields.get(field) and fields[field].strip():
            updates[field] = fields[field].strip()
    if fields.get("role") is not None:
        if fields["role"] not in VALID_ROLES:
            raise HTTPException(status_code=400, detail=f"Invalid role. Must be one of {', '.join(sorted(VALID_ROLES))}")
        updates["role"] = fields["role"]
    if fields.get("isActive") is not None:
        updates["isActive"] = fields["isActive"]
    if "group" in fields:
        if fields["group"]:
            if fields["group"] not in VALID_GROUPS:
                raise HTTPException(status_code=400, detail=f"Invalid group. Must be one of {', '.join(sorted(VALID_GROUPS))}")
            updates["group"] = fields["group"]
        else:
            unset["group"] = ""

    updates["updatedAt"] = datetime.utcnow().isoformat()
    operation = {"$set": updates}
    if unset:
        operation["$unset"] = unset
    result = await db.users.update_one({"id": id}, operation)
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="User not found")
    logger.info(f"User {id} updated by {current_user['id']}: {sorted(list(updates) + list(unset))}")
    return public_user(await db.users.find_one({"id": id}))

@router.post("/users/{id}/reset-password")
async def reset_password(id: str, request: PasswordReset, db: AsyncIOMotorDatabase = Depends(get_db), current_user: dict = Depends(admin_only)):
    result = await db.users.update_one(
        {"id": id},
        {"$set": {"password": hash_password(request.newPassword), "updatedAt": datetime.utcnow().isoformat()}}
    )
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="User not found")
    logger.info(f"Password of user {id} reset by {current_user['id']}")
    return {"message": "Password changed", "userId": id}

@router.delete("/users/{id}")
async def deactivate_user(id: str, db: AsyncIOMotorDatabase = Depends(get_db), current_user: dict = Depends(admin_only)):
    if id == current_user["id"]:
        raise HTTPException(status_code=400, detail="You cannot deactivate your own account")
    result = await db.users.update_one({"id": id}, {"$set": {"isActive": False, "updatedAt": datetime.utcnow().isoformat()}})
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="User not found")
    logger.info(f"User {id} deactivated by {current_user['id']}")
    return {"message": "User deactivated", "userId": id}

# Courses and enrollment

@router.get("/courses/my", response_model=List[CourseResponse])
async def get_my_courses(db: AsyncIOMotorDatabase = Depends(get_db), current_user: dict = Depends(staff_only)):
    query = {} if current_user["role"] == "admin" else {"instructor": current_user["id"]}
    return await db.courses.find(query).sort("order", 1).to_list(None)

@router.get("/courses/{id}/students", response_model=List[UserPublic])
async def get_course_students(id: str, db: AsyncIOMotorDatabase = Depends(get_db), current_user: dict = Depends(staff_only)):
    await get_managed_course(db, id, current_user)
    return await enrolled_students(db, id)

@router.post("/courses/{id}/students", response_model=List[UserPublic])
async def enroll_students(id: str, request: EnrollRequest, db: AsyncIOMotorDatabase = Depends(get_db), current_user: dict = Depends(staff_only)):
    await get_managed_course(db, id, current_user)

    student_ids = list(dict.fromkeys(request.studentIds))
    students = await db.users.find({"id": {"$in": student_ids}, "role": "student", "isActive": True}).to_list(None)
    if len(students) != len(student_ids):
        raise HTTPException(status_code=400, detail="Some students were not found or are inactive")

    await db.courses.update_one({"id": id}, {"$addToSet": {"enrolledStudents": {"$each": student_ids}}})
    logger.info(f"Enrolled {student_ids} in course {id} by {current_user['id']}")
    return await enrolled_students(db, id)

@router.delete("/courses/{id}/students/{student_id}", response_model=List[UserPublic])
async def unenroll_student(id: str, student_id: str, db: AsyncIOMotorDatabase = Depends(get_db), current_user: dict = Depends(staff_only)):
    await get_managed_course(db, id, current_user)
    await db.courses.update_one({"id": id}, {"$pull": {"enrolledStudents": student_id}})
    logger.info(f"Student {student_id} removed from course {id} by {current_user['id']}")
    return await enrolled_students(db, id)
