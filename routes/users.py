# routes/users.py
from fastapi import APIRouter, HTTPException, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import List
from datetime import datetime
import logging

from database import get_db
from models.user import ProfileUpdate, UserPublic, VALID_GROUPS
from .auth import get_current_user, public_user, require_roles

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])

def name_or_none(value: str):
    return value.strip() if value and value.strip() else None

@router.get("/profile", response_model=UserPublic)
async def get_profile(current_user: dict = Depends(get_current_user)):
    return current_user

@router.put("/profile", response_model=UserPublic)
async def update_profile(update: ProfileUpdate, db: AsyncIOMotorDatabase = Depends(get_db), current_user: dict = Depends(get_current_user)):
    updates = {}
    unset = {}
    fields = update.model_dump(exclude_unset=True)
    for field in ("firstName", "lastName"):
        if field in fields and name_or_none(fields[field]):
            updates[field] = name_or_none(fields[field])
    if "avatar" in fields:
        updates["avatar"] = fields["avatar"]
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
    await db.users.update_one({"id": current_user["id"]}, operation)
    logger.info(f"Profile of {current_user['id']} updated: {sorted(list(updates) + list(unset))}")

    user = await db.users.find_one({"id": current_user["id"]})
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return public_user(user)

@router.get("/", response_model=List[UserPublic])
async def get_users(db: AsyncIOMotorDatabase = Depends(get_db), current_user: dict = Depends(require_roles("teacher", "admin"))):
    users = await db.users.find({}).sort("createdAt", -1).to_list(None)
    return [public_user(user) for user in users]
