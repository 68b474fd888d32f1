# routes/auth.py
from fastapi import APIRouter, HTTPException, Depends
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel
from typing import Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError
from jose import JWTError, jwt
from datetime import datetime, timedelta
import bcrypt
import logging
import uuid

import config
from database import get_db
from models.user import UserRegister, UserPublic

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

class LoginRequest(BaseModel):
    email: str
    password: str

def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")

def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False

def create_access_token(user_id: str, role: str) -> str:
    expire = datetime.utcnow() + timedelta(minutes=config.JWT_EXPIRE_MINUTES)
    return jwt.encode({"id": user_id, "role": role, "exp": expire}, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)

def public_user(user: dict) -> dict:
    return {
        "id": user["id"],
        "email": user["email"],
        "firstName": user.get("firstName", ""),
        "lastName": user.get("lastName", ""),
        "role": user["role"],
        "group": user.get("group"),
        "avatar": user.get("avatar"),
        "isActive": user.get("isActive", True),
        "createdAt": user.get("createdAt"),
    }

async def get_current_user(token: str = Depends(oauth2_scheme), db: AsyncIOMotorDatabase = Depends(get_db)):
    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except JWTError as e:
        logger.error(f"JWTError: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token")
    user_id = payload.get("id")
    if not user_id or not payload.get("role"):
        logger.error("Invalid token: Missing user_id or role")
        raise HTTPException(status_code=401, detail="Invalid token")
    user = await db.users.find_one({"id": user_id})
    if not user:
        logger.warning(f"User not found for id: {user_id}")
        raise HTTPException(status_code=401, detail="User not found")
    if not user.get("isActive", True):
        raise HTTPException(status_code=401, detail="Account is deactivated")
    return public_user(user)

async def get_optional_user(token: Optional[str] = Depends(optional_oauth2_scheme), db: AsyncIOMotorDatabase = Depends(get_db)):
    # Public endpoints treat a missing or unusable token as an anonymous visitor
    if not token:
        return None
    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except JWTError:
        return None
    user = await db.users.find_one({"id": payload.get("id")})
    if not user or not user.get("isActive", True):
        return None
    return public_user(user)

def require_roles(*roles: str):
    async def checker(current_user: dict = Depends(get_current_user)):
        if current_user["role"] not in roles:
            logger.warning(f"User {current_user['id']} with role {current_user['role']} denied, needs one of {roles}")
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return current_user
    return checker

@router.post("/register", status_code=201)
async def register(request: UserRegister, db: AsyncIOMotorDatabase = Depends(get_db)):
    logger.info(f"Registration attempt for email: {request.email}")
    if await db.users.find_one({"email": request.email}):
        raise HTTPException(status_code=409, detail="A user with this email already exists")

    user = {
        "id": str(uuid.uuid4()),
        "email": request.email,
        "password": hash_password(request.password),
        "firstName": request.firstName,
        "lastName": request.lastName,
        "group": request.group,
        "role": "student",
        "isActive": True,
        "createdAt": datetime.utcnow().isoformat(),
    }
    try:
        await db.users.insert_one(user)
    except DuplicateKeyError as e:
        raise HTTPException(status_code=409, detail=f"Duplicate key error: {str(e)}")

    return {
        "access_token": create_access_token(user["id"], user["role"]),
        "token_type": "bearer",
        "user": public_user(user),
    }

@router.post("/login")
async def login(request: LoginRequest, db: AsyncIOMotorDatabase = Depends(get_db)):
    logger.info(f"Login attempt for email: {request.email}")
    user = await db.users.find_one({"email": request.email})

    if not user or not verify_password(request.password, user["password"]):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if not user.get("isActive", True):
        raise HTTPException(status_code=401, detail="Account is deactivated")

    return {
        "access_token": create_access_token(user["id"], user["role"]),
        "token_type": "bearer",
        "user": public_user(user),
    }

@router.get("/me", response_model=UserPublic)
async def get_current_user_endpoint(current_user: dict = Depends(get_current_user)):
    return current_user
