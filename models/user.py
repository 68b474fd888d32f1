# models/user.py
from pydantic import BaseModel, Field
from typing import List, Optional

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
ROLE_PATTERN = "^(student|teacher|admin)$"
VALID_ROLES = {"student", "teacher", "admin"}
# Study tracks a user can belong to; courses may be restricted to some of them
VALID_GROUPS = {"haitech", "promdesign", "promrobo", "energy", "bio", "aero", "media", "vrar"}
GROUP_PATTERN = "^(" + "|".join(sorted(VALID_GROUPS)) + ")$"

class UserRegister(BaseModel):
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=6)
    firstName: str
    lastName: str
    group: Optional[str] = Field(None, pattern=GROUP_PATTERN)

class UserPublic(BaseModel):
    id: str
    email: str
    firstName: str
    lastName: str
    role: str
    group: Optional[str] = None
    avatar: Optional[str] = None
    isActive: bool = True
    createdAt: Optional[str] = None

class ProfileUpdate(BaseModel):
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    avatar: Optional[str] = None
    group: Optional[str] = None  # Empty string leaves the group

class AdminUserCreate(BaseModel):
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=6)
    firstName: str = ""
    lastName: str = ""
    role: str = Field("student", pattern=ROLE_PATTERN)
    group: Optional[str] = Field(None, pattern=GROUP_PATTERN)

class AdminUserUpdate(BaseModel):
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    role: Optional[str] = None
    isActive: Optional[bool] = None
    group: Optional[str] = None  # Empty string removes the group

class PasswordReset(BaseModel):
    newPassword: str = Field(..., min_length=6)

class EnrollRequest(BaseModel):
    studentIds: List[str] = Field(..., min_length=1)
