# models/course.py
from pydantic import BaseModel, Field
from typing import List, Optional

CATEGORY_PATTERN = "^(network|system-linux|system-windows)$"
LEVEL_PATTERN = "^(beginner|intermediate|advanced)$"

class Course(BaseModel):
    id: Optional[str] = None  # UUID as string
    title: str
    description: str
    summary: Optional[str] = None
    category: str = Field(..., pattern=CATEGORY_PATTERN)
    level: str = Field(..., pattern=LEVEL_PATTERN)
    thumbnail: Optional[str] = None
    instructor: Optional[str] = None
    lessons: List[str] = []  # Lesson UUIDs
    enrolledStudents: List[str] = []  # User UUIDs
    groups: List[str] = []  # Empty means open to every group
    order: int = 0
    isPublished: bool = False
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

class CourseResponse(Course):
    id: str

class CourseCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str
    summary: Optional[str] = None
    category: str = Field(..., pattern=CATEGORY_PATTERN)
    level: str = Field(..., pattern=LEVEL_PATTERN)
    thumbnail: Optional[str] = None
    groups: List[str] = []
    order: int = 0
    isPublished: bool = False

class CourseUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    summary: Optional[str] = None
    category: Optional[str] = Field(None, pattern=CATEGORY_PATTERN)
    level: Optional[str] = Field(None, pattern=LEVEL_PATTERN)
    thumbnail: Optional[str] = None
    groups: Optional[List[str]] = None
    order: Optional[int] = None
    isPublished: Optional[bool] = None
