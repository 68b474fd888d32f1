# models/lesson.py
from pydantic import BaseModel, Field
from typing import List, Optional

class Exercise(BaseModel):
    title: str = ""
    description: str = ""
    type: Optional[str] = Field(None, pattern="^(practical|theoretical)$")  # Practical ones need a submission
    instructions: str = ""

class Lesson(BaseModel):
    id: Optional[str] = None  # UUID as string
    title: str
    description: str
    content: str
    course: str
    order: int = 0
    duration: Optional[int] = None  # In minutes
    videoUrl: Optional[str] = None
    resources: List[str] = []
    exercises: List[Exercise] = []
    isPublished: bool = False
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

class LessonCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str
    content: str
    course: str
    order: Optional[int] = None  # Appended after the last lesson when unset
    duration: Optional[int] = None
    videoUrl: Optional[str] = None
    resources: List[str] = []
    exercises: List[Exercise] = []
    isPublished: bool = False

class LessonUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = None
    order: Optional[int] = None
    duration: Optional[int] = None
    videoUrl: Optional[str] = None
    resources: Optional[List[str]] = None
    exercises: Optional[List[Exercise]] = None
    isPublished: Optional[bool] = None

class CompleteLessonRequest(BaseModel):
    timeSpent: int = 0  # In minutes
