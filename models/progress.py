# models/progress.py
from pydantic import BaseModel
from typing import List, Optional

class Progress(BaseModel):
    user: str
    course: str
    lesson: str
    completed: bool = False
    completedAt: Optional[str] = None
    timeSpent: int = 0  # In minutes
    updatedAt: Optional[str] = None

class CourseProgress(BaseModel):
    course: str
    totalLessons: int
    completedCount: int
    progressPercentage: int
    completedLessons: List[str]

class ProgressStats(BaseModel):
    totalCourses: int
    coursesStarted: int
    totalLessonsCompleted: int
    totalTimeSpent: int
