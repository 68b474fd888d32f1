# models/quiz.py
from pydantic import BaseModel, Field
from typing import List, Optional, Union

from config import DEFAULT_PASSING_SCORE
from models.question import Question

class Quiz(BaseModel):
    id: Optional[str] = None  # UUID as string
    title: str
    description: str = ""
    course: str
    lesson: Optional[str] = None
    questions: List[Question] = []
    timeLimit: Optional[int] = None  # In minutes
    passingScore: Union[int, float] = Field(DEFAULT_PASSING_SCORE, ge=0, le=100)  # Percentage
    isPublished: bool = False
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

class QuizCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    course: str
    lesson: Optional[str] = None
    questions: List[Question] = Field(..., min_length=1)
    timeLimit: Optional[int] = Field(None, gt=0)
    passingScore: Union[int, float] = Field(DEFAULT_PASSING_SCORE, ge=0, le=100)
    isPublished: bool = False

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Network basics",
                "description": "OSI model and addressing",
                "course": "c0ffee00-0000-4000-8000-000000000000",
                "questions": [
                    {"question": "Which layer routes packets?", "type": "single",
                     "options": ["Data link", "Network", "Transport"], "correctAnswers": "Network"},
                    {"question": "Pick the transport protocols", "type": "multiple",
                     "options": ["TCP", "IP", "UDP"], "correctAnswers": ["TCP", "UDP"], "points": 2},
                    {"question": "Name the suite the internet runs on", "type": "text",
                     "correctAnswers": "TCP/IP"}
                ],
                "passingScore": 70
            }
        }

class QuizSubmission(BaseModel):
    # One entry per question, in question order
    answers: List[Optional[Union[str, List[str]]]]
    timeSpent: Optional[int] = None  # In minutes
