# models/quiz_result.py
from pydantic import BaseModel
from typing import Any, List, Optional, Union

class QuestionResult(BaseModel):
    questionIndex: int
    questionId: Optional[str] = None
    submittedAnswer: Any = None
    isCorrect: bool
    pointsAwarded: Union[int, float]

class GradeResult(BaseModel):
    score: Union[int, float]
    maxScore: Union[int, float]
    percentage: int
    passed: bool
    answers: List[QuestionResult]

class QuizResultRecord(GradeResult):
    id: str
    user: str
    quiz: str
    course: str
    timeSpent: Optional[int] = None
    completedAt: str
