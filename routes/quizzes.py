# routes/quizzes.py
from fastapi import APIRouter, HTTPException, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import List, Optional
from datetime import datetime
import logging
import uuid

import config
from database import get_db
from models.quiz import Quiz, QuizCreate, QuizSubmission
from models.quiz_result import QuizResultRecord
from services.quiz_grader import grade
from .auth import get_current_user, require_roles

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/quizzes", tags=["quizzes"])

HIDDEN_QUESTION_FIELDS = {"correctAnswers", "explanation"}

def quiz_summary(quiz: dict) -> dict:
    return {
        "id": quiz["id"],
        "title": quiz["title"],
        "description": quiz.get("description", ""),
        "course": quiz["course"],
        "lesson": quiz.get("lesson"),
        "timeLimit": quiz.get("timeLimit"),
        "passingScore": quiz.get("passingScore", config.DEFAULT_PASSING_SCORE),
        "questionCount": len(quiz.get("questions", [])),
    }

async def get_published_quiz(db: AsyncIOMotorDatabase, quiz_id: str) -> Quiz:
    quiz = await db.quizzes.find_one({"id": quiz_id})
    if not quiz:
        raise HTTPException(status_code=404, detail="Quiz not found")
    if not quiz.get("isPublished", False):
        raise HTTPException(status_code=403, detail="Quiz is not available")
    return Quiz.model_validate(quiz)

async def validate_course_and_lesson(db: AsyncIOMotorDatabase, quiz: QuizCreate):
    if not await db.courses.find_one({"id": quiz.course}):
        raise HTTPException(404, "Course not found")
    if quiz.lesson:
        lesson = await db.lessons.find_one({"id": quiz.lesson})
        if not lesson:
            raise HTTPException(404, "Lesson not found")
        if lesson["course"] != quiz.course:
            raise HTTPException(400, "Lesson does not belong to this course")

@router.get("/")
async def get_quizzes(course: Optional[str] = None, lesson: Optional[str] = None, db: AsyncIOMotorDatabase = Depends(get_db)):
    query = {"isPublished": True}
    if course:
        query["course"] = course
    if lesson:
        query["lesson"] = lesson
    quizzes = await db.quizzes.find(query).to_list(None)
    return [quiz_summary(q) for q in quizzes]

@router.get("/{id}")
async def get_quiz(id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    quiz = await get_published_quiz(db, id)
    # Learners never see the correct answers before submitting
    return quiz.model_dump(exclude={"questions": {"__all__": HIDDEN_QUESTION_FIELDS}})

@router.post("/", response_model=Quiz, status_code=201)
async def create_quiz(quiz: QuizCreate, db: AsyncIOMotorDatabase = Depends(get_db), current_user: dict = Depends(require_roles("teacher", "admin"))):
    await validate_course_and_lesson(db, quiz)

    quiz_dict = quiz.model_dump()
    quiz_dict["id"] = str(uuid.uuid4())
    for question in quiz_dict["questions"]:
        question["id"] = question.get("id") or str(uuid.uuid4())
    quiz_dict["createdAt"] = datetime.utcnow().isoformat()
    quiz_dict["updatedAt"] = datetime.utcnow().isoformat()

    await db.quizzes.insert_one(quiz_dict)
    logger.info(f"Quiz {quiz_dict['id']} created by {current_user['id']} with {len(quiz_dict['questions'])} questions")
    return quiz_dict

@router.put("/{id}", response_model=Quiz)
async def update_quiz(id: str, quiz: QuizCreate, db: AsyncIOMotorDatabase = Depends(get_db), current_user: dict = Depends(require_roles("teacher", "admin"))):
    existing = await db.quizzes.find_one({"id": id})
    if not existing:
        raise HTTPException(404, "Quiz not found")
    await validate_course_and_lesson(db, quiz)

    quiz_dict = quiz.model_dump()
    for question in quiz_dict["questions"]:
        question["id"] = question.get("id") or str(uuid.uuid4())
    quiz_dict["updatedAt"] = datetime.utcnow().isoformat()
    await db.quizzes.update_one({"id": id}, {"$set": quiz_dict})

    logger.info(f"Quiz {id} updated by {current_user['id']}")
    return {**quiz_dict, "id": id, "createdAt": existing.get("createdAt")}

@router.post("/{id}/submit")
async def submit_quiz(id: str, submission: QuizSubmission, db: AsyncIOMotorDatabase = Depends(get_db), current_user: dict = Depends(get_current_user)):
    quiz = await get_published_quiz(db, id)
    if not quiz.questions:
        raise HTTPException(status_code=400, detail="Quiz has no questions")
    if len(submission.answers) != len(quiz.questions):
        logger.warning(f"Quiz {id}: expected {len(quiz.questions)} answers, got {len(submission.answers)}")

    result = grade(quiz, submission.answers)

    record = result.model_dump()
    record.update({
        "id": str(uuid.uuid4()),
        "user": current_user["id"],
        "quiz": id,
        "course": quiz.course,
        "timeSpent": submission.timeSpent,
        "completedAt": datetime.utcnow().isoformat(),
    })
    await db.quiz_results.insert_one(record)
    logger.info(f"User {current_user['id']} scored {result.score}/{result.maxScore} ({result.percentage}%) on quiz {id}, passed={result.passed}")

    return {
        "result": result.model_dump(),
        "quiz": {
            "questions": [
                {
                    "id": q.id,
                    "question": q.question,
                    "correctAnswers": q.correctAnswers,
                    "explanation": q.explanation,
                    "points": q.points,
                }
                for q in quiz.questions
            ]
        },
    }

@router.get("/{id}/results", response_model=List[QuizResultRecord])
async def get_quiz_results(id: str, db: AsyncIOMotorDatabase = Depends(get_db), current_user: dict = Depends(get_current_user)):
    results = await db.quiz_results.find(
        {"user": current_user["id"], "quiz": id}
    ).sort("completedAt", -1).limit(config.RESULTS_HISTORY_LIMIT).to_list(None)
    return results
