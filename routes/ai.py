# routes/ai.py
from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field
from typing import List, Optional
import logging

from services import prompts
from services.llm import LLMError, chat_completion
from .auth import get_current_user, require_roles

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["ai"])

class AssistRequest(BaseModel):
    question: str = Field(..., min_length=1)
    context: Optional[str] = None

class AnalyzeRequest(BaseModel):
    question: str = Field(..., min_length=1)
    studentAnswer: str = Field(..., min_length=1)
    correctAnswer: Optional[str] = None

class ExplainRequest(BaseModel):
    term: str = Field(..., min_length=1)

class SummarizeRequest(BaseModel):
    content: str = Field(..., min_length=1)
    maxLength: int = Field(500, gt=0)

class GenerateQuizRequest(BaseModel):
    topic: str = Field(..., min_length=1)
    questionCount: int = 5
    questionTypes: List[str] = ["single", "multiple"]

class ReviewSubmissionRequest(BaseModel):
    assignment: str = Field(..., min_length=1)
    submission: str = Field(..., min_length=1)
    criteria: List[str] = []

class ChatMessage(BaseModel):
    role: str = Field(..., pattern="^(system|user|assistant)$")
    content: str

class ChatRequest(BaseModel):
    messages: List[ChatMessage] = Field(..., min_length=1)

async def ask(messages, endpoint: str, **options) -> str:
    try:
        return await chat_completion(messages, **options)
    except LLMError as e:
        logger.error(f"AI {endpoint} error: {e.message}")
        raise HTTPException(status_code=e.status_code, detail=e.message)

@router.post("/assist")
async def assist(request: AssistRequest, current_user: dict = Depends(get_current_user)):
    context = request.context.strip() if request.context else None
    response = await ask(prompts.student_assistance(request.question.strip(), context), "assist", max_tokens=1500)
    return {"success": True, "response": response}

@router.post("/analyze")
async def analyze(request: AnalyzeRequest, current_user: dict = Depends(get_current_user)):
    correct = request.correctAnswer.strip() if request.correctAnswer else None
    feedback = await ask(
        prompts.analyze_answer(request.question.strip(), request.studentAnswer.strip(), correct),
        "analyze", max_tokens=1000
    )
    return {"success": True, "feedback": feedback}

@router.post("/explain")
async def explain(request: ExplainRequest, current_user: dict = Depends(get_current_user)):
    explanation = await ask(prompts.explain_term(request.term.strip()), "explain", max_tokens=800)
    return {"success": True, "explanation": explanation}

@router.post("/summarize")
async def summarize(request: SummarizeRequest, current_user: dict = Depends(get_current_user)):
    summary = await ask(prompts.summarize_content(request.content.strip(), request.maxLength), "summarize", temperature=0.3)
    return {"success": True, "summary": summary}

@router.post("/generate-quiz")
async def generate_quiz(request: GenerateQuizRequest, current_user: dict = Depends(require_roles("teacher", "admin"))):
    count = request.questionCount if 0 < request.questionCount <= 20 else 5
    types = [t for t in request.questionTypes if t in prompts.QUESTION_TYPE_NAMES] or ["single", "multiple"]
    logger.info(f"Generating {count} quiz questions on '{request.topic}' ({types}) for {current_user['id']}")
    questions = await ask(
        prompts.generate_quiz_questions(request.topic.strip(), count, types),
        "generate-quiz", temperature=0.8, max_tokens=4000
    )
    return {"success": True, "questions": questions, "count": count, "types": types}

@router.post("/review-submission")
async def review_submission(request: ReviewSubmissionRequest, current_user: dict = Depends(require_roles("teacher", "admin"))):
    review = await ask(
        prompts.review_submission(request.assignment.strip(), request.submission.strip(), request.criteria),
        "review-submission", temperature=0.5
    )
    return {"success": True, "review": review}

@router.post("/chat")
async def chat(request: ChatRequest, current_user: dict = Depends(get_current_user)):
    messages = [m.model_dump() for m in request.messages]
    response = await ask(messages, "chat")
    return {"success": True, "response": response}
