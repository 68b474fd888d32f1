# services/prompts.py
from typing import Dict, List, Optional

Messages = List[Dict[str, str]]

QUESTION_TYPE_NAMES = {
    "single": "single choice",
    "multiple": "multiple choice",
    "text": "free-text answer",
}

def student_assistance(question: str, context: Optional[str] = None) -> Messages:
    system_prompt = (
        "You are a helpful assistant for students learning network and system administration. "
        "Help them understand the material, answer their questions and explain difficult concepts in plain language. "
        "Be friendly and clear, and use real-world examples when possible."
    )
    content = f"Context: {context}\n\nQuestion: {question}" if context else question
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": content},
    ]

def analyze_answer(question: str, student_answer: str, correct_answer: Optional[str] = None) -> Messages:
    system_prompt = (
        "You are a teacher reviewing a student's answer. Point out what is right, what is wrong "
        "and how to improve. Keep the tone constructive."
    )
    content = f"Question: {question}\n\nStudent answer: {student_answer}"
    if correct_answer:
        content += f"\n\nReference answer: {correct_answer}"
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": content},
    ]

def explain_term(term: str) -> Messages:
    system_prompt = (
        "You are a teacher who explains technical terms in simple language. "
        "Explain the term clearly, give usage examples and the context where it applies."
    )
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": f"Explain the term: {term}"},
    ]

def summarize_content(content: str, max_length: int = 500) -> Messages:
    system_prompt = "You write concise summaries of course material that keep the key ideas."
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": f"Summarize the following in at most {max_length} characters:\n\n{content}"},
    ]

def generate_quiz_questions(topic: str, question_count: int = 5, question_types: Optional[List[str]] = None) -> Messages:
    question_types = question_types or ["single", "multiple"]
    system_prompt = (
        "You are an expert at writing test questions. "
        "Write good questions with correct answers and explanations."
    )
    type_names = ", ".join(QUESTION_TYPE_NAMES[t] for t in question_types)
    return [
        {"role": "system", "content": system_prompt},
        {
            "role": "user",
            "content": (
                f'Create {question_count} test questions on the topic "{topic}".\n'
                f"Question types: {type_names}.\n"
                "For each question give the question text, the answer options (if applicable), "
                "the correct answer and an explanation."
            ),
        },
    ]

def review_submission(assignment: str, submission: str, criteria: Optional[List[str]] = None) -> Messages:
    system_prompt = (
        "You are a teacher grading practical work on a 0 to 5 scale. "
        "Give a grade, list strengths and weaknesses, and suggest improvements."
    )
    content = f"Assignment:\n{assignment}\n\nStudent submission:\n{submission}"
    if criteria:
        content += "\n\nGrading criteria:\n" + "\n".join(f"- {c}" for c in criteria)
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": content},
    ]
