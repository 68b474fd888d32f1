# models/question.py
from pydantic import BaseModel, Field, model_validator
from typing import List, Optional, Union

class Question(BaseModel):
    id: Optional[str] = None
    question: str
    type: str = Field(..., pattern="^(single|multiple|text)$")
    options: List[str] = []  # Ignored for text questions
    correctAnswers: Union[str, List[str]]  # String for single/text, list for multiple
    points: Union[int, float] = Field(1, gt=0)
    explanation: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def normalize_shapes(cls, data):
        """Bring stored answer shapes in line with the question type.

        Older quiz documents keep a one-element list for single/text questions
        and a bare string for multiple-choice ones, and may carry a null
        ``points`` value.
        """
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("points") is None:
            data.pop("points", None)
        if data.get("options") is None:
            data.pop("options", None)
        correct = data.get("correctAnswers")
        if data.get("type") == "multiple" and isinstance(correct, str):
            data["correctAnswers"] = [correct]
        elif data.get("type") in ("single", "text") and isinstance(correct, list) and len(correct) == 1:
            data["correctAnswers"] = correct[0]
        return data

    @model_validator(mode="after")
    def check_correct_answers(self):
        if self.type in ("single", "text") and not isinstance(self.correctAnswers, str):
            raise ValueError(f"A {self.type} question takes exactly one correct answer")
        if self.type != "text" and self.options:
            expected = [self.correctAnswers] if isinstance(self.correctAnswers, str) else self.correctAnswers
            missing = [answer for answer in expected if answer not in self.options]
            if missing:
                raise ValueError(f"Correct answers not among the options: {missing}")
        return self
