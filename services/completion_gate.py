# services/completion_gate.py
from typing import Iterable, List, Sequence

def _exercise_type(exercise):
    if isinstance(exercise, dict):
        return exercise.get("type")
    return getattr(exercise, "type", None)

def practical_indices(exercises: Sequence) -> List[int]:
    return [i for i, exercise in enumerate(exercises or []) if _exercise_type(exercise) == "practical"]

def outstanding_exercises(exercises: Sequence, submitted_indices: Iterable[int]) -> List[int]:
    """Practical exercise positions with no submission, in ascending order."""
    submitted = set(submitted_indices or [])
    return [i for i in practical_indices(exercises) if i not in submitted]

def can_complete(exercises: Sequence, submitted_indices: Iterable[int]) -> bool:
    """A lesson may be completed once every practical exercise has a submission."""
    return not outstanding_exercises(exercises, submitted_indices)
