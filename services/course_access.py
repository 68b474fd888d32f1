# services/course_access.py
"""Who may see a published course.

A course is restricted when it lists groups or enrolled students. Admins see
everything, instructors see their own courses, and everyone else needs an
enrollment, a matching group, or a course with no group restriction.
Anonymous visitors only see courses that are restricted in neither way.
"""
from typing import Optional

def _is_enrolled(course: dict, user: dict) -> bool:
    return user["id"] in (course.get("enrolledStudents") or [])

def _has_group_access(course: dict, user: dict) -> bool:
    groups = course.get("groups") or []
    return not groups or (user.get("group") is not None and user["group"] in groups)

def can_view_course(course: dict, user: Optional[dict]) -> bool:
    if user is None:
        return not course.get("groups") and not course.get("enrolledStudents")
    if user["role"] == "admin":
        return True
    if user["role"] == "teacher" and course.get("instructor") == user["id"]:
        return True
    return _is_enrolled(course, user) or _has_group_access(course, user)
