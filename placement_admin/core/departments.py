"""
Department / branch catalogue shared by students, admins and messages.

Students call it "branch", admins call it "department"; both store the full
name plus the short code derived from this map.
"""

from typing import Dict, List

DEPARTMENT_CODE_MAP: Dict[str, str] = {
    "Computer Science & Engineering": "CS",
    "Information Technology": "IT",
    "Electronics & Telecommunication Engineering": "EN",
    "Electrical Engineering": "EE",
    "Mechanical Engineering": "ME",
    "Civil Engineering": "CE",
    "Instrumentation Engineering": "IN",
}

DEPARTMENT_CODES = frozenset(DEPARTMENT_CODE_MAP.values())

SEMESTERS = [str(n) for n in range(1, 9)]
NO_BACKLOG = "No Backlog"


def department_code(name: str) -> str:
    """Short code for a department name. Raises KeyError for unknown names."""
    return DEPARTMENT_CODE_MAP[name.strip()]


def is_department(name: str) -> bool:
    return bool(name) and name.strip() in DEPARTMENT_CODE_MAP


def list_departments() -> List[dict]:
    return [{"name": name, "code": code} for name, code in DEPARTMENT_CODE_MAP.items()]
