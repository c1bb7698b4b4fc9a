import pytest

from placement_admin.core.departments import (
    DEPARTMENT_CODE_MAP, department_code, is_department, list_departments
)


@pytest.mark.parametrize("name,code", [
    ("Computer Science & Engineering", "CS"),
    ("Information Technology", "IT"),
    ("Electronics & Telecommunication Engineering", "EN"),
    ("Electrical Engineering", "EE"),
    ("Mechanical Engineering", "ME"),
    ("Civil Engineering", "CE"),
    ("Instrumentation Engineering", "IN"),
])
def test_department_code(name: str, code: str) -> None:
    assert department_code(name) == code
    assert department_code(f"  {name} ") == code


def test_catalogue_has_seven_unique_codes() -> None:
    assert len(DEPARTMENT_CODE_MAP) == 7
    assert len(set(DEPARTMENT_CODE_MAP.values())) == 7


def test_unknown_department() -> None:
    assert not is_department("Astronomy")
    assert not is_department("")
    with pytest.raises(KeyError):
        department_code("Astronomy")


def test_list_departments_shape() -> None:
    departments = list_departments()
    assert {"name": "Civil Engineering", "code": "CE"} in departments
