"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Profile fields travel and are stored in camelCase (firstName, branchCode, ...).
"""

from datetime import date
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional

from pydantic import (
    BaseModel, ConfigDict, EmailStr, Field, StringConstraints, field_validator, model_validator
)
from pydantic.alias_generators import to_camel

from placement_admin.core.config import get_settings
from placement_admin.core.departments import (
    DEPARTMENT_CODES, SEMESTERS, department_code, is_department
)
from placement_admin.core.validation import (
    CGPA_RANGE, PERCENTAGE_RANGE, USERNAME_PATTERN, age_on, check_range, parse_backlogs
)


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    recruiter = "recruiter"
    admin = "admin"


class AdminType(str, Enum):
    lead = "A1"
    assistant = "A2"


class Gender(str, Enum):
    male = "Male"
    female = "Female"
    prefer_not_to_say = "Prefer not to say"
    other = "Other"


class MessageStatus(str, Enum):
    new = "new"
    viewed = "viewed"


# ============================================================
# FIELD TYPES
# ============================================================

PersonName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]
OptionalName = Annotated[str, StringConstraints(strip_whitespace=True, max_length=100)]
Phone = Annotated[str, StringConstraints(strip_whitespace=True, min_length=10, max_length=15)]
RegistrationNo = Annotated[str, StringConstraints(strip_whitespace=True, min_length=8, max_length=8)]
Username = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=20)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================
# AUTH SCHEMAS
# ============================================================

class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    role: str
    admin_type: str
    department_code: Optional[str] = None


class CurrentUserResponse(BaseModel):
    id: str
    email: str
    role: str
    admin_type: str
    department_code: Optional[str] = None


# ============================================================
# STUDENT SCHEMAS
# ============================================================

class StudentFields(CamelModel):
    first_name: PersonName
    middle_name: OptionalName = ""
    last_name: PersonName
    gender: Gender
    registration_no: RegistrationNo
    phone: Phone
    email: EmailStr
    dob: date
    tenth_percentage: float
    twelfth_percentage: float
    cgpa: float
    branch: str
    branch_code: Optional[str] = None
    semester: str
    backlogs: int

    @field_validator("middle_name", mode="before")
    @classmethod
    def blank_middle_name(cls, value):
        return "" if value is None else value

    @field_validator("dob")
    @classmethod
    def check_minimum_age(cls, value: date) -> date:
        min_age = get_settings().min_student_age
        if age_on(value) < min_age:
            raise ValueError(f"You must be at least {min_age} years old")
        return value

    @field_validator("tenth_percentage", "twelfth_percentage", mode="before")
    @classmethod
    def check_percentage(cls, value):
        try:
            return check_range(value, *PERCENTAGE_RANGE)
        except ValueError:
            raise ValueError("Percentage must be between 0 and 100")

    @field_validator("cgpa", mode="before")
    @classmethod
    def check_cgpa(cls, value):
        try:
            return check_range(value, *CGPA_RANGE)
        except ValueError:
            raise ValueError("CGPA must be between 0 and 10")

    @field_validator("branch")
    @classmethod
    def check_branch(cls, value: str) -> str:
        if not is_department(value):
            raise ValueError("Branch is required")
        return value.strip()

    @field_validator("semester", mode="before")
    @classmethod
    def check_semester(cls, value) -> str:
        text = str(value).strip()
        if text not in SEMESTERS:
            raise ValueError("Semester is required")
        return text

    @field_validator("backlogs", mode="before")
    @classmethod
    def check_backlogs(cls, value) -> int:
        try:
            return parse_backlogs(value)
        except ValueError:
            raise ValueError("Backlogs information is required")

    @model_validator(mode="after")
    def derive_branch_code(self):
        # The code always follows the branch name; a submitted code is ignored.
        self.branch_code = department_code(self.branch)
        return self

    def to_profile(self) -> Dict[str, Any]:
        return self.model_dump(
            mode="json", by_alias=True, exclude={"password", "confirm_password"}
        )


class StudentSignupRequest(StudentFields):
    password: str = Field(..., min_length=8)
    confirm_password: str


class StudentUpdateRequest(StudentFields):
    """Replaces every editable field of a student record."""


# ============================================================
# RECRUITER SCHEMAS
# ============================================================

class RecruiterFields(CamelModel):
    company_name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=200)]
    email: EmailStr
    company_info: Annotated[str, StringConstraints(strip_whitespace=True, min_length=30)]

    def to_profile(self) -> Dict[str, Any]:
        return self.model_dump(
            mode="json", by_alias=True, exclude={"password", "confirm_password"}
        )


class RecruiterSignupRequest(RecruiterFields):
    password: str = Field(..., min_length=8)
    confirm_password: str


class RecruiterUpdateRequest(RecruiterFields):
    """Replaces every editable field of a recruiter record."""


# ============================================================
# ADMIN SCHEMAS
# ============================================================

class AdminSignupRequest(CamelModel):
    first_name: PersonName
    middle_name: OptionalName = ""
    last_name: PersonName
    email: EmailStr
    phone: Phone
    username: Username
    type: AdminType
    department: str
    dept_code: Optional[str] = None
    password: str
    confirm_password: str

    @field_validator("middle_name", mode="before")
    @classmethod
    def blank_middle_name(cls, value):
        return "" if value is None else value

    @field_validator("username")
    @classmethod
    def check_username(cls, value: str) -> str:
        if not USERNAME_PATTERN.match(value):
            raise ValueError(
                "Username must start with a lowercase letter, contain only "
                "lowercase letters, and may end with numbers"
            )
        return value

    @field_validator("department")
    @classmethod
    def check_department(cls, value: str) -> str:
        if not is_department(value):
            raise ValueError("Select a department")
        return value.strip()

    @model_validator(mode="after")
    def derive_dept_code(self):
        self.dept_code = department_code(self.department)
        return self

    def to_profile(self) -> Dict[str, Any]:
        return self.model_dump(
            mode="json", by_alias=True, exclude={"password", "confirm_password"}
        )


# ============================================================
# CONTACT / MESSAGE SCHEMAS
# ============================================================

class ContactSubmissionRequest(CamelModel):
    name: PersonName
    email: EmailStr
    phone: Annotated[str, StringConstraints(strip_whitespace=True, max_length=15)] = ""
    user_type: Annotated[str, StringConstraints(strip_whitespace=True, max_length=30)] = ""
    message: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=5000)]
    department_code: Optional[str] = None

    @field_validator("department_code")
    @classmethod
    def check_department_code(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        if value.strip() not in DEPARTMENT_CODES:
            raise ValueError("Unknown department code")
        return value.strip()


class MessageStatusUpdate(BaseModel):
    status: MessageStatus


# ============================================================
# RESPONSE SCHEMAS
# ============================================================

class SignupResponse(BaseModel):
    id: str
    message: str
    success: bool = True


class RecordListResponse(BaseModel):
    records: List[Dict[str, Any]]
    total: int


class MutationResponse(BaseModel):
    message: str
    records: List[Dict[str, Any]]
    total: int
    success: bool = True


class AdminSignupResponse(SignupResponse):
    admins: List[Dict[str, Any]] = []


class RecordResponse(BaseModel):
    record: Dict[str, Any]


class BulkImportResponse(BaseModel):
    message: str
    created: int
    success: bool = True


class DepartmentResponse(BaseModel):
    name: str
    code: str


class DashboardResponse(BaseModel):
    admin_type: str
    department_code: Optional[str] = None
    tabs: List[str]
    departments: List[DepartmentResponse]


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True
