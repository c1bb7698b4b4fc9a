"""
Bulk Student Import

Turns one uploaded spreadsheet into student accounts:
1. Parse: header row = field names, every cell read as a string,
   missing cells become "" (RawImportRow)
2. Validate every row before writing anything; the first bad row aborts the
   whole batch with "Row N: reason" (N = data row index + 2, counting the header)
3. Convert each row into a typed StudentDraft at that boundary
4. Commit sequentially: issue a credential (password = DOB as DDMMYYYY),
   then write the student record under the issued identity id

The commit phase is not atomic. If row k fails, rows before k stay written
and rows from k on are never attempted.
"""

import io
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List, Optional

import pandas as pd
from email_validator import EmailNotValidError, validate_email

from placement_admin.core.auth import SessionContext
from placement_admin.core.config import get_settings
from placement_admin.core.departments import DEPARTMENT_CODE_MAP
from placement_admin.core.errors import BulkImportCommitError, BulkImportValidationError
from placement_admin.core.validation import CGPA_RANGE, PERCENTAGE_RANGE, check_range, parse_backlogs
from placement_admin.services.access import Capability, require
from placement_admin.services.identity_service import IdentityService
from placement_admin.services.record_store import RecordStore
from placement_admin.services.signup_service import new_profile
from placement_admin.utils.file_upload import get_file_extension

logger = logging.getLogger(__name__)

# One spreadsheet row keyed by header; values are always strings
RawImportRow = Dict[str, str]

MANDATORY_FIELDS = (
    "firstName",
    "lastName",
    "gender",
    "registrationNo",
    "phone",
    "email",
    "dob",
    "tenthPercentage",
    "twelfthPercentage",
    "cgpa",
    "branch",
    "semester",
    "backlogs",
)

HEADER_ROW_OFFSET = 2
DOB_INPUT_FORMAT = "%d-%m-%Y"
SPREADSHEET_DATE = re.compile(r"(\d{4}-\d{2}-\d{2})(?: \d{2}:\d{2}:\d{2})?")
MIN_NAME_LENGTH = 2


# ============================================================
# DOB HELPERS
# ============================================================

def parse_dob(value: str) -> date:
    """
    Parse a DD-MM-YYYY date of birth.

    Spreadsheet apps sometimes store the column as real dates, which arrive as
    "YYYY-MM-DD" or "YYYY-MM-DD HH:MM:SS"; those are accepted too.
    """
    text = str(value).strip()
    try:
        return datetime.strptime(text, DOB_INPUT_FORMAT).date()
    except ValueError:
        pass
    match = SPREADSHEET_DATE.fullmatch(text)
    if match:
        try:
            return datetime.strptime(match.group(1), "%Y-%m-%d").date()
        except ValueError:
            pass
    raise ValueError(f'dob "{text}" is not in DD-MM-YYYY format')


def derive_password(dob: date) -> str:
    """Initial password: the date of birth as DDMMYYYY, zero padded."""
    return f"{dob.day:02d}{dob.month:02d}{dob.year:04d}"


def stored_dob(dob: date) -> str:
    return f"{dob.year:04d}-{dob.month:02d}-{dob.day:02d}"


# ============================================================
# TYPED ROW
# ============================================================

@dataclass(frozen=True)
class StudentDraft:
    row_number: int
    first_name: str
    middle_name: str
    last_name: str
    gender: str
    registration_no: str
    phone: str
    email: str
    dob: date
    tenth_percentage: float
    twelfth_percentage: float
    cgpa: float
    branch: str
    branch_code: str
    semester: str
    backlogs: int

    @property
    def password(self) -> str:
        return derive_password(self.dob)

    def to_profile(self) -> dict:
        return {
            "firstName": self.first_name,
            "middleName": self.middle_name,
            "lastName": self.last_name,
            "gender": self.gender,
            "registrationNo": self.registration_no,
            "phone": self.phone,
            "email": self.email,
            "dob": stored_dob(self.dob),
            "tenthPercentage": self.tenth_percentage,
            "twelfthPercentage": self.twelfth_percentage,
            "cgpa": self.cgpa,
            "branch": self.branch,
            "branchCode": self.branch_code,
            "semester": self.semester,
            "backlogs": self.backlogs,
        }


def _row_error(row_number: int, reason: str) -> BulkImportValidationError:
    return BulkImportValidationError(f"Row {row_number}: {reason}")


def missing_fields(row: RawImportRow) -> List[str]:
    return [field for field in MANDATORY_FIELDS if not str(row.get(field, "")).strip()]


def to_draft(row: RawImportRow, row_number: int) -> StudentDraft:
    """Convert a raw row to a StudentDraft, rejecting bad values with the row number."""
    value = {key: str(cell).strip() for key, cell in row.items()}

    for field in ("firstName", "lastName"):
        if len(value[field]) < MIN_NAME_LENGTH:
            raise _row_error(row_number, f'{field} "{value[field]}" must be at least {MIN_NAME_LENGTH} characters')

    branch = value["branch"]
    if branch not in DEPARTMENT_CODE_MAP:
        raise _row_error(row_number, f'invalid branch "{row.get("branch")}"')

    try:
        validate_email(value["email"], check_deliverability=False)
    except EmailNotValidError:
        raise _row_error(row_number, f'invalid email "{value["email"]}"')

    try:
        dob = parse_dob(value["dob"])
    except ValueError as exc:
        raise _row_error(row_number, str(exc))

    numbers = {}
    for field, bounds in (
        ("tenthPercentage", PERCENTAGE_RANGE),
        ("twelfthPercentage", PERCENTAGE_RANGE),
        ("cgpa", CGPA_RANGE),
    ):
        try:
            numbers[field] = check_range(value[field], *bounds)
        except ValueError as exc:
            raise _row_error(row_number, f'{field} "{value[field]}" {exc}')

    try:
        backlogs = parse_backlogs(value["backlogs"])
    except ValueError as exc:
        raise _row_error(row_number, f'backlogs "{value["backlogs"]}" {exc}')

    return StudentDraft(
        row_number=row_number,
        first_name=value["firstName"],
        middle_name=value.get("middleName", ""),
        last_name=value["lastName"],
        gender=value["gender"],
        registration_no=value["registrationNo"],
        phone=value["phone"],
        email=value["email"],
        dob=dob,
        tenth_percentage=numbers["tenthPercentage"],
        twelfth_percentage=numbers["twelfthPercentage"],
        cgpa=numbers["cgpa"],
        branch=branch,
        branch_code=DEPARTMENT_CODE_MAP[branch],
        semester=value["semester"],
        backlogs=backlogs,
    )


# ============================================================
# PARSING
# ============================================================

def read_spreadsheet(content: bytes, filename: str) -> List[RawImportRow]:
    """
    Read the first sheet (or the CSV) into raw rows.

    Every row carries the full header key set; empty cells are "".
    Rows with no content at all are dropped.
    """
    ext = get_file_extension(filename)
    buffer = io.BytesIO(content)
    try:
        if ext == ".csv":
            frame = pd.read_csv(buffer, dtype=str, keep_default_na=False, skip_blank_lines=True)
        else:
            frame = pd.read_excel(buffer, sheet_name=0, dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError:
        return []
    except Exception as exc:
        logger.warning("Could not parse %s: %s", filename, exc)
        raise BulkImportValidationError("Failed to process the file. Please upload a valid file.") from exc

    frame.columns = [str(column).strip() for column in frame.columns]
    frame = frame.fillna("")

    rows: List[RawImportRow] = []
    for record in frame.to_dict(orient="records"):
        row = {key: str(cell) for key, cell in record.items()}
        if any(cell.strip() for cell in row.values()):
            rows.append(row)
    return rows


# ============================================================
# PROCESSOR
# ============================================================

class BulkImportProcessor:
    """
    Usage:
        processor = BulkImportProcessor(store, identity)
        created = processor.run(ctx, content, "students.xlsx")
    """

    def __init__(self, store: RecordStore, identity: IdentityService, max_rows: Optional[int] = None):
        self.store = store
        self.identity = identity
        self.max_rows = max_rows or get_settings().bulk_import_max_rows

    def run(self, ctx: SessionContext, content: bytes, filename: str) -> int:
        require(ctx, Capability.IMPORT_STUDENTS)
        rows = read_spreadsheet(content, filename)
        logger.info("Bulk import of %s: %d rows parsed", filename, len(rows))
        try:
            drafts = self.validate(rows)
        except BulkImportValidationError as exc:
            logger.warning("Bulk import of %s rejected: %s", filename, exc.message)
            raise
        return self.commit(drafts)

    def validate(self, rows: List[RawImportRow]) -> List[StudentDraft]:
        """Check every row; raise on the first violation. No writes happen here."""
        if not rows:
            raise BulkImportValidationError("File is empty or not recognized.")
        if len(rows) > self.max_rows:
            raise BulkImportValidationError(f"Max {self.max_rows} records allowed per upload.")

        drafts: List[StudentDraft] = []
        seen: Dict[str, int] = {}
        for idx, row in enumerate(rows):
            row_number = idx + HEADER_ROW_OFFSET

            missing = missing_fields(row)
            if missing:
                raise _row_error(row_number, f"missing fields: {', '.join(missing)}")

            draft = to_draft(row, row_number)

            email_key = draft.email.lower()
            if email_key in seen:
                raise _row_error(row_number, f"duplicate email {draft.email} (also in row {seen[email_key]})")
            seen[email_key] = row_number

            if self._email_taken(draft.email):
                raise _row_error(row_number, f"Email already registered: {draft.email}")

            drafts.append(draft)
        return drafts

    def commit(self, drafts: List[StudentDraft]) -> int:
        """Create accounts one row at a time, in file order."""
        committed = 0
        for draft in drafts:
            try:
                identity_id = self.identity.issue_credential(draft.email, draft.password, "student")
                self.store.insert_with_id(
                    "students", identity_id, new_profile(draft.to_profile(), identity_id, "student")
                )
            except Exception as exc:
                logger.exception(
                    "Bulk import stopped at row %d after %d of %d students",
                    draft.row_number, committed, len(drafts),
                )
                raise BulkImportCommitError(
                    f"Bulk upload failed after {committed} of {len(drafts)} students were created.",
                    committed=committed,
                    total=len(drafts),
                ) from exc
            committed += 1

        logger.info("Bulk import created %d students", committed)
        return committed

    def _email_taken(self, email: str) -> bool:
        if self.identity.check_email_registered(email):
            return True
        return bool(self.store.list_where("students", "email", email))
