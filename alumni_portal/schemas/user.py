# alumni_portal/schemas/user.py
import re
from enum import Enum
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

class UserRoleEnum(str, Enum):
    ADMIN = "admin"
    STUDENT = "student"
    ALUMNI = "alumni"
    FACULTY = "faculty"

class YearOfStudy(str, Enum):
    E1 = "E-1"
    E2 = "E-2"
    E3 = "E-3"
    E4 = "E-4"

class Department(str, Enum):
    ALL = "ALL"
    CSE = "CSE"
    ECE = "ECE"
    EEE = "EEE"
    CIVIL = "CIVIL"
    MECH = "MECH"
    CHEM = "CHEM"
    MME = "MME"

ALL_YEARS = "all"
ALL_DEPARTMENTS = Department.ALL.value

# E1, e-1, E 1 all mean E-1
_YEAR_PATTERN = re.compile(r"^E\s*-?\s*([1-4])$", re.IGNORECASE)


def normalize_year(value: Any) -> Optional[str]:
    """Map a year-of-study code onto its canonical ``E-n`` form.

    ``all`` is case-folded; unknown strings are kept (stripped) so that they
    simply never match; non-strings become ``None``.
    """
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value:
        return None
    if value.lower() == ALL_YEARS:
        return ALL_YEARS
    match = _YEAR_PATTERN.match(value)
    if match:
        return YearOfStudy(f"E-{match.group(1)}").value
    return value


def normalize_department(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    return value.strip().upper() or None


def _as_list(value: Any) -> Optional[List[Any]]:
    if value is None:
        return None
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


def normalize_audience(value: Any) -> List[str]:
    """Scalar or list target audience -> list of canonical year codes.

    Absent audience means everyone. An explicit empty list stays empty.
    """
    values = _as_list(value)
    if values is None or value == "":
        return [ALL_YEARS]
    normalized = (normalize_year(v) for v in values)
    return [v for v in normalized if v is not None]


def normalize_departments(value: Any) -> List[str]:
    """Scalar or list target departments -> list of upper-case codes."""
    values = _as_list(value)
    if values is None or value == "":
        return [ALL_DEPARTMENTS]
    normalized = (normalize_department(v) for v in values)
    return [v for v in normalized if v is not None]


class Viewer(BaseModel):
    """The authenticated user looking at the session board."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = Field(default=None, alias="_id")
    full_name: Optional[str] = Field(default=None, alias="fullName")
    email: Optional[str] = None
    role: Optional[UserRoleEnum] = None
    year_of_study: Optional[str] = Field(default=None, alias="yearOfStudy")
    department: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        return None if v is None else str(v)

    @field_validator("role", mode="before")
    @classmethod
    def lower_role(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            return v if v in {r.value for r in UserRoleEnum} else None
        return v

    @field_validator("year_of_study", mode="before")
    @classmethod
    def canonical_year(cls, v):
        return normalize_year(v)

    @field_validator("department", mode="before")
    @classmethod
    def canonical_department(cls, v):
        return normalize_department(v)

    @property
    def is_student(self) -> bool:
        return self.role == UserRoleEnum.STUDENT

    @property
    def is_admin(self) -> bool:
        return self.role == UserRoleEnum.ADMIN
