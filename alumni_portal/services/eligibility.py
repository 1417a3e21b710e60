# alumni_portal/services/eligibility.py
from typing import Iterable

from alumni_portal.schemas.session import ClassifiedSession
from alumni_portal.schemas.user import (
    ALL_DEPARTMENTS,
    ALL_YEARS,
    Viewer,
    normalize_audience,
    normalize_departments,
)


def year_eligible(target_audience: Iterable[str], year_of_study) -> bool:
    audience = normalize_audience(target_audience)
    return ALL_YEARS in audience or (year_of_study is not None and year_of_study in audience)


def department_eligible(target_departments: Iterable[str], department) -> bool:
    departments = normalize_departments(target_departments)
    return ALL_DEPARTMENTS in departments or (department is not None and department in departments)


def is_eligible(session: ClassifiedSession, viewer: Viewer) -> bool:
    """Whether the session's audience and department constraints admit the viewer.

    Both checks must pass. Time and role play no part here; see
    ``can_participate`` for the student gate.
    """
    return (
        year_eligible(session.target_audience, viewer.year_of_study)
        and department_eligible(session.target_departments, viewer.department)
    )


def can_participate(session: ClassifiedSession, viewer: Viewer) -> bool:
    """Only eligible students are ever offered attendance or feedback."""
    return viewer.is_student and is_eligible(session, viewer)
