"""
Tests for audience/department eligibility.
"""

import pytest

from alumni_portal.schemas.session import Bucket, ClassifiedSession
from alumni_portal.schemas.user import Viewer, normalize_audience, normalize_departments, normalize_year
from alumni_portal.services.eligibility import can_participate, is_eligible


def card(audience, departments):
    return ClassifiedSession(
        id="s1",
        status="upcoming",
        bucket=Bucket.UPCOMING,
        target_audience=normalize_audience(audience),
        target_departments=normalize_departments(departments),
    )


class TestIsEligible:

    def test_wildcards_admit_any_student(self, student):
        assert is_eligible(card(["all"], ["ALL"]), student) is True

    def test_matching_year_and_department(self, student):
        assert is_eligible(card(["E-2", "E-3"], ["CSE", "ECE"]), student) is True

    def test_department_mismatch_fails_even_with_open_year(self):
        viewer = Viewer(role="student", yearOfStudy="E-2", department="ECE")
        assert is_eligible(card(["all"], ["CSE"]), viewer) is False

    def test_year_mismatch_fails_even_with_open_department(self, student):
        assert is_eligible(card(["E-4"], ["ALL"]), student) is False

    def test_legacy_year_code_matches(self):
        viewer = Viewer(role="student", yearOfStudy="E2", department="cse")
        assert viewer.year_of_study == "E-2"
        assert viewer.department == "CSE"
        assert is_eligible(card("E2", "CSE"), viewer) is True

    def test_empty_audience_admits_nobody(self, student):
        assert is_eligible(card([], ["ALL"]), student) is False

    def test_viewer_without_year_needs_open_audience(self):
        viewer = Viewer(role="student", department="CSE")
        assert is_eligible(card(["all"], ["CSE"]), viewer) is True
        assert is_eligible(card(["E-1"], ["CSE"]), viewer) is False


class TestCanParticipate:

    def test_student_gate(self, student, admin, alumni):
        session = card(["all"], ["ALL"])
        assert can_participate(session, student) is True
        assert can_participate(session, admin) is False
        assert can_participate(session, alumni) is False

    def test_unknown_role_is_not_a_student(self):
        viewer = Viewer(role="visitor", yearOfStudy="E-1", department="CSE")
        assert viewer.role is None
        assert can_participate(card(["all"], ["ALL"]), viewer) is False


class TestNormalizers:

    @pytest.mark.parametrize("value,expected", [
        ("E-1", "E-1"),
        ("E1", "E-1"),
        ("e 3", "E-3"),
        ("All", "all"),
        ("E-9", "E-9"),
        ("", None),
        (None, None),
        (3, None),
    ])
    def test_normalize_year(self, value, expected):
        assert normalize_year(value) == expected

    def test_normalize_audience_shapes(self):
        assert normalize_audience(None) == ["all"]
        assert normalize_audience("") == ["all"]
        assert normalize_audience("E3") == ["E-3"]
        assert normalize_audience(("E-1", "E2")) == ["E-1", "E-2"]
        assert normalize_audience([]) == []

    def test_normalize_departments_shapes(self):
        assert normalize_departments(None) == ["ALL"]
        assert normalize_departments("mech") == ["MECH"]
        assert normalize_departments(["cse", " ece "]) == ["CSE", "ECE"]
