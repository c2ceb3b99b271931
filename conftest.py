"""Shared fixtures: tiny demographics / SBA CSV pairs written to tmp_path."""
from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest

from sba_shared import (
    BUILDING, DISTRICT, SCHOOL, LOW_INCOME, ENROLLMENT, GRADE,
    MATH_MET, MATH_L4, MATH_TESTED, ELA_MET, ELA_L4, ELA_TESTED,
)


def demo_row(building, district, school, enrollment, low_income):
    return {BUILDING: building, DISTRICT: district, SCHOOL: school,
            ENROLLMENT: enrollment, LOW_INCOME: low_income, "County": "King"}


def sba_row(building, grade, math_met, math_tested, ela_tested, ela_met=50.0):
    return {BUILDING: building, GRADE: grade,
            MATH_MET: math_met, MATH_L4: math_met / 2, MATH_TESTED: math_tested,
            ELA_MET: ela_met, ELA_L4: ela_met / 2, ELA_TESTED: ela_tested,
            "TestAdministration": "SBAC"}


def write_sources(tmp_path, demo_rows, sba_rows):
    demo_path = tmp_path / "demographics.csv"
    sba_path = tmp_path / "sba.csv"
    pd.DataFrame(demo_rows).to_csv(demo_path, index=False)
    pd.DataFrame(sba_rows).to_csv(sba_path, index=False)
    return demo_path, sba_path


@pytest.fixture
def small_sources(tmp_path):
    """5 schools in both files; 3 pass grade=8, min_enrollment=200, min_test_takers=10."""
    demo = [
        demo_row(1001, "Alpha SD", "Alpha Middle", 450, 62.5),
        demo_row(1002, "Alpha SD", "Alpha Junior High", 250, 30.0),
        demo_row(1003, "Beta SD", "Beta Middle", 600, 20.0),
        demo_row(1004, "Beta SD", "Beta Academy", 150, 40.0),     # too small
        demo_row(1005, "Gamma SD", "Gamma Middle", 300, 45.0),
    ]
    sba = [
        sba_row(1001, 8, 35.0, 120, 118),
        sba_row(1002, 8, 55.0, 80, 81),
        sba_row(1003, 8, 72.0, 150, 149),
        sba_row(1004, 8, 44.0, 40, 40),
        sba_row(1005, 8, 20.0, 8, 30),                            # too few math testers
    ]
    return write_sources(tmp_path, demo, sba)
