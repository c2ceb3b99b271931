from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, List, Optional

import pandas as pd

# ---------------- Paths ----------------
DATA_DIR = Path("./DataFilesRaw")
OUTPUT_DIR = Path("./ReportsAutoGenerated")
DEMOGRAPHICS_FILE = DATA_DIR / "1_2_Demographic Information by School 2015.csv"
SBA_FILE = DATA_DIR / "2_23_SBA Scores by School 2014-2015.csv"

# ---------------- Report defaults ----------------
MIN_TEST_TAKERS = 10
MAX_SUBSET = 38        # schools per chart; legend gets unreadable past this
HIGHLIGHT_COLOR = "lightgray"
SBA_YEAR = 2015

# ---------------- Columns ----------------
BUILDING = "BuildingNumber"
DISTRICT = "District"
SCHOOL = "School"
LOW_INCOME = "PercentFreeorReducedPricedMeals"
ENROLLMENT = "TotalEnrollment"
GRADE = "GradeTested"
MATH_MET = "MathPercentMetStandardIncludingPrevPass"
MATH_L4 = "MathPercentLevel4"
MATH_TESTED = "MathTotalTested"
ELA_MET = "ELAPercentMetStandardIncludingPrevPass"
ELA_L4 = "ELAPercentLevel4"
ELA_TESTED = "ELATotalTested"

DEMOGRAPHIC_COLUMNS = [LOW_INCOME, DISTRICT, SCHOOL, BUILDING, ENROLLMENT]
SBA_COLUMNS = [GRADE, MATH_MET, MATH_L4, MATH_TESTED, ELA_MET, ELA_L4, ELA_TESTED, BUILDING]
FINAL_COLUMNS = [
    BUILDING, LOW_INCOME, DISTRICT, SCHOOL, ENROLLMENT,
    MATH_MET, MATH_L4, MATH_TESTED,
    ELA_MET, ELA_L4, ELA_TESTED,
]

# Coerced to numbers on load; suppressed cells ("N<10", "NULL") become NaN
DEMOGRAPHIC_NUMERIC = [LOW_INCOME, ENROLLMENT]
SBA_NUMERIC = [GRADE, MATH_MET, MATH_L4, MATH_TESTED, ELA_MET, ELA_L4, ELA_TESTED]

# ---------------- Chart text ----------------
X_LABEL = "% low income students \n \n Source: Office of Superintendent of Public Instruction, Washington State"


# ---------------- Errors ----------------
class SbaReportError(Exception):
    """Base class for every failure surfaced by the report pipeline."""


class DataSourceError(SbaReportError):
    """A source CSV is missing, unreadable, or lacks a required column."""


class EmptyResultError(SbaReportError):
    """No school survived the join and threshold filters."""


class PlottingError(SbaReportError):
    """The scatter chart could not be drawn or written."""


# ---------------- Loaders ----------------
def load_table(
    path: Path,
    columns: List[str],
    row_filter: Optional[Callable[[pd.DataFrame], pd.Series]] = None,
    numeric: Iterable[str] = (),
) -> pd.DataFrame:
    """
    Load a CSV, keep the rows selected by ``row_filter`` and project to ``columns``.

    Both source files go through here so the read/check/project steps stay in
    one place.

    Args:
        path: CSV file with a header row
        columns: Columns to keep, in output order
        row_filter: Optional callable returning a boolean mask for the loaded frame
        numeric: Columns to coerce with ``pd.to_numeric(errors="coerce")``

    Returns:
        The filtered, projected DataFrame

    Raises:
        DataSourceError: If the file can't be read or a column is missing
    """
    path = Path(path)
    try:
        df = pd.read_csv(path)
    except (OSError, UnicodeDecodeError, pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        raise DataSourceError(f"Could not read {path}: {e}") from e

    df.columns = [str(c).strip() for c in df.columns]
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise DataSourceError(f"{path.name} is missing required column(s): {', '.join(missing)}")

    df = df.copy()
    for c in numeric:
        df[c] = pd.to_numeric(df[c], errors="coerce")

    if row_filter is not None:
        df = df[row_filter(df)]

    return df[columns]


# ---------------- Labels & file names ----------------
def grade_label(grade: int) -> str:
    # Only grade 3 gets a proper suffix; reports have always read "1th"/"2th"
    if grade == 3:
        return "3rd"
    return f"{grade}th"


def _page_suffix(page: int, page_count: int) -> str:
    return f" {page} of {page_count}" if page_count > 1 else ""


def report_filename(district: str, grade_lbl: str, page: int = 1, page_count: int = 1) -> str:
    return f"SBA {district} Schools {grade_lbl} Grade Math {SBA_YEAR}{_page_suffix(page, page_count)}.png"


def report_title(district: str, grade_lbl: str, min_enrollment: int,
                 page: int = 1, page_count: int = 1) -> str:
    return (
        f"WA Public Schools with {grade_lbl} Graders with {min_enrollment}+ Students \n "
        f"{SBA_YEAR} SBA Results ({district} Schools Highlighted{_page_suffix(page, page_count)})"
    )


def y_label(grade_lbl: str) -> str:
    return f"% of {grade_lbl} Graders that Met Standard in Math"
