"""
Merged SBA + demographics table for one tested grade.

Input data files used:
    DataFilesRaw/1_2_Demographic Information by School 2015.csv
    DataFilesRaw/2_23_SBA Scores by School 2014-2015.csv

The result has one row per school, restricted to schools large enough to
chart, sorted by the share of low-income students.
"""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from sba_shared import (
    DEMOGRAPHICS_FILE, SBA_FILE,
    DEMOGRAPHIC_COLUMNS, DEMOGRAPHIC_NUMERIC, SBA_COLUMNS, SBA_NUMERIC, FINAL_COLUMNS,
    BUILDING, DISTRICT, SCHOOL, LOW_INCOME, ENROLLMENT, GRADE,
    MATH_MET, MATH_TESTED, ELA_TESTED,
    EmptyResultError, load_table,
)


def build_dataset(
    grade: int = 8,
    min_enrollment: int = 200,
    min_test_takers: int = 10,
    demographics_file: Path = DEMOGRAPHICS_FILE,
    sba_file: Path = SBA_FILE,
) -> pd.DataFrame:
    """
    Return SBA results merged with school demographics for the selected grade.

    Args:
        grade: Grade to filter the SBA results on
        min_enrollment: Schools must have strictly more students than this
        min_test_takers: Math and ELA test takers must both exceed this
        demographics_file: Demographics CSV
        sba_file: SBA scores CSV

    Returns:
        DataFrame with FINAL_COLUMNS, ascending by PercentFreeorReducedPricedMeals

    Raises:
        DataSourceError: If a source file is unreadable or lacks a column
        EmptyResultError: If no school survives the filters
    """
    demographics = load_table(demographics_file, DEMOGRAPHIC_COLUMNS, numeric=DEMOGRAPHIC_NUMERIC)
    sba = load_table(
        sba_file, SBA_COLUMNS,
        row_filter=lambda df: df[GRADE] == grade,
        numeric=SBA_NUMERIC,
    )

    # sort=True orders by building number; that order breaks income ties below
    merged = pd.merge(sba, demographics, on=BUILDING, how="inner", sort=True)

    keep = (
        (merged[ENROLLMENT] > min_enrollment)
        & (merged[MATH_TESTED] > min_test_takers)
        & (merged[ELA_TESTED] > min_test_takers)
        & merged[SCHOOL].notna()
    )
    out = merged.loc[keep, FINAL_COLUMNS]

    if out.empty:
        raise EmptyResultError(
            f"No grade {grade} schools with enrollment > {min_enrollment} "
            f"and more than {min_test_takers} test takers"
        )

    out = out.sort_values(LOW_INCOME, kind="mergesort").reset_index(drop=True)
    print(f"  Grade {grade}: {len(sba)} SBA rows, {len(demographics)} schools, "
          f"{len(merged)} matched, {len(out)} kept")
    return out


def district_summary(table: pd.DataFrame) -> pd.DataFrame:
    """Per-district school count and mean low-income / math-met percentages."""
    if table.empty:
        return pd.DataFrame(columns=[DISTRICT, "Schools", LOW_INCOME, MATH_MET])
    return (
        table.groupby(DISTRICT, sort=True)
        .agg(**{
            "Schools": (SCHOOL, "size"),
            LOW_INCOME: (LOW_INCOME, "mean"),
            MATH_MET: (MATH_MET, "mean"),
        })
        .reset_index()
    )
