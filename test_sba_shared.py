"""Tests for loaders, labels and report name templates."""
from __future__ import annotations

import pandas as pd
import pytest

from sba_shared import (
    DataSourceError, load_table, grade_label, report_filename, report_title, y_label,
)


def test_grade_label():
    assert grade_label(3) == "3rd"
    assert grade_label(8) == "8th"
    assert grade_label(5) == "5th"
    # Only grade 3 is special-cased
    assert grade_label(1) == "1th"
    assert grade_label(2) == "2th"


def test_report_filename_single_page():
    assert report_filename("Seattle", "8th") == "SBA Seattle Schools 8th Grade Math 2015.png"
    assert report_filename("Seattle", "8th", 1, 1) == "SBA Seattle Schools 8th Grade Math 2015.png"


def test_report_filename_paginated():
    assert report_filename("Seattle", "8th", 2, 3) == "SBA Seattle Schools 8th Grade Math 2015 2 of 3.png"


def test_report_title():
    single = report_title("Tacoma", "3rd", 100)
    assert single == ("WA Public Schools with 3rd Graders with 100+ Students \n "
                      "2015 SBA Results (Tacoma Schools Highlighted)")
    paged = report_title("Tacoma", "3rd", 100, 1, 2)
    assert paged.endswith("(Tacoma Schools Highlighted 1 of 2)")


def test_y_label():
    assert y_label("8th") == "% of 8th Graders that Met Standard in Math"


def test_load_table_projects_filters_and_coerces(tmp_path):
    path = tmp_path / "t.csv"
    path.write_text(" A ,B,C\n1,x,5\n2,y,N<10\n3,z,7\n", encoding="utf-8")

    out = load_table(path, ["C", "A"], row_filter=lambda df: df["A"] > 1, numeric=["C"])

    assert list(out.columns) == ["C", "A"]
    assert out["A"].tolist() == [2, 3]
    assert pd.isna(out["C"].iloc[0])
    assert out["C"].iloc[1] == 7


def test_load_table_missing_file(tmp_path):
    with pytest.raises(DataSourceError):
        load_table(tmp_path / "nope.csv", ["A"])


def test_load_table_empty_file(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")
    with pytest.raises(DataSourceError):
        load_table(path, ["A"])


def test_load_table_missing_column(tmp_path):
    path = tmp_path / "t.csv"
    path.write_text("A,B\n1,2\n", encoding="utf-8")
    with pytest.raises(DataSourceError, match="C"):
        load_table(path, ["A", "C"])
