"""
Per-district SBA math scatter charts.

For every district in the merged table, highlights that district's schools
against all schools in the state. Districts with more schools than fit on one
chart (e.g. Seattle) are split into numbered pages.

Usage:
    python sba_reports.py --grade 8 --min-enrollment 100
    python sba_reports.py --all
"""

from __future__ import annotations

import argparse
import math
import sys
from pathlib import Path
from typing import Callable, Iterator, List, Tuple

import pandas as pd

from sba_dataset import build_dataset
from sba_plots import chart_scatter
from sba_shared import (
    OUTPUT_DIR, DEMOGRAPHICS_FILE, SBA_FILE,
    MIN_TEST_TAKERS, MAX_SUBSET, HIGHLIGHT_COLOR, X_LABEL,
    DISTRICT, SCHOOL, LOW_INCOME, MATH_MET,
    SbaReportError,
    grade_label, report_filename, report_title, y_label,
)

ALL_REPORTS_GRADE = 8
DEFAULT_MIN_ENROLLMENT = 100


def paginate(subset: pd.DataFrame, max_subset: int = MAX_SUBSET) -> List[pd.DataFrame]:
    """Split rows into consecutive pages of at most ``max_subset`` rows, order preserved."""
    if max_subset < 1:
        raise ValueError(f"max_subset must be >= 1, got {max_subset}")
    page_count = math.ceil(len(subset) / max_subset)
    return [subset.iloc[i * max_subset:(i + 1) * max_subset] for i in range(page_count)]


def district_pages(table: pd.DataFrame, max_subset: int = MAX_SUBSET
                   ) -> Iterator[Tuple[str, int, int, pd.DataFrame]]:
    """Yield (district, page_num, page_count, page) in chart order: districts A-Z, pages 1..n."""
    for district in sorted(table[DISTRICT].dropna().unique()):
        pages = paginate(table[table[DISTRICT] == district], max_subset)
        for page_num, page in enumerate(pages, 1):
            yield district, page_num, len(pages), page


class ReportGenerator:
    """
    Builds the merged table once per run and writes one chart per district page.

    The first plotting failure aborts the run; charts already written stay on disk.
    """

    def __init__(
        self,
        min_test_takers: int = MIN_TEST_TAKERS,
        max_subset: int = MAX_SUBSET,
        output_dir: Path = OUTPUT_DIR,
        plot: Callable = chart_scatter,
        demographics_file: Path = DEMOGRAPHICS_FILE,
        sba_file: Path = SBA_FILE,
    ):
        self.min_test_takers = min_test_takers
        self.max_subset = max_subset
        self.output_dir = Path(output_dir)
        self.plot = plot
        self.demographics_file = demographics_file
        self.sba_file = sba_file

    def build_table(self, grade: int, min_enrollment: int) -> pd.DataFrame:
        return build_dataset(
            grade=grade,
            min_enrollment=min_enrollment,
            min_test_takers=self.min_test_takers,
            demographics_file=self.demographics_file,
            sba_file=self.sba_file,
        )

    def report_paths(self, table: pd.DataFrame, grade: int) -> List[Path]:
        """Chart paths a run over ``table`` writes, in generation order."""
        grade_lbl = grade_label(grade)
        return [
            self.output_dir / report_filename(district, grade_lbl, page_num, page_count)
            for district, page_num, page_count, _ in district_pages(table, self.max_subset)
        ]

    def generate_reports(self, grade: int = 8, min_enrollment: int = DEFAULT_MIN_ENROLLMENT) -> List[Path]:
        grade_lbl = grade_label(grade)
        table = self.build_table(grade, min_enrollment)

        self.output_dir.mkdir(parents=True, exist_ok=True)
        all_x = table[LOW_INCOME].to_numpy()
        all_y = table[MATH_MET].to_numpy()

        written: List[Path] = []
        for district, page_num, page_count, page in district_pages(table, self.max_subset):
            out_path = self.output_dir / report_filename(district, grade_lbl, page_num, page_count)
            self.plot(
                all_x, all_y,
                title=report_title(district, grade_lbl, min_enrollment, page_num, page_count),
                x_label=X_LABEL,
                y_label=y_label(grade_lbl),
                subset_x=page[LOW_INCOME].to_numpy(),
                subset_y=page[MATH_MET].to_numpy(),
                show_subset=True,
                color=HIGHLIGHT_COLOR,
                show_legend=True,
                legend=page[SCHOOL].tolist(),
                show_fitted_line=True,
                save_plot_filename=out_path,
                save_plot=True,
            )
            print(f"[OK] {out_path.name} ({len(page)} schools)")
            written.append(out_path)
        return written

    def generate_all_reports(self) -> List[Path]:
        # Grade 8 only, as the published report set has always been
        return self.generate_reports(grade=ALL_REPORTS_GRADE)


def generate_reports(min_enrollment: int = DEFAULT_MIN_ENROLLMENT, grade: int = 8) -> List[Path]:
    return ReportGenerator().generate_reports(grade=grade, min_enrollment=min_enrollment)


def generate_all_reports() -> List[Path]:
    return ReportGenerator().generate_all_reports()


def add_generator_arguments(parser: argparse.ArgumentParser):
    """Flags shared by every script that needs to reproduce a chart run."""
    parser.add_argument("--grade", type=int, default=8, help="Grade tested (3-8)")
    parser.add_argument("--min-enrollment", type=int, default=DEFAULT_MIN_ENROLLMENT,
                        help="Only schools with more students than this")
    parser.add_argument("--min-test-takers", type=int, default=MIN_TEST_TAKERS,
                        help="Only schools with more math and ELA test takers than this")
    parser.add_argument("--max-subset", type=int, default=MAX_SUBSET,
                        help="Schools per chart before a district is split into pages")
    parser.add_argument("--output-dir", type=Path, default=OUTPUT_DIR)
    parser.add_argument("--demographics-file", type=Path, default=DEMOGRAPHICS_FILE)
    parser.add_argument("--sba-file", type=Path, default=SBA_FILE)


def generator_from_args(args: argparse.Namespace) -> ReportGenerator:
    return ReportGenerator(
        min_test_takers=args.min_test_takers,
        max_subset=args.max_subset,
        output_dir=args.output_dir,
        demographics_file=args.demographics_file,
        sba_file=args.sba_file,
    )


def main(argv: List[str] | None = None):
    parser = argparse.ArgumentParser(description="Generate per-district SBA math scatter charts")
    add_generator_arguments(parser)
    parser.add_argument("--all", action="store_true",
                        help=f"Generate the standard report set (grade {ALL_REPORTS_GRADE}, "
                             f"{DEFAULT_MIN_ENROLLMENT}+ students)")
    args = parser.parse_args(argv)
    if args.all and (args.grade != ALL_REPORTS_GRADE or args.min_enrollment != DEFAULT_MIN_ENROLLMENT):
        parser.error("--all always uses grade 8 and the default --min-enrollment")

    print("=" * 60)
    print("SBA Math Results vs. Low-Income Students")
    print("=" * 60)

    gen = generator_from_args(args)
    try:
        if args.all:
            written = gen.generate_all_reports()
        else:
            written = gen.generate_reports(grade=args.grade, min_enrollment=args.min_enrollment)
    except SbaReportError as e:
        print(f"[ERROR] {e}")
        sys.exit(1)

    print(f"\n[OK] {len(written)} charts written")


if __name__ == "__main__":
    main()
