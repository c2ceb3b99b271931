"""
PDF bundle of the per-district SBA scatter charts.

Layout:
- Cover page: heading, filter description and a district summary table
- One chart per page, scaled to the frame width
- Page number footer on every page
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List
from xml.sax.saxutils import escape

import numpy as np
import pandas as pd
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Image, PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from sba_dataset import district_summary
from sba_reports import add_generator_arguments, generator_from_args
from sba_shared import (
    SBA_YEAR,
    DISTRICT, LOW_INCOME, MATH_MET,
    SbaReportError, grade_label,
)

# ---- Styles ----
styles = getSampleStyleSheet()
style_title_main = ParagraphStyle("title_main", parent=styles["Heading1"], fontSize=14, leading=17, spaceAfter=2)
style_title_sub  = ParagraphStyle("title_sub",  parent=styles["Normal"],   fontSize=12, leading=14, spaceAfter=6)
style_body       = ParagraphStyle("body",       parent=styles["Normal"],   fontSize=9,  leading=12)
style_num        = ParagraphStyle("num",        parent=styles["Normal"],   fontSize=9,  leading=12, alignment=2)
style_hdr_left   = ParagraphStyle("hdr_left",   parent=styles["Normal"],   fontSize=9,  leading=12, alignment=0)
style_hdr_right  = ParagraphStyle("hdr_right",  parent=styles["Normal"],   fontSize=9,  leading=12, alignment=2)

SOURCE_LINE = "Source: Office of Superintendent of Public Instruction, Washington State"


def draw_footer(canvas, doc):
    canvas.saveState()
    canvas.setFont("Helvetica", 8)
    y1 = 0.6 * inch
    x_right = doc.pagesize[0] - doc.rightMargin
    canvas.drawRightString(x_right, y1, f"Page {canvas.getPageNumber()}")
    canvas.restoreState()


def fmt_pct(v: float) -> str:
    if v is None or (isinstance(v, float) and np.isnan(v)): return "—"
    return f"{v:.1f}%"


def _build_summary_table(summary: pd.DataFrame, doc_width: float) -> Table:
    data = [[
        Paragraph("<b>District</b>", style_hdr_left),
        Paragraph("<b>Schools</b>", style_hdr_right),
        Paragraph("<b>Avg % Low Income</b>", style_hdr_right),
        Paragraph("<b>Avg % Met Math</b>", style_hdr_right),
    ]]
    for _, row in summary.iterrows():
        data.append([
            Paragraph(escape(str(row[DISTRICT])), style_body),
            Paragraph(f"{int(row['Schools'])}", style_num),
            Paragraph(fmt_pct(row[LOW_INCOME]), style_num),
            Paragraph(fmt_pct(row[MATH_MET]), style_num),
        ])

    tbl = Table(data, colWidths=[doc_width * 0.52, doc_width * 0.12, doc_width * 0.18, doc_width * 0.18],
                repeatRows=1)
    tbl.setStyle(TableStyle([
        ("LINEBELOW", (0, 0), (-1, 0), 0.5, colors.black),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#F5F5F5")]),
        ("LEFTPADDING", (0, 0), (-1, -1), 2),
        ("RIGHTPADDING", (0, 0), (-1, -1), 2),
        ("TOPPADDING", (0, 0), (-1, -1), 1.5),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 1.5),
    ]))
    return tbl


def build_pdf(chart_paths: List[Path], summary: pd.DataFrame, out_path: Path,
              grade_lbl: str, min_enrollment: int) -> Path | None:
    """Write the cover page and one page per chart; returns None when there are no charts."""
    if not chart_paths:
        print("[WARN] No charts to write.")
        return None

    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    doc = SimpleDocTemplate(str(out_path), pagesize=A4,
        leftMargin=0.5*inch, rightMargin=0.5*inch, topMargin=0.5*inch, bottomMargin=0.75*inch)

    story: List = [
        Paragraph(f"{SBA_YEAR} SBA Math Results vs. Low-Income Students", style_title_main),
        Paragraph(f"WA public schools with {escape(grade_lbl)} graders and {min_enrollment}+ students",
                  style_title_sub),
        Paragraph(escape(SOURCE_LINE), style_body),
        Spacer(0, 12),
    ]
    if not summary.empty:
        story.append(_build_summary_table(summary, doc.width))

    for img_path in chart_paths:
        story.append(PageBreak())
        im = Image(str(img_path))
        ratio = im.imageHeight / float(im.imageWidth)
        im.drawWidth = doc.width
        im.drawHeight = doc.width * ratio
        max_chart_h = doc.height * 0.95
        if im.drawHeight > max_chart_h:
            im.drawHeight = max_chart_h
            im.drawWidth = im.drawHeight / ratio
        story.append(im)

    doc.build(story, onFirstPage=draw_footer, onLaterPages=draw_footer)
    print(f"[OK] {out_path} ({len(chart_paths)} charts)")
    return out_path


def pdf_filename(grade_lbl: str) -> str:
    return f"SBA {grade_lbl} Grade Math {SBA_YEAR}.pdf"


# ---- Main ----
def main(argv: List[str] | None = None):
    parser = argparse.ArgumentParser(description="Bundle SBA district charts into one PDF")
    add_generator_arguments(parser)
    args = parser.parse_args(argv)

    gen = generator_from_args(args)
    grade_lbl = grade_label(args.grade)
    try:
        table = gen.build_table(args.grade, args.min_enrollment)
    except SbaReportError as e:
        print(f"[ERROR] {e}")
        sys.exit(1)

    # Only charts this table produces; older runs with other thresholds share the directory
    expected = gen.report_paths(table, args.grade)
    charts = [p for p in expected if p.exists()]
    if len(charts) < len(expected):
        print(f"[WARN] {len(expected) - len(charts)} of {len(expected)} charts not found in {args.output_dir}")
    build_pdf(charts, district_summary(table), args.output_dir / pdf_filename(grade_lbl),
              grade_lbl, args.min_enrollment)


if __name__ == "__main__":
    main()
