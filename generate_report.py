"""
Master script to generate the complete SBA district report.

This script runs each step as its own process:
1. Per-district scatter charts (sba_reports.py)
2. PDF composition (compose_pdf.py)

Usage:
    python generate_report.py
    python generate_report.py --grade 5 --min-enrollment 200
"""

import argparse
import subprocess
import sys
import time
from pathlib import Path
from typing import List, Optional

from sba_shared import OUTPUT_DIR, MIN_TEST_TAKERS, MAX_SUBSET

SCRIPT_DIR = Path(__file__).resolve().parent

# Define the pipeline of scripts to execute
PIPELINE = [
    ("sba_reports.py", "District scatter charts"),
    ("compose_pdf.py", "PDF composition"),
]


def run_script(script_path: Path, description: str, extra_args: List[str]) -> bool:
    """
    Run a Python script and return success status.

    Args:
        script_path: Path to the script to execute
        description: Human-readable description for logging
        extra_args: Command-line arguments passed through to the script

    Returns:
        True if script succeeded, False otherwise
    """
    print("\n" + "=" * 70)
    print(f"Running: {description}")
    print(f"Script: {script_path}")
    print("=" * 70)

    try:
        subprocess.run(
            [sys.executable, str(script_path), *extra_args],
            check=True,
            capture_output=False,  # Show output in real-time
            text=True
        )
        print(f"[OK] {description} completed successfully")
        return True
    except subprocess.CalledProcessError as e:
        print(f"[FAIL] {description} failed with exit code {e.returncode}")
        return False
    except FileNotFoundError:
        print(f"[FAIL] Script not found: {script_path}")
        return False


def main(argv: Optional[List[str]] = None):
    """Execute the complete report generation pipeline."""
    parser = argparse.ArgumentParser(description="Generate the SBA district report")
    parser.add_argument("--grade", type=int, default=8)
    parser.add_argument("--min-enrollment", type=int, default=100)
    parser.add_argument("--min-test-takers", type=int, default=MIN_TEST_TAKERS)
    parser.add_argument("--max-subset", type=int, default=MAX_SUBSET)
    parser.add_argument("--output-dir", type=Path, default=OUTPUT_DIR)
    args = parser.parse_args(argv)
    # Both steps must see the same thresholds so the PDF matches the charts
    extra_args = [
        "--grade", str(args.grade),
        "--min-enrollment", str(args.min_enrollment),
        "--min-test-takers", str(args.min_test_takers),
        "--max-subset", str(args.max_subset),
        "--output-dir", str(args.output_dir),
    ]

    print("\n" + "=" * 70)
    print("SBA DISTRICT REPORT GENERATOR")
    print("=" * 70)
    print(f"Working directory: {Path.cwd()}")
    print(f"Grade: {args.grade}, min enrollment: {args.min_enrollment}")

    missing_scripts = [s for s, _ in PIPELINE if not (SCRIPT_DIR / s).exists()]
    if missing_scripts:
        print("\n[ERROR] Missing required scripts:")
        for script in missing_scripts:
            print(f"  - {script}")
        sys.exit(1)

    start_time = time.time()
    failed_steps: List[str] = []

    for i, (script_name, description) in enumerate(PIPELINE, 1):
        print(f"\n[Step {i}/{len(PIPELINE)}]")
        if not run_script(SCRIPT_DIR / script_name, description, extra_args):
            failed_steps.append(description)
            print(f"\n[FAIL] Pipeline failed at step {i}: {description}")
            print("Stopping execution.")
            break

    elapsed = time.time() - start_time
    print("\n" + "=" * 70)
    print("PIPELINE SUMMARY")
    print("=" * 70)
    print(f"Total time: {elapsed:.1f} seconds")

    if failed_steps:
        print("Status: FAILED")
        print(f"Failed steps: {', '.join(failed_steps)}")
        sys.exit(1)

    print("Status: SUCCESS")
    print(f"\nGenerated files in {args.output_dir}/")
    print("\n[OK] Report generation complete!")


if __name__ == "__main__":
    main()
