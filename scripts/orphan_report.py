#!/usr/bin/env python3
"""
Orphaned visit log report.

Lists visit logs whose visit was deleted from the relational store and
optionally removes them.
"""

import argparse
import json
import sys
from pathlib import Path

# Add the project root to sys.path to import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from visitlog.core.config import get_document_store, validate_config
from visitlog.core.db import init_db
from visitlog.log.errors import VisitLogError
from visitlog.log.maintenance import (
    MaintenanceReport,
    cleanup_orphaned_visit_logs,
    find_orphaned_visit_logs
)


def format_report(report: MaintenanceReport) -> str:
    """Format a maintenance report for display."""
    lines = [f"Operation: {report.operation}"]
    if report.completed_at and report.started_at:
        duration = report.completed_at - report.started_at
        lines.append(f"Duration: {duration.total_seconds():.2f} seconds")

    if report.errors:
        lines.append(f"Status: FAILED ({len(report.errors)} errors)")
    elif report.issues_found > 0:
        lines.append(f"Status: ORPHANS FOUND ({report.issues_found} visit logs)")
    else:
        lines.append("Status: SUCCESS")

    if report.issues_resolved > 0:
        lines.append(f"Removed: {report.issues_resolved}")

    for visit_id in report.metadata.get("orphaned_visit_ids", []):
        lines.append(f"  missing visit: {visit_id}")

    for visit_id in report.metadata.get("corrupt_visit_ids", []):
        lines.append(f"  corrupt visitId (kept): {visit_id}")

    if report.errors:
        lines.append("Errors:")
        lines.extend(f"  - {error}" for error in report.errors)

    if report.recommendations:
        lines.append("Recommendations:")
        lines.extend(f"  - {rec}" for rec in report.recommendations)

    return "\n".join(lines)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Report visit logs whose visit no longer exists")
    parser.add_argument("--delete", action="store_true", help="Remove orphaned visit logs")
    parser.add_argument("--json", action="store_true", help="Output the report as JSON")
    args = parser.parse_args(argv)

    issues = validate_config()
    if issues:
        for issue in issues:
            print(f"ERROR: {issue}")
        return 1

    try:
        init_db()
        store = get_document_store()
        if args.delete:
            report = cleanup_orphaned_visit_logs(store)
        else:
            report = find_orphaned_visit_logs(store)
    except VisitLogError as e:
        print(f"ERROR: {e}")
        return 1

    if args.json:
        print(json.dumps(report.to_dict(), indent=2, default=str))
    else:
        print(format_report(report))

    if report.errors:
        return 1
    if report.issues_found > report.issues_resolved:
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
