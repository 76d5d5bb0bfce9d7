"""
Orphaned visit log detection and cleanup.

Visit logs and visits live in different stores and deleting a visit does not
cascade. Orphans are accepted and cleaned up after the fact with these routines.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple
from uuid import UUID

from .errors import VisitLogError
from util.logging import audit_event


@dataclass
class MaintenanceReport:
    """Maintenance operation report."""
    operation: str
    started_at: datetime
    completed_at: Optional[datetime] = None
    issues_found: int = 0
    issues_resolved: int = 0
    actions_taken: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert report to dictionary for serialization."""
        data = {
            "operation": self.operation,
            "started_at": self.started_at.isoformat(),
            "issues_found": self.issues_found,
            "issues_resolved": self.issues_resolved,
            "actions_taken": self.actions_taken,
            "recommendations": self.recommendations,
            "errors": self.errors,
            "metadata": self.metadata
        }
        if self.completed_at:
            data["completed_at"] = self.completed_at.isoformat()
        return data


def _default_visit_exists(visit_id: UUID) -> bool:
    from ..visits.dao import visit_exists
    return visit_exists(visit_id)


def _canonical_visit_id(visit_id) -> Optional[UUID]:
    try:
        parsed = UUID(visit_id)
    except (ValueError, TypeError, AttributeError):
        return None
    return parsed if str(parsed) == visit_id else None


def _find_orphans(store, visit_exists: Callable[[UUID], bool],
                  report: MaintenanceReport) -> Tuple[Dict[str, List[str]], Dict[str, List[str]]]:
    """Split stored visitIds into orphans (visit gone) and corrupt ones (not a canonical UUID)."""
    orphans = {}
    corrupt = {}
    for visit_id in store.distinct_visit_ids():
        parsed = _canonical_visit_id(visit_id)
        if parsed is None:
            report.recommendations.append(f"visitId {visit_id!r} is not a UUID, inspect the documents manually")
            corrupt[visit_id] = [d.id for d in store.find_by_visit_id(visit_id)]
        elif not visit_exists(parsed):
            orphans[visit_id] = [d.id for d in store.find_by_visit_id(visit_id)]
    return orphans, corrupt


def _record_findings(report: MaintenanceReport, orphans: Dict[str, List[str]],
                     corrupt: Dict[str, List[str]]) -> None:
    report.issues_found = sum(len(ids) for ids in orphans.values()) + sum(len(ids) for ids in corrupt.values())
    report.metadata["orphaned_visit_ids"] = sorted(orphans)
    report.metadata["orphaned_visit_logs"] = sum(len(ids) for ids in orphans.values())
    report.metadata["corrupt_visit_ids"] = sorted(corrupt)
    report.metadata["corrupt_visit_logs"] = sum(len(ids) for ids in corrupt.values())


def find_orphaned_visit_logs(store, visit_exists: Callable[[UUID], bool] = None) -> MaintenanceReport:
    """Report visit logs whose visit no longer exists in the relational store."""
    visit_exists = visit_exists or _default_visit_exists
    report = MaintenanceReport(operation="orphaned_visit_log_scan", started_at=datetime.now())

    try:
        orphans, corrupt = _find_orphans(store, visit_exists, report)
    except VisitLogError as e:
        report.errors.append(str(e))
        report.completed_at = datetime.now()
        return report

    _record_findings(report, orphans, corrupt)
    if orphans:
        report.recommendations.append("Run with --delete to remove orphaned visit logs")

    report.completed_at = datetime.now()
    return report


def cleanup_orphaned_visit_logs(store, visit_exists: Callable[[UUID], bool] = None) -> MaintenanceReport:
    """
    Delete visit logs whose visit no longer exists.

    Documents with a corrupt visitId are reported but never deleted.
    """
    visit_exists = visit_exists or _default_visit_exists
    report = MaintenanceReport(operation="orphaned_visit_log_cleanup", started_at=datetime.now())
    orphans, corrupt = {}, {}

    try:
        orphans, corrupt = _find_orphans(store, visit_exists, report)
        _record_findings(report, orphans, corrupt)

        for visit_id, visit_log_ids in orphans.items():
            if not visit_log_ids:
                continue
            store.delete_all_by_id(visit_log_ids)
            report.issues_resolved += len(visit_log_ids)
            report.actions_taken.append(f"Removed {len(visit_log_ids)} visit logs of missing visit {visit_id}")
    except VisitLogError as e:
        report.errors.append(str(e))

    audit_event(
        event_type="maintenance.orphan_cleanup",
        identifiers={"operation": report.operation},
        payload={
            "issues_found": report.issues_found,
            "issues_resolved": report.issues_resolved,
            "corrupt_visit_logs": sum(len(ids) for ids in corrupt.values())
        }
    )

    report.completed_at = datetime.now()
    return report
