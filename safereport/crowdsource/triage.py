"""
Triage workflow
Status transitions for reports, restricted to authenticated operators
"""

import logging
from typing import Dict, FrozenSet, Optional

from safereport.auth.operators import Operator, require_operator
from safereport.core.constants import ReportStatus
from safereport.core.exceptions import InvalidTransition, NotFound
from safereport.crowdsource.queries import ReportDetail
from safereport.database.store import ReportStore

logger = logging.getLogger(__name__)

# RESOLVED and DISMISSED are terminal
TRANSITIONS: Dict[ReportStatus, FrozenSet[ReportStatus]] = {
    ReportStatus.PENDING: frozenset({ReportStatus.IN_PROGRESS, ReportStatus.DISMISSED}),
    ReportStatus.IN_PROGRESS: frozenset({ReportStatus.RESOLVED, ReportStatus.DISMISSED}),
    ReportStatus.RESOLVED: frozenset(),
    ReportStatus.DISMISSED: frozenset(),
}


def allowed_transitions(current: ReportStatus, strict: bool = True) -> FrozenSet[ReportStatus]:
    """
    Statuses reachable from current.

    With strict=False every other status is reachable, so operators can
    reopen or correct a report.
    """
    if strict:
        return TRANSITIONS[current]
    return frozenset(s for s in ReportStatus if s is not current)


def is_transition_allowed(current: ReportStatus, requested: ReportStatus, strict: bool = True) -> bool:
    return requested in allowed_transitions(current, strict)


class TriageWorkflow:
    """
    Applies operator status changes to reports.

    Each change is a read-check-write against the store guarded by the
    report's version: when two operators race, the second write to arrive
    fails with Conflict instead of overwriting the first.
    """

    def __init__(self, store: ReportStore, strict: bool = True):
        """
        Initialize triage workflow.

        Args:
            store: Report store
            strict: Enforce the transition table (False allows any change)
        """
        self.store = store
        self.strict = strict

    def transition(
        self,
        report_id: str,
        actor: Optional[Operator],
        new_status: ReportStatus,
        expected_version: Optional[int] = None,
    ) -> ReportDetail:
        """
        Change a report's status.

        Args:
            report_id: External report identifier
            actor: Operator performing the change
            new_status: Requested status
            expected_version: Version the operator last saw; defaults to the
                version read here

        Returns:
            Updated report

        Raises:
            Unauthorized: actor is not an authenticated operator (checked first)
            NotFound: unknown report_id
            InvalidTransition: requested status not reachable
            Conflict: report changed since expected_version
        """
        require_operator(actor)

        report = self.store.find_by_report_id(report_id)
        if report is None:
            raise NotFound()

        current = report.status
        if not is_transition_allowed(current, new_status, self.strict):
            raise InvalidTransition(
                f"Cannot change status from {current.value} to {new_status.value}"
            )

        version = report.version if expected_version is None else expected_version
        updated = self.store.update_status(report_id, new_status, expected_version=version)

        logger.info(
            f"Report {report_id} status: {current.value} -> {new_status.value} "
            f"by operator {actor.id}"
        )
        return ReportDetail.from_model(updated)
