"""Turn probe outcomes into check results."""

from datetime import datetime

from .models import CheckResult, ProbeFailure, ProbeOutcome, ProbeSuccess, Status


def classify(outcome: ProbeOutcome, now: datetime) -> CheckResult:
    """Classify a probe outcome.

    A failure is recorded with both timestamps set to ``now``, the time
    the check ran.

    Args:
        outcome: Result of probing one host.
        now: Check time.

    Returns:
        The classified result.
    """
    if isinstance(outcome, ProbeSuccess):
        return CheckResult(
            hostname=outcome.hostname,
            not_before=outcome.not_before,
            not_after=outcome.not_after,
            status=Status.OK,
        )
    if isinstance(outcome, ProbeFailure):
        return CheckResult(
            hostname=outcome.hostname,
            not_before=now,
            not_after=now,
            status=Status.ERROR,
            error=outcome.reason,
        )
    raise TypeError(f"Unknown probe outcome: {outcome!r}")
