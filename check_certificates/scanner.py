"""Run the probe over a list of hosts and collect results."""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Iterable

from .classify import classify
from .log import get_logger
from .models import CheckResult
from .probe import DEFAULT_TIMEOUT, RetryPolicy, probe_with_retries


def utc_now() -> datetime:
    """Current time in UTC, truncated to whole seconds."""
    return datetime.now(timezone.utc).replace(microsecond=0)


def clean_hostnames(hostnames: Iterable[str]) -> list[str]:
    """Strip entries and drop blank ones, keeping input order."""
    return [line.strip() for line in hostnames if line.strip()]


def check_domain(
    hostname: str,
    now: datetime,
    timeout: float = DEFAULT_TIMEOUT,
    retry: RetryPolicy | None = None,
    logger: logging.Logger | None = None,
) -> CheckResult:
    """Probe and classify a single host."""
    logger = logger or get_logger("scanner")
    logger.info("Processing '%s'", hostname)
    outcome = probe_with_retries(hostname, timeout=timeout, retry=retry, logger=logger)
    result = classify(outcome, now)
    if result.is_error:
        logger.info("Labeling '%s' as failed to get validated", hostname)
    logger.info("Finished processing '%s'", hostname)
    return result


def check_domains(
    hostnames: Iterable[str],
    now: datetime | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    retry: RetryPolicy | None = None,
    workers: int = 1,
    logger: logging.Logger | None = None,
) -> list[CheckResult]:
    """Check multiple hosts.

    Each non-blank entry yields exactly one result; a failing host is
    recorded as an error result and never aborts the batch. With more
    than one worker, hosts are probed on a bounded thread pool and results
    are still returned in input order.

    Args:
        hostnames: Hosts to check, one per entry. Blank entries are skipped.
        now: Check time shared by the whole run. Defaults to the current time.
        timeout: Per-probe connect and handshake timeout in seconds.
        retry: Retry policy for failed probes.
        workers: Maximum number of simultaneous probes.
        logger: Logger for diagnostics.

    Returns:
        List of check results in input order.
    """
    logger = logger or get_logger("scanner")
    if now is None:
        now = utc_now()
    if workers < 1:
        raise ValueError("workers must be at least 1")

    hosts = clean_hostnames(hostnames)
    if not hosts:
        logger.warning("Couldn't process anything: no hostnames given")
        return []

    def run(hostname: str) -> CheckResult:
        return check_domain(hostname, now, timeout, retry, logger)

    if workers == 1 or len(hosts) == 1:
        results = [run(hostname) for hostname in hosts]
    else:
        with ThreadPoolExecutor(max_workers=min(workers, len(hosts))) as executor:
            results = list(executor.map(run, hosts))

    logger.info("Processed %d items", len(results))
    return results
