"""
Tests for the batch scanner.
"""

import threading
import time
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest

from check_certificates.models import ProbeFailure, ProbeSuccess, Status
from check_certificates.probe import RetryPolicy
from check_certificates.scanner import check_domains, clean_hostnames, utc_now


def fake_probe(now):
    """Build a probe replacement: hosts starting with 'bad' fail."""

    def _probe(hostname, timeout=10.0, retry=None, logger=None):
        if hostname.startswith("bad"):
            return ProbeFailure(hostname=hostname, reason="Connection refused on port 443")
        return ProbeSuccess(
            hostname=hostname,
            not_before=now - timedelta(days=60),
            not_after=now + timedelta(days=30),
        )

    return _probe


class TestCleanHostnames:
    """Test input line handling."""

    def test_skips_blank_lines(self):
        """Test that blank and whitespace-only lines are dropped."""
        assert clean_hostnames(["a.com", "", "  ", "b.com\n", "\tc.com "]) == ["a.com", "b.com", "c.com"]

    def test_empty(self):
        """Test empty input."""
        assert clean_hostnames([]) == []


class TestCheckDomains:
    """Test aggregating results over many hosts."""

    def test_one_result_per_non_blank_line(self, now):
        """Test that each non-blank line yields exactly one result in order."""
        lines = ["a.example.com", "", "b.example.com"]
        with patch("check_certificates.scanner.probe_with_retries", side_effect=fake_probe(now)):
            results = check_domains(lines, now=now)

        assert [r.hostname for r in results] == ["a.example.com", "b.example.com"]

    def test_failure_does_not_abort_batch(self, now):
        """Test that a failing host becomes an error result."""
        lines = ["a.example.com", "bad.example.com", "c.example.com"]
        with patch("check_certificates.scanner.probe_with_retries", side_effect=fake_probe(now)):
            results = check_domains(lines, now=now)

        assert len(results) == 3
        assert [r.status for r in results] == [Status.OK, Status.ERROR, Status.OK]
        assert results[1].not_before == results[1].not_after == now

    def test_empty_input_warns(self, now):
        """Test that nothing to process is a warning, not an error."""
        logger = MagicMock()

        results = check_domains(["", "   "], now=now, logger=logger)

        assert results == []
        logger.warning.assert_called_once()

    def test_passes_timeout_and_retry(self, now):
        """Test that probe settings reach every probe."""
        retry = RetryPolicy(attempts=2)
        with patch(
            "check_certificates.scanner.probe_with_retries", side_effect=fake_probe(now)
        ) as mock_probe:
            check_domains(["a.example.com"], now=now, timeout=3.0, retry=retry)

        _, kwargs = mock_probe.call_args
        assert kwargs["timeout"] == 3.0
        assert kwargs["retry"] is retry

    def test_default_now_is_shared(self):
        """Test that all error results share one check time."""
        with patch(
            "check_certificates.scanner.probe_with_retries",
            side_effect=lambda hostname, **kwargs: ProbeFailure(hostname=hostname, reason="down"),
        ):
            results = check_domains(["bad1", "bad2"])

        assert results[0].not_after == results[1].not_after
        assert results[0].not_after.microsecond == 0

    def test_parallel_keeps_input_order(self, now):
        """Test that a worker pool returns results in input order."""
        delays = {"a.example.com": 0.2, "b.example.com": 0.0, "bad.example.com": 0.1}
        probe = fake_probe(now)

        def slow_probe(hostname, **kwargs):
            time.sleep(delays[hostname])
            return probe(hostname)

        with patch("check_certificates.scanner.probe_with_retries", side_effect=slow_probe):
            results = check_domains(list(delays), now=now, workers=3)

        assert [r.hostname for r in results] == list(delays)

    def test_parallel_is_bounded(self, now):
        """Test that no more than `workers` probes run at once."""
        lock = threading.Lock()
        active = 0
        peak = 0
        probe = fake_probe(now)

        def tracking_probe(hostname, **kwargs):
            nonlocal active, peak
            with lock:
                active += 1
                peak = max(peak, active)
            time.sleep(0.05)
            with lock:
                active -= 1
            return probe(hostname)

        hosts = [f"host{i}.example.com" for i in range(8)]
        with patch("check_certificates.scanner.probe_with_retries", side_effect=tracking_probe):
            results = check_domains(hosts, now=now, workers=2)

        assert len(results) == 8
        assert peak <= 2

    def test_invalid_workers(self, now):
        """Test worker count validation."""
        with pytest.raises(ValueError):
            check_domains(["a.example.com"], now=now, workers=0)


def test_utc_now():
    """Test check time is timezone-aware and second-precise."""
    value = utc_now()
    assert value.tzinfo == timezone.utc
    assert value.microsecond == 0
    assert abs(datetime.now(timezone.utc) - value) < timedelta(seconds=5)


def test_failed_host_is_not_a_warning(now):
    """Test that per-host failures stay out of the default (warning) log level."""
    logger = MagicMock()
    with patch("check_certificates.scanner.probe_with_retries", side_effect=fake_probe(now)):
        results = check_domains(["bad.example.com"], now=now, logger=logger)

    assert results[0].status == Status.ERROR
    logger.warning.assert_not_called()
