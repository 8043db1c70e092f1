"""TLS probe: fetch a host's leaf certificate and read its validity window."""

import logging
import socket
import ssl
import time
from datetime import datetime
from typing import Callable

from cryptography import x509
from pydantic import BaseModel, Field

from .log import get_logger
from .models import ProbeFailure, ProbeOutcome, ProbeSuccess

HTTPS_PORT = 443
DEFAULT_TIMEOUT = 10.0


class RetryPolicy(BaseModel):
    """Bounded retry with exponential backoff between failed attempts."""
    attempts: int = Field(default=1, ge=1, description="Total probe attempts per host")
    backoff: float = Field(default=1.0, ge=0, description="Delay before the second attempt")
    factor: float = Field(default=2.0, ge=1, description="Delay multiplier per attempt")

    def delay(self, attempt: int) -> float:
        """Delay to wait after the given failed attempt (1-based)."""
        return self.backoff * self.factor ** (attempt - 1)


def get_certificate(
    hostname: str,
    port: int = HTTPS_PORT,
    timeout: float = DEFAULT_TIMEOUT,
) -> x509.Certificate:
    """Fetch the leaf X.509 certificate presented by a host.

    Verification is disabled so expired and self-signed certificates can
    still be read.

    Args:
        hostname: Host to connect to, also sent as SNI.
        port: Port number.
        timeout: Connect and handshake timeout in seconds.

    Returns:
        Parsed X.509 certificate.

    Raises:
        Various socket and SSL exceptions on failure.
    """
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE

    with socket.create_connection((hostname, port), timeout=timeout) as sock:
        with context.wrap_socket(sock, server_hostname=hostname) as ssock:
            cert_der = ssock.getpeercert(binary_form=True)
            if cert_der is None:
                raise ssl.SSLError("No certificate received")
            return x509.load_der_x509_certificate(cert_der)


def extract_validity(cert: x509.Certificate) -> tuple[datetime, datetime]:
    """Return (not_before, not_after) as timezone-aware UTC datetimes."""
    return cert.not_valid_before_utc, cert.not_valid_after_utc


def probe(
    hostname: str,
    timeout: float = DEFAULT_TIMEOUT,
    port: int = HTTPS_PORT,
    logger: logging.Logger | None = None,
) -> ProbeOutcome:
    """Probe a host once and capture the outcome as data.

    Never raises for network, TLS or certificate problems.

    Args:
        hostname: Host to probe.
        timeout: Connect and handshake timeout in seconds.
        port: Port number.
        logger: Logger for diagnostics.

    Returns:
        ProbeSuccess with the validity window, or ProbeFailure.
    """
    logger = logger or get_logger("probe")
    logger.debug("Starting https certificate validation for %s", hostname)

    try:
        cert = get_certificate(hostname, port, timeout)
        not_before, not_after = extract_validity(cert)
    except socket.timeout:
        reason = f"Connection timed out after {timeout}s"
    except socket.gaierror as e:
        reason = f"DNS resolution failed: {e}"
    except ConnectionRefusedError:
        reason = f"Connection refused on port {port}"
    except ssl.SSLError as e:
        reason = f"SSL error: {e}"
    except OSError as e:
        reason = f"Connection failed: {e}"
    except ValueError as e:
        reason = f"Certificate unreadable: {e}"
    except Exception as e:
        reason = f"Probe failed: {type(e).__name__}: {e}"
    else:
        logger.debug("%s Not before %s", hostname, not_before)
        logger.debug("%s Not after %s", hostname, not_after)
        return ProbeSuccess(hostname=hostname, not_before=not_before, not_after=not_after)

    logger.info("Can't read certificate for %s: %s", hostname, reason)
    return ProbeFailure(hostname=hostname, reason=reason)


def probe_with_retries(
    hostname: str,
    timeout: float = DEFAULT_TIMEOUT,
    retry: RetryPolicy | None = None,
    port: int = HTTPS_PORT,
    logger: logging.Logger | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> ProbeOutcome:
    """Probe a host, retrying failures according to the retry policy.

    Returns the first success, or the last failure once attempts run out.
    """
    retry = retry or RetryPolicy()
    logger = logger or get_logger("probe")

    outcome = probe(hostname, timeout, port, logger)
    for attempt in range(1, retry.attempts):
        if isinstance(outcome, ProbeSuccess):
            break
        delay = retry.delay(attempt)
        logger.info("Retry #%d of %d for %s in %.1fs", attempt, retry.attempts - 1, hostname, delay)
        sleep(delay)
        outcome = probe(hostname, timeout, port, logger)
    return outcome
