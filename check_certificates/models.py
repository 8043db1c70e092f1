"""Pydantic models for certificate check results."""

from datetime import datetime
from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

DISPLAY_ERROR = "error"
DISPLAY_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Status(str, Enum):
    """Outcome of checking a single host."""
    OK = "ok"
    ERROR = "error"


class ProbeSuccess(BaseModel):
    """Validity window read from a host's leaf certificate."""
    model_config = ConfigDict(frozen=True)

    hostname: str
    not_before: datetime
    not_after: datetime


class ProbeFailure(BaseModel):
    """A host that could not be probed."""
    model_config = ConfigDict(frozen=True)

    hostname: str
    reason: str = Field(description="Human-readable failure reason")


ProbeOutcome = Union[ProbeSuccess, ProbeFailure]


class CheckResult(BaseModel):
    """Classified result for one host.

    For error results both timestamps hold the check time, so every
    result stays sortable without a parsed certificate date.
    """
    model_config = ConfigDict(frozen=True)

    hostname: str = Field(description="Checked hostname")
    not_before: datetime = Field(description="Certificate notBefore, or check time on error")
    not_after: datetime = Field(description="Certificate notAfter, or check time on error")
    status: Status
    error: str | None = Field(default=None, description="Failure reason if the check failed")

    @property
    def is_error(self) -> bool:
        """Check if the host could not be checked."""
        return self.status == Status.ERROR


class FormattedRow(BaseModel):
    """Display-ready row derived from a CheckResult."""
    model_config = ConfigDict(frozen=True)

    hostname: str
    not_before: datetime
    not_after: datetime
    days_remaining: int | None = None
    status: Status

    @property
    def is_error(self) -> bool:
        return self.status == Status.ERROR

    @property
    def not_before_display(self) -> str:
        if self.is_error:
            return DISPLAY_ERROR
        return self.not_before.strftime(DISPLAY_DATE_FORMAT)

    @property
    def not_after_display(self) -> str:
        if self.is_error:
            return DISPLAY_ERROR
        return self.not_after.strftime(DISPLAY_DATE_FORMAT)

    @property
    def days_display(self) -> str:
        if self.is_error or self.days_remaining is None:
            return DISPLAY_ERROR
        return str(self.days_remaining)

    def to_columns(self) -> tuple[str, str, str, str, str]:
        """Return the five display columns in table order."""
        return (
            self.hostname,
            self.not_before_display,
            self.not_after_display,
            self.days_display,
            self.status.value,
        )


class ReportOptions(BaseModel):
    """Filtering options for the report."""
    alert_limit_days: int = Field(default=7, ge=0, description="Alert when expiring within this many days")
    only_alerting: bool = Field(default=False, description="Keep only expiring and erroneous hosts")
    only_names: bool = Field(default=False, description="Print hostnames instead of the full table")
