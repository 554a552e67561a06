"""Validation rules for leave request submissions.

Every rule is a pure function returning a ``ValidationResult``. The
submission entry point runs them in a fixed order and raises
``ValidationError`` with the first failing message.
"""

import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from leave_api.core.exceptions import ValidationError
from leave_api.models.leave_request import LeaveType
from leave_api.schemas.leave import LeaveRequestCreate

EMPLOYEE_ID_MESSAGE = "Invalid employee ID. Must be ATS0 followed by 3 digits (not all zeros)"
EMPLOYEE_NAME_MESSAGE = (
    "Invalid employee name. Must contain 5-30 letters, only alphabets with single spaces"
)
LEAVE_TYPE_MESSAGE = "Invalid leave type"
REASON_MESSAGE = (
    "Invalid reason. Must start with a letter, max 400 chars (excluding spaces), "
    "no consecutive special chars or multiple spaces"
)
DATE_FORMAT_MESSAGE = "Invalid date format. Use YYYY-MM-DD"
END_BEFORE_START_MESSAGE = "End date cannot be earlier than start date"
CERTIFICATE_REQUIRED_MESSAGE = "Medical certificate required for sick leave exceeding 7 days"

# Sick leave longer than this many days needs a medical certificate
SICK_LEAVE_CERTIFICATE_THRESHOLD = 7

MAX_REASON_CHARS = 400
MIN_NAME_LETTERS = 5
MAX_NAME_LETTERS = 30

_EMPLOYEE_ID_RE = re.compile(r"ATS0[0-9]{3}")
_NAME_RE = re.compile(r"[a-zA-Z]+( [a-zA-Z]+)*")
_NON_LETTER_RE = re.compile(r"[^a-zA-Z]")
_WHITESPACE_RE = re.compile(r"\s")

_SPECIAL_OR_DIGIT = r"0-9!@#$%^&*()_+\-=\[\]{}\\|;:'\",.<>?/~`"
_REASON_CHARS_RE = re.compile(r"[a-zA-Z][a-zA-Z\s" + _SPECIAL_OR_DIGIT + r"]*")
_REPEATED_SPECIAL_RE = re.compile(r"([" + _SPECIAL_OR_DIGIT + r"])\1")
_MULTIPLE_SPACES_RE = re.compile(r"\s{2,}")


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    message: Optional[str] = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def fail(cls, message: str) -> "ValidationResult":
        return cls(valid=False, message=message)


@dataclass(frozen=True)
class DateRangeRule:
    """Window and span limits for one leave type, in the order they are checked."""

    past_limit_days: Optional[int]  # None: start must not be before today
    past_message: str
    future_limit_days: Optional[int] = None
    future_limit_months: Optional[int] = None
    future_message: str = ""
    max_span_days: Optional[int] = None
    span_message: str = ""

    def earliest_start(self, today: date) -> date:
        if self.past_limit_days is None:
            return today
        return today - timedelta(days=self.past_limit_days)

    def latest_date(self, today: date) -> date:
        if self.future_limit_months is not None:
            return add_months(today, self.future_limit_months)
        return today + timedelta(days=self.future_limit_days or 0)


_PAST_10_DAYS = "Date cannot be more than 10 days in the past"
_FUTURE_6_MONTHS = "Date cannot be more than six months in the future"

DATE_RANGE_RULES: dict[LeaveType, DateRangeRule] = {
    LeaveType.ANNUAL: DateRangeRule(
        past_limit_days=None,
        past_message="Annual leave start date cannot be in the past",
        future_limit_days=30,
        future_message="Annual leave cannot be more than 30 days in the future",
        max_span_days=30,
        span_message="Annual leave cannot exceed 30 days",
    ),
    LeaveType.SICK: DateRangeRule(
        past_limit_days=10,
        past_message="Sick leave start date cannot be more than 10 days in the past",
        future_limit_days=20,
        future_message="Sick leave cannot be more than 20 days in the future",
        max_span_days=30,
        span_message="Sick leave cannot exceed 1 month",
    ),
    LeaveType.MATERNITY: DateRangeRule(
        past_limit_days=10,
        past_message=_PAST_10_DAYS,
        future_limit_months=6,
        future_message=_FUTURE_6_MONTHS,
        max_span_days=180,
        span_message="Maternity leave cannot exceed 6 months",
    ),
    LeaveType.PATERNITY: DateRangeRule(
        past_limit_days=10,
        past_message=_PAST_10_DAYS,
        future_limit_days=30,
        future_message="Paternity leave cannot be more than 30 days in the future",
        max_span_days=30,
        span_message="Paternity leave cannot exceed 30 days",
    ),
    LeaveType.PERSONAL: DateRangeRule(
        past_limit_days=10,
        past_message=_PAST_10_DAYS,
        future_limit_months=6,
        future_message=_FUTURE_6_MONTHS,
    ),
}


def add_months(day: date, months: int) -> date:
    """Shift ``day`` by whole calendar months.

    Days past the end of the target month roll over into the following
    month, so Aug 31 + 6 months is Mar 3 (Mar 2 in a leap year).
    """
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, 1) + timedelta(days=day.day - 1)


def span_days(start: date, end: date) -> int:
    """Inclusive day count of a leave period."""
    return (end - start).days + 1


def validate_employee_id(employee_id: str) -> ValidationResult:
    if _EMPLOYEE_ID_RE.fullmatch(employee_id or "") and not employee_id.endswith("000"):
        return ValidationResult.ok()
    return ValidationResult.fail(EMPLOYEE_ID_MESSAGE)


def validate_employee_name(name: str) -> ValidationResult:
    name = name or ""
    letter_count = len(_NON_LETTER_RE.sub("", name))
    if (
        MIN_NAME_LETTERS <= letter_count <= MAX_NAME_LETTERS
        and _NAME_RE.fullmatch(name)
    ):
        return ValidationResult.ok()
    return ValidationResult.fail(EMPLOYEE_NAME_MESSAGE)


def validate_leave_type(leave_type: str) -> ValidationResult:
    try:
        LeaveType(leave_type)
    except ValueError:
        return ValidationResult.fail(LEAVE_TYPE_MESSAGE)
    return ValidationResult.ok()


def validate_reason(reason: str) -> ValidationResult:
    reason = reason or ""
    char_count = len(_WHITESPACE_RE.sub("", reason))
    if (
        0 < char_count <= MAX_REASON_CHARS
        and _REASON_CHARS_RE.fullmatch(reason)
        and not _REPEATED_SPECIAL_RE.search(reason)
        and not _MULTIPLE_SPACES_RE.search(reason)
    ):
        return ValidationResult.ok()
    return ValidationResult.fail(REASON_MESSAGE)


def validate_date_range(
    leave_type: LeaveType,
    start: date,
    end: date,
    today: Optional[date] = None,
) -> ValidationResult:
    """Check a leave period against the window and span rules for its type.

    Args:
        leave_type: Decides which rule set applies.
        start: First day of leave.
        end: Last day of leave, inclusive.
        today: Reference day; defaults to the server's local date.

    Returns:
        The result of the first failing check, or a passing result.
    """
    if start > end:
        return ValidationResult.fail(END_BEFORE_START_MESSAGE)

    today = today or date.today()
    rule = DATE_RANGE_RULES.get(leave_type, DATE_RANGE_RULES[LeaveType.PERSONAL])

    if start < rule.earliest_start(today):
        return ValidationResult.fail(rule.past_message)

    latest = rule.latest_date(today)
    if start > latest or end > latest:
        return ValidationResult.fail(rule.future_message)

    if rule.max_span_days is not None and span_days(start, end) > rule.max_span_days:
        return ValidationResult.fail(rule.span_message)

    return ValidationResult.ok()


def validate_certificate_requirement(
    leave_type: LeaveType, start: date, end: date, has_certificate: bool
) -> ValidationResult:
    if (
        leave_type == LeaveType.SICK
        and span_days(start, end) > SICK_LEAVE_CERTIFICATE_THRESHOLD
        and not has_certificate
    ):
        return ValidationResult.fail(CERTIFICATE_REQUIRED_MESSAGE)
    return ValidationResult.ok()


def parse_date(value: str) -> date:
    try:
        return date.fromisoformat((value or "").strip())
    except ValueError:
        raise ValidationError(DATE_FORMAT_MESSAGE)


def _raise_if_invalid(result: ValidationResult) -> None:
    if not result.valid:
        raise ValidationError(result.message)


def validate_leave_submission(
    employee_id: str,
    employee_name: str,
    leave_type: str,
    start_date: str,
    end_date: str,
    reason: str,
    has_certificate: bool = False,
    today: Optional[date] = None,
) -> LeaveRequestCreate:
    """Run every submission rule in order and return the typed submission.

    Raises:
        ValidationError: With the message of the first rule that fails.
    """
    _raise_if_invalid(validate_employee_id(employee_id))
    _raise_if_invalid(validate_employee_name(employee_name))
    _raise_if_invalid(validate_leave_type(leave_type))
    _raise_if_invalid(validate_reason(reason))

    kind = LeaveType(leave_type)
    start = parse_date(start_date)
    end = parse_date(end_date)

    _raise_if_invalid(validate_date_range(kind, start, end, today=today))
    _raise_if_invalid(validate_certificate_requirement(kind, start, end, has_certificate))

    return LeaveRequestCreate(
        employee_id=employee_id,
        employee_name=employee_name,
        leave_type=kind,
        start_date=start,
        end_date=end,
        reason=reason,
    )
