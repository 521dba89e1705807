from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Optional

from insights.errors import ValidationError

DATE_FORMAT = '%Y-%m-%d'


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar date range."""
    since: date
    until: date

    @classmethod
    def from_strings(cls, since: str, until: str) -> "DateRange":
        """
        Parse a YYYY-MM-DD pair.

        Raises:
            ValidationError: If either date is malformed or since is after until
        """
        try:
            start = datetime.strptime(since, DATE_FORMAT).date()
            end = datetime.strptime(until, DATE_FORMAT).date()
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid date range: {since} to {until}. Use YYYY-MM-DD")

        if start > end:
            raise ValidationError(f"Start date {since} is after end date {until}")
        return cls(start, end)

    def as_params(self) -> Dict[str, str]:
        return {
            'since': self.since.strftime(DATE_FORMAT),
            'until': self.until.strftime(DATE_FORMAT),
        }

    @property
    def days(self) -> int:
        return (self.until - self.since).days + 1

    def __str__(self):
        params = self.as_params()
        return f"{params['since']} to {params['until']}"


def last_n_days(days: int, today: Optional[date] = None) -> DateRange:
    """Range from `days` days ago up to and including today."""
    if days < 1:
        raise ValidationError(f"Number of days must be positive, got {days}")
    today = today or date.today()
    return DateRange(today - timedelta(days=days), today)
