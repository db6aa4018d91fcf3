"""
Search form state: separate date/time sub-fields composed into the range sent
to the gateway, and the reverse decomposition used when a search is restored.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from web.storage import SearchParams


DEFAULT_START_TIME = "00:00"
DEFAULT_END_TIME = "23:59"
SAME_DAY_START_TIME = "00:00"
SAME_DAY_END_TIME = "23:59"
DEFAULT_LOOKBACK_DAYS = 30


def decompose_iso(value: Optional[str]) -> tuple[str, str]:
    """Split an ISO string into ("YYYY-MM-DD", "HH:MM").

    A date-only string gets "00:00"; anything unparseable yields ("", "").
    """
    if not value:
        return "", ""
    raw = value.strip()
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return "", ""
    time = f"{parsed.hour:02d}:{parsed.minute:02d}" if "T" in value else "00:00"
    return parsed.date().isoformat(), time


@dataclass
class SearchFormState:
    start_date: str = ""
    start_time: str = DEFAULT_START_TIME
    end_date: str = ""
    end_time: str = DEFAULT_END_TIME
    action_id: str = ""

    @classmethod
    def from_initial(cls, params: Optional[SearchParams]) -> "SearchFormState":
        """Form values restored from a stored search (or defaults)."""
        if params is None:
            return cls()
        start_date, start_time = decompose_iso(params.start_date)
        end_date, end_time = decompose_iso(params.end_date)
        return cls(
            start_date=start_date,
            start_time=start_time or DEFAULT_START_TIME,
            end_date=end_date,
            end_time=end_time or DEFAULT_END_TIME,
            action_id=params.action_id or "",
        )

    @property
    def same_day(self) -> bool:
        return self.start_date != "" and self.start_date == self.end_date

    @property
    def times_disabled(self) -> bool:
        # Same-day searches always cover the whole day
        return self.same_day

    def can_submit(self, is_loading: bool = False) -> bool:
        return not is_loading and bool(self.start_date) and bool(self.end_date)

    def compose(self) -> SearchParams:
        """Effective range: same day -> 00:00:00..23:59:59, else the chosen times.

        The end boundary always carries ":59" seconds and the start ":00".
        """
        start = end = ""
        if self.start_date:
            start_time = SAME_DAY_START_TIME if self.same_day else self.start_time
            start = f"{self.start_date}T{start_time}:00"
        if self.end_date:
            end_time = SAME_DAY_END_TIME if self.same_day else self.end_time
            end = f"{self.end_date}T{end_time}:59"
        return SearchParams(start_date=start, end_date=end, action_id=self.action_id or None)


def max_selectable_date(today: Optional[date] = None) -> str:
    return (today or date.today()).isoformat()


def default_start_placeholder(today: Optional[date] = None) -> str:
    return ((today or date.today()) - timedelta(days=DEFAULT_LOOKBACK_DAYS)).isoformat()
