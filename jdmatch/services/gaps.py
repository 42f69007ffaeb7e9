"""
Employment gap inference over a candidate's chronological work history.
"""
import re
from datetime import date
from typing import Callable, List, Optional, Sequence, Tuple

from jdmatch.models.facts import EducationEntry, WorkHistoryEntry
from jdmatch.models.records import GapDetail, GapReport
from jdmatch.utils.logging_config import get_logger

logger = get_logger(__name__)

MIN_GAP_MONTHS = 6
GRADUATION_MONTH = 6  # a bare graduation year is read as June
CURRENT_SENTINELS = ("present", "current", "now")

_YEAR_MONTH = re.compile(r"(\d{4})-(\d{2})")
_CURRENT = re.compile(r"\b(?:" + "|".join(CURRENT_SENTINELS) + r")\b", re.IGNORECASE)

YearMonth = Tuple[int, int]


def months_between(start: YearMonth, end: YearMonth) -> int:
    return (end[0] - start[0]) * 12 + (end[1] - start[1])


def format_year_month(ym: YearMonth) -> str:
    return f"{ym[0]:04d}-{ym[1]:02d}"


class EmploymentGapCalculator:
    """Finds >= 6 month gaps after education and between consecutive jobs."""

    def __init__(self, today: Callable[[], date] = date.today):
        self._today = today

    def parse(self, value: Optional[str]) -> Optional[YearMonth]:
        if value is None:
            return None
        text = str(value).strip()
        if not text:
            return None
        if _CURRENT.search(text):
            now = self._today()
            return now.year, now.month
        m = _YEAR_MONTH.fullmatch(text)
        if not m:
            return None
        year, month = int(m.group(1)), int(m.group(2))
        if not 1 <= month <= 12:
            return None
        return year, month

    def _latest_graduation(self, education: Sequence[EducationEntry]) -> Optional[YearMonth]:
        latest = None
        for edu in education or []:
            end = edu.end
            if not end and edu.graduation_year:
                end = f"{edu.graduation_year:04d}-{GRADUATION_MONTH:02d}"
            parsed = self.parse(end)
            if parsed and (latest is None or parsed > latest):
                latest = parsed
        return latest

    def calculate(
        self,
        work_history: Sequence[WorkHistoryEntry],
        education: Sequence[EducationEntry] = (),
    ) -> GapReport:
        jobs = list(work_history or [])
        # Unparseable start dates sort last; sort is stable otherwise
        jobs.sort(key=lambda j: (self.parse(j.start) is None, self.parse(j.start) or (0, 0)))

        details: List[GapDetail] = []

        if jobs:
            grad = self._latest_graduation(education)
            first_start = self.parse(jobs[0].start)
            if grad and first_start:
                months = months_between(grad, first_start)
                if months >= MIN_GAP_MONTHS:
                    details.append(GapDetail(
                        type="POST_EDUCATION",
                        start=format_year_month(grad),
                        end=format_year_month(first_start),
                        months=months,
                    ))

        for current, nxt in zip(jobs, jobs[1:]):
            current_end = self.parse(current.end)
            next_start = self.parse(nxt.start)
            if current_end is None or next_start is None:
                continue
            months = months_between(current_end, next_start)
            if months >= MIN_GAP_MONTHS:
                details.append(GapDetail(
                    type="BETWEEN_JOBS",
                    start=format_year_month(current_end),
                    end=format_year_month(next_start),
                    months=months,
                ))

        total = sum(d.months for d in details)
        if details:
            logger.debug(f"Found {len(details)} employment gap(s) totalling {total} months")
        return GapReport(has_gap=total > 0, total_gap_months=total, gap_details=details)
