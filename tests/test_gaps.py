from datetime import date

import pytest

from jdmatch.models.facts import EducationEntry, WorkHistoryEntry
from jdmatch.services.gaps import EmploymentGapCalculator, months_between


@pytest.fixture
def calculator():
    # Pin "present" to August 2024
    return EmploymentGapCalculator(today=lambda: date(2024, 8, 15))


class TestEmploymentGapCalculator:
    """Test cases for employment gap inference"""

    def test_between_jobs_gap(self, calculator):
        jobs = [
            WorkHistoryEntry(company="A", start="2019-01", end="2019-06"),
            WorkHistoryEntry(company="B", start="2021-01", end="present"),
        ]
        report = calculator.calculate(jobs)
        assert report.has_gap is True
        assert report.total_gap_months == 19
        assert len(report.gap_details) == 1
        gap = report.gap_details[0]
        assert gap.type == "BETWEEN_JOBS"
        assert (gap.start, gap.end, gap.months) == ("2019-06", "2021-01", 19)

    def test_jobs_are_sorted_by_start(self, calculator):
        jobs = [
            WorkHistoryEntry(company="B", start="2021-01", end="Current"),
            WorkHistoryEntry(company="A", start="2019-01", end="2019-06"),
        ]
        assert calculator.calculate(jobs).total_gap_months == 19

    def test_short_gaps_are_ignored(self, calculator):
        jobs = [
            WorkHistoryEntry(start="2019-01", end="2019-06"),
            WorkHistoryEntry(start="2019-11", end="2020-12"),
        ]
        report = calculator.calculate(jobs)
        assert report.has_gap is False
        assert report.gap_details == []

    def test_six_month_gap_counts(self, calculator):
        jobs = [
            WorkHistoryEntry(start="2019-01", end="2019-06"),
            WorkHistoryEntry(start="2019-12", end="2020-12"),
        ]
        assert calculator.calculate(jobs).total_gap_months == 6

    def test_post_education_gap(self, calculator):
        education = [EducationEntry(institution="Uni", end="2015-06")]
        jobs = [WorkHistoryEntry(start="2016-03", end="now")]
        report = calculator.calculate(jobs, education)
        assert report.total_gap_months == 9
        assert report.gap_details[0].type == "POST_EDUCATION"

    def test_graduation_year_read_as_june(self, calculator):
        education = [EducationEntry(graduation_year=2015), EducationEntry(graduation_year=2012)]
        jobs = [WorkHistoryEntry(start="2016-06", end="present")]
        report = calculator.calculate(jobs, education)
        assert report.gap_details[0].start == "2015-06"
        assert report.total_gap_months == 12

    def test_unparseable_dates_are_skipped(self, calculator):
        jobs = [
            WorkHistoryEntry(start="2019-01", end="June 2019"),
            WorkHistoryEntry(start="2021-01", end="present"),
            WorkHistoryEntry(start=None, end="2022-13"),
        ]
        report = calculator.calculate(jobs)
        assert report.has_gap is False
        assert report.total_gap_months == 0

    def test_empty_history(self, calculator):
        report = calculator.calculate([], [EducationEntry(end="2015-06")])
        assert report.has_gap is False

    @pytest.mark.parametrize("value,expected", [
        ("2020-03", (2020, 3)),
        (" 2020-12 ", (2020, 12)),
        ("PRESENT", (2024, 8)),
        ("till now", (2024, 8)),
        ("Now", (2024, 8)),
        ("unknown", None),
        ("snowfall", None),
        ("2020-00", None),
        ("2020-3", None),
        ("", None),
        (None, None),
    ])
    def test_parse(self, calculator, value, expected):
        assert calculator.parse(value) == expected


def test_months_between():
    assert months_between((2019, 6), (2021, 1)) == 19
    assert months_between((2020, 1), (2020, 1)) == 0
