import os
from unittest.mock import patch

import pandas as pd
import pytest

from jdmatch.models.records import RecruitmentScoreRecord
from jdmatch.services.reports import REPORT_COLUMNS, records_to_frame, write_ranking_report
from jdmatch.utils.exceptions import ReportError


def _record(resume_id, final, name=None, **evidence):
    return RecruitmentScoreRecord(
        resume_id=resume_id,
        candidate_name=name or resume_id,
        skill_match=final,
        domain_fit=final,
        execution=final,
        delivery_risk=final,
        final_score=final,
        rating="Backup",
        **evidence,
    )


@pytest.fixture
def records():
    return [
        _record("cv-1", 61.234),
        _record("cv-2", 88.0, matched_skills=["python"], key_projects=["Ledger"]),
        _record("cv-3", 61.234),
    ]


class TestRankingReport:
    """Test cases for the CSV/Markdown ranking report"""

    def test_records_to_frame_sorted_and_stable(self, records):
        df = records_to_frame(records)
        assert list(df.columns) == REPORT_COLUMNS
        assert list(df["resume_id"]) == ["cv-2", "cv-1", "cv-3"]
        assert list(df["rank"]) == [1, 2, 3]
        assert df.loc[1, "final_score"] == 61.23

    def test_empty_frame(self):
        df = records_to_frame([])
        assert len(df) == 0
        assert list(df.columns) == REPORT_COLUMNS

    def test_write_ranking_report(self, records, tmp_path):
        csv_path, md_path = write_ranking_report("jd-42", records, report_dir=str(tmp_path))

        assert csv_path == os.path.join(str(tmp_path), "jd-42_ranking.csv")
        assert md_path == os.path.join(str(tmp_path), "jd-42_top.md")

        df = pd.read_csv(csv_path)
        assert list(df["resume_id"]) == ["cv-2", "cv-1", "cv-3"]

        markdown = open(md_path, encoding="utf-8").read()
        assert markdown.startswith("# JD jd-42 - Candidate Ranking")
        assert "| 1 | cv-2 |" in markdown
        assert "**cv-2**: skills: python; key projects: Ledger" in markdown

    def test_write_empty_report(self, tmp_path):
        _, md_path = write_ranking_report("jd-empty", [], report_dir=str(tmp_path / "nested"))
        assert "No candidates were scored" in open(md_path, encoding="utf-8").read()

    def test_write_failure_raises_report_error(self, records, tmp_path):
        with patch("pandas.DataFrame.to_csv", side_effect=OSError("disk full")):
            with pytest.raises(ReportError) as exc_info:
                write_ranking_report("jd-42", records, report_dir=str(tmp_path))
        assert exc_info.value.error_code == "REPORT_ERROR"
        assert exc_info.value.details["path"] == str(tmp_path)
