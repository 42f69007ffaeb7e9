import os
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import pandas as pd

from jdmatch.models.records import RecruitmentScoreRecord
from jdmatch.utils.config import get_settings
from jdmatch.utils.exceptions import ReportError
from jdmatch.utils.logging_config import get_logger

logger = get_logger(__name__)

REPORT_COLUMNS = [
    "rank", "resume_id", "candidate_name", "rating", "final_score",
    "skill_match", "domain_fit", "execution", "delivery_risk",
    "scale_bonus", "methodology_bonus", "pmo_penalty",
]


def records_to_frame(records: Sequence[RecruitmentScoreRecord]) -> pd.DataFrame:
    data = [{
        "resume_id": r.resume_id or "",
        "candidate_name": r.candidate_name,
        "rating": r.rating,
        "final_score": round(r.final_score, 2),
        "skill_match": round(r.skill_match, 2),
        "domain_fit": round(r.domain_fit, 2),
        "execution": round(r.execution, 2),
        "delivery_risk": round(r.delivery_risk, 2),
        "scale_bonus": r.scale_bonus,
        "methodology_bonus": r.methodology_bonus,
        "pmo_penalty": r.pmo_penalty,
    } for r in records]

    df = pd.DataFrame(data, columns=REPORT_COLUMNS[1:])
    if len(df):
        # stable sort keeps input order for equal scores
        df = df.sort_values("final_score", ascending=False, kind="mergesort").reset_index(drop=True)
    df.insert(0, "rank", range(1, len(df) + 1))
    return df


def write_ranking_report(
    jd_id: str,
    records: Sequence[RecruitmentScoreRecord],
    report_dir: Optional[str] = None,
) -> Tuple[str, str]:
    """Write <jd_id>_ranking.csv and <jd_id>_top.md; returns both paths."""
    report_dir = report_dir or get_settings().report_dir
    try:
        Path(report_dir).mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ReportError(f"Cannot create report directory: {e}", path=str(report_dir), cause=e) from e

    df = records_to_frame(records)
    csv_path = os.path.join(report_dir, f"{jd_id}_ranking.csv")
    md_path = os.path.join(report_dir, f"{jd_id}_top.md")

    md_lines: List[str] = [f"# JD {jd_id} - Candidate Ranking", ""]
    if len(df):
        md_lines += [
            "| Rank | Resume | Candidate | Rating | Final | Skills | Domain | Execution | Risk | Scale | PMO |",
            "|---:|---|---|---|---:|---:|---:|---:|---:|---:|---:|",
        ]
        for r in df.head(10).itertuples():
            md_lines.append(
                f"| {r.rank} | {r.resume_id} | {r.candidate_name} | {r.rating} | {r.final_score:.2f} | "
                f"{r.skill_match:.2f} | {r.domain_fit:.2f} | {r.execution:.2f} | {r.delivery_risk:.2f} | "
                f"{r.scale_bonus} | {r.pmo_penalty} |"
            )

        md_lines.append("\n---\nEvidence (top-5):")
        top = sorted(records, key=lambda r: r.final_score, reverse=True)[:5]
        for rec in top:
            label = rec.candidate_name or rec.resume_id or "unknown"
            skills = ", ".join(rec.matched_skills) or "none"
            projects = ", ".join(rec.key_projects) or "none"
            md_lines.append(f"- **{label}**: skills: {skills}; key projects: {projects}")
    else:
        md_lines.append("> No candidates were scored for this JD.\n")

    try:
        df.to_csv(csv_path, index=False)
        Path(md_path).write_text("\n".join(md_lines), encoding="utf-8")
    except OSError as e:
        raise ReportError(f"Cannot write ranking report: {e}", path=report_dir, cause=e) from e

    logger.info(f"Ranking report for JD {jd_id} written to {csv_path} and {md_path}")
    return csv_path, md_path
