from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


# -------- Basic calculator --------
class SkillWeight(BaseModel):
    skill: str
    weight: float = Field(default=1.0, ge=0.0)


class BasicMatchResult(BaseModel):
    score_pct: int
    matched: List[str] = []
    missing: List[str] = []
    extra: List[str] = []
    total_required: int = 0
    total_matched: int = 0


class WeightedMatchResult(BaseModel):
    score_pct: int
    matched: List[str] = []
    missing_with_weight: List[SkillWeight] = []
    total_weight: float = 0.0
    matched_weight: float = 0.0


# -------- Employment gaps --------
class GapDetail(BaseModel):
    type: Literal["POST_EDUCATION", "BETWEEN_JOBS"]
    start: str
    end: str
    months: int


class GapReport(BaseModel):
    has_gap: bool = False
    total_gap_months: int = 0
    gap_details: List[GapDetail] = []


# -------- Core match --------
class MatchRecord(BaseModel):
    jd_id: Optional[str] = None
    resume_id: Optional[str] = None
    candidate_name: str = ""

    skill_score: float
    experience_score: float
    project_score: float
    certification_score: float
    domain_score: float
    gap_penalty: float
    final_score: float

    matched_skills: List[str] = []
    missing_skills: List[str] = []
    matched_preferred_skills: List[str] = []
    total_required_skills: int = 0
    total_preferred_skills: int = 0

    experience_status: str
    candidate_experience: float = 0.0
    required_experience: int = 0

    relevant_projects: List[str] = []
    total_projects: int = 0
    relevant_certifications: List[str] = []
    domain_match: bool = False

    has_employment_gap: bool = False
    total_gap_months: int = 0
    gap_details: List[GapDetail] = []

    candidate_status: Literal["accepted", "review", "rejected"] = "review"
    matched_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# -------- Recruitment intelligence --------
class RecruitmentScoreRecord(BaseModel):
    jd_id: Optional[str] = None
    resume_id: Optional[str] = None
    candidate_name: str = ""

    skill_match: float
    domain_fit: float
    execution: float
    delivery_risk: float
    scale_bonus: int = 0
    methodology_bonus: int = 0
    pmo_penalty: int = 0
    final_score: float
    rating: str

    matched_skills: List[str] = []
    matched_domains: List[str] = []
    key_projects: List[str] = []
    risk_events: List[str] = []
    scale_indicators: List[str] = []

    def to_output(self) -> Dict[str, Any]:
        """Strict JSON shape consumed downstream; numbers rounded to 2 dp."""
        return {
            "candidate_name": self.candidate_name,
            "scores": {
                "skill_match": round(self.skill_match, 2),
                "domain_fit": round(self.domain_fit, 2),
                "execution": round(self.execution, 2),
                "delivery_risk": round(self.delivery_risk, 2),
                "scale_bonus": self.scale_bonus,
                "pmo_penalty": self.pmo_penalty,
                "final_score": round(self.final_score, 2),
                "rating": self.rating,
            },
            "evidence": {
                "matched_skills": list(self.matched_skills),
                "matched_domains": list(self.matched_domains),
                "key_projects": list(self.key_projects),
                "risk_events": list(self.risk_events),
                "scale_indicators": list(self.scale_indicators),
            },
        }
