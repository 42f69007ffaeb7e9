from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional, Union

from jdmatch.models.facts import EducationEntry, JDFacts, ResumeFacts, WorkHistoryEntry
from jdmatch.models.records import SkillWeight

# -------- Basic skill comparison --------
class SkillMatchRequest(BaseModel):
    jd_skills: List[Union[SkillWeight, str]]
    resume_skills: List[str]
    weighted: bool = False


# -------- Employment gaps --------
class GapRequest(BaseModel):
    work_history: List[WorkHistoryEntry] = []
    education: List[EducationEntry] = []


# -------- Pair scoring --------
class JDInput(BaseModel):
    """Either typed facts or a raw extraction payload (plus optional JD text)."""
    jd_id: Optional[str] = None
    facts: Optional[JDFacts] = None
    parsed_details: Optional[Dict[str, Any]] = None
    text: str = ""


class ResumeInput(BaseModel):
    resume_id: Optional[str] = None
    candidate_name: str = ""
    facts: Optional[ResumeFacts] = None
    parsed_details: Optional[Dict[str, Any]] = None
    skills: List[str] = []


class ScoreRequest(BaseModel):
    jd: JDInput
    resume: ResumeInput


class BatchScoreRequest(BaseModel):
    jd: JDInput
    resumes: List[ResumeInput] = Field(..., min_length=1)
    write_report: bool = False


class BatchScoreResponse(BaseModel):
    jd_id: Optional[str] = None
    candidates: List[Dict[str, Any]]
    count: int
    report_paths: Optional[List[str]] = None
