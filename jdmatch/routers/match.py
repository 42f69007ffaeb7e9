# routers/match.py
from typing import Any, Dict

from fastapi import APIRouter

from jdmatch.helpers.extraction import infer_jd_defaults, jd_facts_from_payload, resume_facts_from_payload
from jdmatch.models.facts import JDFacts, ResumeFacts
from jdmatch.models.records import BasicMatchResult, GapReport, MatchRecord, SkillWeight, WeightedMatchResult
from jdmatch.models.schemas import (
    BatchScoreRequest,
    BatchScoreResponse,
    GapRequest,
    JDInput,
    ResumeInput,
    ScoreRequest,
    SkillMatchRequest,
)
from jdmatch.services.core_scorer import CoreMatchScorer
from jdmatch.services.gaps import EmploymentGapCalculator
from jdmatch.services.intelligence import RecruitmentIntelligenceScorer
from jdmatch.services.matching import BasicMatchCalculator, FuzzySkillMatcher
from jdmatch.services.normalization import SkillNormalizer, default_table
from jdmatch.services.reports import write_ranking_report
from jdmatch.utils.exceptions import ExceptionContext, ValidationError
from jdmatch.utils.logging_config import get_logger

router = APIRouter(prefix="/match", tags=["match"])
logger = get_logger(__name__)

# Built once; all of these are stateless and safe to share across requests
normalizer = SkillNormalizer(default_table())
matcher = FuzzySkillMatcher(normalizer)
gap_calculator = EmploymentGapCalculator()
basic_calculator = BasicMatchCalculator(matcher)
core_scorer = CoreMatchScorer(matcher, gap_calculator)
intelligence_scorer = RecruitmentIntelligenceScorer(normalizer)


# ----------------------
# Helper functions
# ----------------------

def _resolve_jd(jd_in: JDInput) -> JDFacts:
    if jd_in.facts is not None:
        facts = jd_in.facts
        if jd_in.text and not facts.raw_text:
            facts = facts.model_copy(update={"raw_text": jd_in.text})
        return infer_jd_defaults(facts)
    if jd_in.parsed_details is not None or jd_in.text:
        return jd_facts_from_payload(jd_in.parsed_details, raw_text=jd_in.text, normalizer=normalizer)
    raise ValidationError("JD requires facts, parsed_details or text", field="jd")


def _resolve_resume(resume_in: ResumeInput) -> ResumeFacts:
    if resume_in.facts is not None:
        facts = resume_in.facts
        if resume_in.candidate_name and not facts.candidate_name:
            facts = facts.model_copy(update={"candidate_name": resume_in.candidate_name})
        return facts
    if resume_in.parsed_details is not None or resume_in.skills:
        return resume_facts_from_payload(
            resume_in.parsed_details,
            normalizer=normalizer,
            default_name=resume_in.candidate_name,
            legacy_skills=resume_in.skills,
        )
    raise ValidationError("Resume requires facts, parsed_details or skills", field="resume")


# ----------------------
# Endpoints
# ----------------------
# Plain def: scoring and report writing block, so FastAPI runs these in its threadpool

@router.post("/skills")
def match_skills(req: SkillMatchRequest) -> Dict[str, Any]:
    """Simple or weighted percentage match over two flat skill lists"""
    with ExceptionContext("match_skills", logger):
        if req.weighted:
            weighted = [s if isinstance(s, SkillWeight) else SkillWeight(skill=s) for s in req.jd_skills]
            result: WeightedMatchResult = basic_calculator.weighted_match(weighted, req.resume_skills)
        else:
            plain = [s.skill if isinstance(s, SkillWeight) else s for s in req.jd_skills]
            result: BasicMatchResult = basic_calculator.simple_match(plain, req.resume_skills)
    return {"success": True, **result.model_dump()}


@router.post("/gaps", response_model=GapReport)
def employment_gaps(req: GapRequest):
    """Employment gaps for a work history (and optional education)"""
    return gap_calculator.calculate(req.work_history, req.education)


@router.post("/score", response_model=MatchRecord)
def core_score(req: ScoreRequest):
    """Five-factor core match record for one JD/resume pair"""
    jd = _resolve_jd(req.jd)
    resume = _resolve_resume(req.resume)
    with ExceptionContext("core_score", logger, jd_id=req.jd.jd_id, resume_id=req.resume.resume_id):
        return core_scorer.score(jd, resume, jd_id=req.jd.jd_id, resume_id=req.resume.resume_id)


@router.post("/intelligence")
def recruitment_intelligence(req: ScoreRequest) -> Dict[str, Any]:
    """Recruitment intelligence score in the strict output shape"""
    jd = _resolve_jd(req.jd)
    resume = _resolve_resume(req.resume)
    with ExceptionContext("recruitment_intelligence", logger, jd_id=req.jd.jd_id, resume_id=req.resume.resume_id):
        record = intelligence_scorer.score(jd, resume, jd_id=req.jd.jd_id, resume_id=req.resume.resume_id)
    return record.to_output()


@router.post("/intelligence/batch", response_model=BatchScoreResponse)
def recruitment_intelligence_batch(req: BatchScoreRequest):
    """Rank many resumes against one JD, best first"""
    jd = _resolve_jd(req.jd)
    resumes = [_resolve_resume(r) for r in req.resumes]
    ids = [r.resume_id for r in req.resumes]

    with ExceptionContext("recruitment_intelligence_batch", logger, jd_id=req.jd.jd_id, count=len(resumes)):
        records = intelligence_scorer.rank(jd, resumes, jd_id=req.jd.jd_id, resume_ids=ids)

    report_paths = None
    if req.write_report:
        csv_path, md_path = write_ranking_report(req.jd.jd_id or "adhoc", records)
        report_paths = [csv_path, md_path]

    return BatchScoreResponse(
        jd_id=req.jd.jd_id,
        candidates=[r.to_output() for r in records],
        count=len(records),
        report_paths=report_paths,
    )
