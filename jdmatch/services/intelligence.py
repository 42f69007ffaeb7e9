"""
Recruitment Intelligence scoring.

final = 0.15*skill_match + 0.25*domain_fit + 0.25*execution
        + 0.20*delivery_risk + scale_bonus + methodology_bonus + pmo_penalty,
clamped to [0, 100].
"""
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

from jdmatch.models.facts import JDFacts, ResumeFacts
from jdmatch.models.records import RecruitmentScoreRecord
from jdmatch.services.normalization import SkillNormalizer
from jdmatch.utils.config import get_settings
from jdmatch.utils.logging_config import PerformanceMonitor, get_logger

logger = get_logger(__name__)

WEIGHT_SKILL = 0.15
WEIGHT_DOMAIN = 0.25
WEIGHT_EXECUTION = 0.25
WEIGHT_DELIVERY_RISK = 0.20

PREFERRED_BONUS_MAX = 15.0
TOOLS_BONUS_MAX = 10.0
METHODOLOGY_SKILL_BONUS_MAX = 5.0

NEUTRAL = 50.0
LARGE_BUDGET_USD = 10_000_000
LARGE_TEAM_SIZE = 15

RATING_TIERS = (
    (90.0, "Top Choice"),
    (80.0, "Strong Primary"),
    (70.0, "Strong Secondary"),
    (60.0, "Backup"),
)
NOT_RECOMMENDED = "Not Recommended"


def rate(final_score: float) -> str:
    for floor, label in RATING_TIERS:
        if final_score >= floor:
            return label
    return NOT_RECOMMENDED


def pmo_penalty(hands_on_ratio: float) -> int:
    if hands_on_ratio >= 0.65:
        return 0
    if hands_on_ratio >= 0.40:
        return -10
    return -20


def scale_bonus(resume: ResumeFacts) -> int:
    if resume.max_budget_managed >= LARGE_BUDGET_USD or resume.multi_year_programs >= 1:
        return 10
    if resume.largest_team_size >= LARGE_TEAM_SIZE or resume.enterprise_scale:
        return 5
    return 0


def scale_indicators(resume: ResumeFacts) -> List[str]:
    indicators = []
    if resume.max_budget_managed >= LARGE_BUDGET_USD:
        indicators.append("Budget >= $10M")
    if resume.multi_year_programs >= 1:
        indicators.append(f"Multi-year programs: {resume.multi_year_programs}")
    if resume.largest_team_size >= LARGE_TEAM_SIZE:
        indicators.append(f"Team size: {resume.largest_team_size}")
    if resume.enterprise_scale:
        indicators.append("Enterprise scale experience")
    return indicators


def methodology_bonus(jd_methodologies: Sequence[str], resume_methodologies: Sequence[str]) -> int:
    wanted = [m.strip().lower() for m in jd_methodologies if m and m.strip()]
    have = {m.strip().lower() for m in resume_methodologies if m and m.strip()}
    if not wanted or not have:
        return 0
    hits = sum(1 for m in wanted if m in have)
    if hits >= len(wanted) * 0.5:
        return 5
    if hits > 0:
        return 2
    return 0


def _ratio_score(numerator: int, denominator: int) -> float:
    if denominator <= 0:
        return NEUTRAL
    return min(numerator / denominator * 100, 100.0)


class RecruitmentIntelligenceScorer:
    """Six-factor 0-100 score with categorical rating and evidence."""

    def __init__(self, normalizer: SkillNormalizer = None, workers: Optional[int] = None):
        self.normalizer = normalizer or SkillNormalizer()
        self.workers = workers if workers is not None else get_settings().rank_workers

    def _matched(self, required: Sequence[str], have: set) -> Tuple[List[str], List[str]]:
        wanted = self.normalizer.normalize_all(required)
        return wanted, [s for s in wanted if s in have]

    def skill_match(self, jd: JDFacts, resume: ResumeFacts) -> Tuple[float, List[str]]:
        """Score plus matched skills (mandatory first, then preferred) as evidence."""
        have = set(self.normalizer.normalize_all(resume.skills))
        mandatory, matched_mandatory = self._matched(jd.mandatory_skills, have)

        if not mandatory:
            return NEUTRAL, []

        score = len(matched_mandatory) / len(mandatory) * 100

        preferred, matched_preferred = self._matched(jd.preferred_skills, have)
        if preferred:
            score += len(matched_preferred) / len(preferred) * PREFERRED_BONUS_MAX

        tools, matched_tools = self._matched(jd.tools, have)
        if tools:
            score += len(matched_tools) / len(tools) * TOOLS_BONUS_MAX

        methods, matched_methods = self._matched(jd.methodologies, have)
        if methods:
            score += len(matched_methods) / len(methods) * METHODOLOGY_SKILL_BONUS_MAX

        return min(score, 100.0), matched_mandatory + matched_preferred

    @staticmethod
    def domain_fit(jd: JDFacts, resume: ResumeFacts) -> Tuple[float, List[str]]:
        jd_domains = [d.strip().lower() for d in jd.domains if d and d.strip()]
        if not jd_domains:
            return NEUTRAL, []
        resume_domains = [d.strip().lower() for d in resume.domains if d and d.strip()]
        matched = [d for d in jd_domains if any(d in r or r in d for r in resume_domains)]
        return len(matched) / len(jd_domains) * 100, matched

    def score(self, jd: JDFacts, resume: ResumeFacts, jd_id: str = None, resume_id: str = None) -> RecruitmentScoreRecord:
        skill, matched_skills = self.skill_match(jd, resume)
        domain, matched_domains = self.domain_fit(jd, resume)
        execution = _ratio_score(
            resume.high_risk_deliveries,
            max(resume.critical_deliveries_total, jd.critical_deliveries_required),
        )
        delivery_risk = _ratio_score(
            resume.risk_areas_managed,
            max(resume.identified_risk_areas, jd.risk_areas_expected),
        )
        method_bonus = methodology_bonus(jd.methodologies, resume.methodologies)
        penalty = pmo_penalty(resume.hands_on_ratio)
        bonus = scale_bonus(resume)

        final = (
            WEIGHT_SKILL * skill
            + WEIGHT_DOMAIN * domain
            + WEIGHT_EXECUTION * execution
            + WEIGHT_DELIVERY_RISK * delivery_risk
            + bonus
            + method_bonus
            + penalty
        )
        final = max(0.0, min(100.0, final))
        rating = rate(round(final, 2))

        logger.info(
            f"Recruitment score for {resume.candidate_name or resume_id}: "
            f"Skills={skill:.1f}%, Domain={domain:.1f}%, Execution={execution:.1f}%, "
            f"Risk={delivery_risk:.1f}%, Bonus={bonus + method_bonus}, Penalty={penalty}, "
            f"Final={final:.1f} ({rating})"
        )

        key_projects = [
            p.name for p in resume.projects
            if p.name and (p.was_production_launch or p.risk_events_handled)
        ]
        risk_events = list(dict.fromkeys(r for p in resume.projects for r in p.risk_events_handled if r))

        return RecruitmentScoreRecord(
            jd_id=jd_id,
            resume_id=resume_id,
            candidate_name=resume.candidate_name,
            skill_match=skill,
            domain_fit=domain,
            execution=execution,
            delivery_risk=delivery_risk,
            scale_bonus=bonus,
            methodology_bonus=method_bonus,
            pmo_penalty=penalty,
            final_score=final,
            rating=rating,
            matched_skills=matched_skills,
            matched_domains=matched_domains,
            key_projects=key_projects,
            risk_events=risk_events,
            scale_indicators=scale_indicators(resume),
        )

    def rank(
        self,
        jd: JDFacts,
        resumes: Sequence[ResumeFacts],
        jd_id: str = None,
        resume_ids: Sequence[str] = None,
    ) -> List[RecruitmentScoreRecord]:
        """Score every resume against one JD; highest first, ties keep input order."""
        ids = list(resume_ids) if resume_ids is not None else [None] * len(resumes)
        if len(ids) != len(resumes):
            raise ValueError("resume_ids must be the same length as resumes")

        with PerformanceMonitor(f"rank {len(resumes)} resumes for JD {jd_id}", logger):
            if self.workers > 1 and len(resumes) > 1:
                with ThreadPoolExecutor(max_workers=self.workers) as pool:
                    records = list(pool.map(lambda pair: self.score(jd, pair[0], jd_id, pair[1]), zip(resumes, ids)))
            else:
                records = [self.score(jd, r, jd_id, rid) for r, rid in zip(resumes, ids)]

        return sorted(records, key=lambda r: r.final_score, reverse=True)
