"""
Five-factor skill based match score (no embeddings).

final = 0.40*skill + 0.25*experience + 0.20*projects + 0.10*certifications
        + 0.05*domain - gap_penalty, clamped to [0, 1]
"""
from typing import List, Optional, Tuple

from jdmatch.models.facts import JDFacts, ResumeFacts
from jdmatch.models.records import GapReport, MatchRecord
from jdmatch.services.gaps import EmploymentGapCalculator
from jdmatch.services.matching import FuzzySkillMatcher
from jdmatch.utils.config import get_settings
from jdmatch.utils.logging_config import get_logger

logger = get_logger(__name__)

WEIGHT_SKILL = 0.40
WEIGHT_EXPERIENCE = 0.25
WEIGHT_PROJECTS = 0.20
WEIGHT_CERTIFICATIONS = 0.10
WEIGHT_DOMAIN = 0.05

PREFERRED_BONUS_MAX = 0.20
CERT_STEP = 0.25
NEUTRAL = 0.5


def gap_penalty(gaps: GapReport) -> float:
    if not gaps.has_gap:
        return 0.0
    if gaps.total_gap_months < 12:
        return 0.05
    if gaps.total_gap_months < 24:
        return 0.10
    return 0.15


def experience_score(candidate_years: float, min_experience: int) -> Tuple[float, str]:
    if min_experience <= 0:
        return NEUTRAL, "NO_REQUIREMENT"
    if candidate_years >= min_experience + 2:
        return 1.0, "EXCEEDS"
    if candidate_years >= min_experience:
        return 1.0, "MEETS"
    if candidate_years >= min_experience * 0.7:
        return 0.7, "PARTIAL"
    return candidate_years / min_experience, "INSUFFICIENT"


def categorize(total: float, select_min: float, reject_max: float) -> str:
    if total >= select_min:
        return "accepted"
    if total <= reject_max:
        return "rejected"
    return "review"


class CoreMatchScorer:
    """Stateless scorer producing a fresh MatchRecord per call."""

    def __init__(
        self,
        matcher: FuzzySkillMatcher = None,
        gap_calculator: EmploymentGapCalculator = None,
        select_min: Optional[float] = None,
        reject_max: Optional[float] = None,
    ):
        self.matcher = matcher or FuzzySkillMatcher()
        self.gap_calculator = gap_calculator or EmploymentGapCalculator()
        if select_min is None or reject_max is None:
            settings = get_settings()
            select_min = settings.select_min if select_min is None else select_min
            reject_max = settings.reject_max if reject_max is None else reject_max
        self.select_min = select_min
        self.reject_max = reject_max

    def _skill_score(self, jd: JDFacts, resume: ResumeFacts):
        required = [s for s in jd.mandatory_skills if s and s.strip()]
        preferred = [s for s in jd.preferred_skills if s and s.strip()]

        matched = [s for s in required if self.matcher.matches(s, resume.skills)]
        missing = [s for s in required if s not in matched]
        matched_pref = [s for s in preferred if self.matcher.matches(s, resume.skills)]

        if not required:
            return NEUTRAL, matched, missing, matched_pref

        score = len(matched) / len(required)
        if preferred:
            score = min(score + len(matched_pref) / len(preferred) * PREFERRED_BONUS_MAX, 1.0)
        return score, matched, missing, matched_pref

    def _project_score(self, jd: JDFacts, resume: ResumeFacts) -> Tuple[float, List[str]]:
        total = len(resume.projects)
        if total == 0:
            return 0.0, []
        relevant = [
            p for p in resume.projects
            if any(self.matcher.matches(req, p.tech_stack) for req in jd.mandatory_skills)
        ]
        score = min(len(relevant) / total, 1.0)
        if relevant:
            score = max(score, NEUTRAL)
        return score, [p.name for p in relevant if p.name]

    @staticmethod
    def _certification_score(jd: JDFacts, resume: ResumeFacts) -> Tuple[float, List[str]]:
        required = [s.strip().lower() for s in jd.mandatory_skills if s and s.strip()]
        relevant = []
        for cert in resume.certifications:
            if not cert or not cert.strip():
                continue
            cert_lower = cert.strip().lower()
            if any(skill in cert_lower or cert_lower in skill for skill in required):
                relevant.append(cert)
        return min(len(relevant) * CERT_STEP, 1.0), relevant

    @staticmethod
    def _domain_match(jd: JDFacts, resume: ResumeFacts) -> bool:
        jd_domains = {d.strip().lower() for d in jd.domains if d and d.strip()}
        resume_domains = {d.strip().lower() for d in resume.domains if d and d.strip()}
        return bool(jd_domains & resume_domains)

    def score(self, jd: JDFacts, resume: ResumeFacts, jd_id: str = None, resume_id: str = None) -> MatchRecord:
        skill, matched, missing, matched_pref = self._skill_score(jd, resume)
        exp, exp_status = experience_score(resume.total_experience_years, jd.min_experience)
        project, relevant_projects = self._project_score(jd, resume)
        cert, relevant_certs = self._certification_score(jd, resume)
        domain_match = self._domain_match(jd, resume)
        domain = 1.0 if domain_match else 0.0

        gaps = self.gap_calculator.calculate(resume.work_history, resume.education)
        penalty = gap_penalty(gaps)

        final = (
            WEIGHT_SKILL * skill
            + WEIGHT_EXPERIENCE * exp
            + WEIGHT_PROJECTS * project
            + WEIGHT_CERTIFICATIONS * cert
            + WEIGHT_DOMAIN * domain
            - penalty
        )
        final = max(0.0, min(1.0, final))

        logger.info(
            f"Match: {resume_id or resume.candidate_name} vs {jd_id or jd.title} | "
            f"Skills: {len(matched)}/{len(jd.mandatory_skills)} | Exp: {exp_status} | "
            f"Gap penalty: {penalty:.2f} | Score: {final:.3f}"
        )

        return MatchRecord(
            jd_id=jd_id,
            resume_id=resume_id,
            candidate_name=resume.candidate_name,
            skill_score=skill,
            experience_score=exp,
            project_score=project,
            certification_score=cert,
            domain_score=domain,
            gap_penalty=penalty,
            final_score=final,
            matched_skills=matched,
            missing_skills=missing,
            matched_preferred_skills=matched_pref,
            total_required_skills=len([s for s in jd.mandatory_skills if s and s.strip()]),
            total_preferred_skills=len([s for s in jd.preferred_skills if s and s.strip()]),
            experience_status=exp_status,
            candidate_experience=resume.total_experience_years,
            required_experience=jd.min_experience,
            relevant_projects=relevant_projects,
            total_projects=len(resume.projects),
            relevant_certifications=relevant_certs,
            domain_match=domain_match,
            has_employment_gap=gaps.has_gap,
            total_gap_months=gaps.total_gap_months,
            gap_details=gaps.gap_details,
            candidate_status=categorize(final, self.select_min, self.reject_max),
        )
