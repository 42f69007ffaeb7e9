"""
Turn loosely-typed extraction payloads (the LLM extractor's JSON) into typed facts.

All "look up key, cast, fall back" handling lives here so the scorers only
ever see validated ResumeFacts / JDFacts.
"""
from typing import Any, Dict, List, Optional

from jdmatch.models.facts import (
    CareerSummary,
    EducationEntry,
    JDFacts,
    ProjectFact,
    ResumeFacts,
    ScaleRequirements,
    WorkHistoryEntry,
)
from jdmatch.services.normalization import SkillNormalizer
from jdmatch.utils.logging_config import get_logger

logger = get_logger(__name__)

CRITICAL_DELIVERY_KEYWORDS = ("production launch", "migration", "go-live", "critical", "enterprise")
RISK_AREA_KEYWORDS = ("risk", "security", "compliance", "disaster", "backup")
MIN_INFERRED_CRITICAL_DELIVERIES = 3
MIN_INFERRED_RISK_AREAS = 2

DOMAIN_KEYWORDS = (
    ("fintech", ("fintech", "financial", "banking")),
    ("healthcare", ("healthcare", "medical", "health")),
    ("saas", ("saas", "software as a service")),
    ("e-commerce", ("e-commerce", "ecommerce", "retail")),
    ("logistics", ("logistics", "supply chain")),
)


def _as_text(x: Any) -> str:
    if x is None:
        return ""
    if isinstance(x, list):
        return " ".join([str(t).strip() for t in x if str(t).strip()])
    return str(x).strip()


def _as_list(x: Any) -> List[str]:
    if x is None:
        return []
    if isinstance(x, str):
        parts = [p.strip() for p in x.replace(";", ",").split(",")]
        return [p for p in parts if p]
    if isinstance(x, list):
        return [str(t).strip() for t in x if t is not None and str(t).strip()]
    return []


def _as_skill_list(x: Any) -> List[str]:
    # flat list, or a category -> list map such as {"languages": [...], "cloud": [...]}
    if isinstance(x, dict):
        out: List[str] = []
        for value in x.values():
            out.extend(_as_list(value))
        return out
    return _as_list(x)


def _as_int(x: Any) -> int:
    if isinstance(x, bool):
        return int(x)
    if isinstance(x, (int, float)):
        return max(0, int(x))
    try:
        return max(0, int(float(str(x).strip())))
    except (TypeError, ValueError):
        return 0


def _as_float(x: Any) -> float:
    if isinstance(x, bool):
        return float(x)
    if isinstance(x, (int, float)):
        return max(0.0, float(x))
    try:
        return max(0.0, float(str(x).strip()))
    except (TypeError, ValueError):
        return 0.0


def _as_bool(x: Any) -> bool:
    if isinstance(x, str):
        return x.strip().lower() in ("true", "yes", "1")
    return x is True


def _first(payload: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = payload.get(key)
        if value not in (None, "", [], {}):
            return value
    return None


def infer_delivery_type(role: str) -> str:
    role_lower = (role or "").lower()
    if "pmo" in role_lower or "governance" in role_lower:
        return "governance"
    if "lead" in role_lower or "developer" in role_lower or "engineer" in role_lower:
        return "hands-on"
    return "hybrid"


def project_from_payload(project: Dict[str, Any]) -> ProjectFact:
    role = _as_text(project.get("role"))
    delivery_type = _as_text(project.get("delivery_type")) or infer_delivery_type(role)
    return ProjectFact(
        name=_as_text(_first(project, "project_name", "name")),
        domain=_as_text(project.get("domain")),
        role=role,
        tech_stack=_as_list(_first(project, "technologies_used", "tech_stack")),
        team_size=_as_int(project.get("team_size")),
        budget_managed_usd_thousands=_as_float(project.get("budget_managed")),
        duration_months=_as_int(project.get("duration_months")),
        was_production_launch=_as_bool(project.get("production_launch")),
        risk_events_handled=_as_list(project.get("risk_events_handled")),
        delivery_type=delivery_type,
    )


def _candidate_name(payload: Dict[str, Any], default_name: str) -> str:
    profile = payload.get("candidate_profile")
    if isinstance(profile, dict):
        name = _as_text(profile.get("name"))
        if name:
            return name
    return _as_text(payload.get("name")) or default_name


def resume_facts_from_payload(
    payload: Optional[Dict[str, Any]],
    normalizer: SkillNormalizer = None,
    default_name: str = "",
    legacy_skills: Optional[List[str]] = None,
) -> ResumeFacts:
    normalizer = normalizer or SkillNormalizer()
    payload = payload or {}

    skills = _as_skill_list(payload.get("skills")) + list(legacy_skills or [])

    projects = []
    for raw in payload.get("projects") or []:
        if isinstance(raw, dict):
            projects.append(project_from_payload(raw))

    work_history = []
    for raw in payload.get("work_experience") or payload.get("work_history") or []:
        if not isinstance(raw, dict):
            continue
        work_history.append(WorkHistoryEntry(
            company=_as_text(raw.get("company")),
            title=_as_text(_first(raw, "job_title", "title")),
            start=_as_text(_first(raw, "start_date", "start")) or None,
            end=_as_text(_first(raw, "end_date", "end")) or None,
        ))

    education = []
    for raw in payload.get("education") or []:
        if not isinstance(raw, dict):
            continue
        year = _as_int(raw.get("graduation_year")) or None
        education.append(EducationEntry(
            institution=_as_text(raw.get("institution")),
            degree=_as_text(raw.get("degree")),
            end=_as_text(_first(raw, "end_date", "end")) or None,
            graduation_year=year,
        ))

    summary = payload.get("career_summary") if isinstance(payload.get("career_summary"), dict) else {}
    career = CareerSummary(
        production_launches=_as_int(summary.get("total_production_launches")),
        largest_team=_as_int(summary.get("largest_team_managed")),
        largest_budget_thousands=_as_float(summary.get("largest_budget_managed")),
        enterprise_flag=_as_bool(summary.get("enterprise_experience")),
        multi_year_flag=_as_bool(summary.get("multi_year_program_experience")),
    )

    return ResumeFacts(
        candidate_name=_candidate_name(payload, default_name),
        domains=[d.lower() for d in _as_list(_first(payload, "domain_experience", "domains"))],
        skills=normalizer.normalize_all(skills),
        methodologies=[m.lower() for m in _as_list(_first(payload, "methodology_experience", "methodologies"))],
        projects=projects,
        work_history=work_history,
        education=education,
        certifications=_as_list(payload.get("certifications")),
        total_experience_years=_as_float(payload.get("total_experience_years")),
        career_summary=career,
    )


def _scale_from_payload(scale: Any) -> ScaleRequirements:
    if not isinstance(scale, dict):
        return ScaleRequirements()
    return ScaleRequirements(
        enterprise=_as_bool(scale.get("enterprise_scale")) or _as_bool(scale.get("enterprise")),
        multi_year=_as_bool(scale.get("multi_year_program")) or _as_bool(scale.get("multi_year")),
        large_budget=_as_bool(scale.get("large_budget_expected")) or _as_bool(scale.get("large_budget")),
    )


def jd_facts_from_payload(
    payload: Optional[Dict[str, Any]],
    raw_text: str = "",
    normalizer: SkillNormalizer = None,
    infer: bool = True,
) -> JDFacts:
    normalizer = normalizer or SkillNormalizer()
    payload = payload or {}

    jd = JDFacts(
        title=_as_text(_first(payload, "job_title", "title")),
        raw_text=raw_text or _as_text(payload.get("text")),
        domains=[d.lower() for d in _as_list(_first(payload, "jd_domains", "domain", "domains"))],
        mandatory_skills=normalizer.normalize_all(_as_skill_list(_first(payload, "mandatory_skills", "required_skills"))),
        preferred_skills=normalizer.normalize_all(_as_skill_list(payload.get("preferred_skills"))),
        tools=normalizer.normalize_all(_as_skill_list(_first(payload, "tools_platforms", "tools"))),
        methodologies=[m.lower() for m in _as_list(payload.get("methodologies"))],
        min_experience=_as_int(_first(payload, "min_experience", "min_experience_years")),
        critical_deliveries_required=_as_int(payload.get("critical_deliveries_required")),
        risk_areas_expected=_as_int(payload.get("risk_areas_expected")),
        delivery_style=_as_text(payload.get("jd_delivery_style")) or None,
        scale_requirements=_scale_from_payload(payload.get("scale_requirements")),
    )
    return infer_jd_defaults(jd) if infer else jd


def infer_jd_defaults(jd: JDFacts) -> JDFacts:
    """Keyword backfill over the JD's raw text for counts left at zero and empty domains.

    Only runs when raw text is available; returns a new JDFacts.
    """
    text = (jd.raw_text or "").lower()
    if not text.strip():
        return jd

    update: Dict[str, Any] = {}
    if jd.critical_deliveries_required == 0:
        hits = sum(1 for k in CRITICAL_DELIVERY_KEYWORDS if k in text)
        update["critical_deliveries_required"] = max(hits, MIN_INFERRED_CRITICAL_DELIVERIES)
    if jd.risk_areas_expected == 0:
        hits = sum(1 for k in RISK_AREA_KEYWORDS if k in text)
        update["risk_areas_expected"] = max(hits, MIN_INFERRED_RISK_AREAS)
    if not jd.domains:
        inferred = [name for name, keywords in DOMAIN_KEYWORDS if any(k in text for k in keywords)]
        if inferred:
            update["domains"] = inferred

    if update:
        logger.debug(f"Backfilled JD fields from text: {sorted(update)}")
    return jd.model_copy(update=update)
