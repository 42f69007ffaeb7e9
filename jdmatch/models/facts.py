"""
Typed fact records produced by the extraction collaborator.

Defaults are resolved here, once, so scoring code can use plain field access.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

DeliveryType = Literal["hands-on", "hybrid", "governance"]

DELIVERY_TYPES = ("hands-on", "hybrid", "governance")

ENTERPRISE_BUDGET_USD = 5_000_000
ENTERPRISE_TEAM_SIZE = 25
MULTI_YEAR_MONTHS = 24


def _coerce_delivery_type(v, default: str):
    if v is None:
        return default
    value = str(v).strip().lower().replace("_", "-").replace(" ", "-")
    if value == "handson":
        value = "hands-on"
    return value if value in DELIVERY_TYPES else default


class ProjectFact(BaseModel):
    name: str = ""
    domain: str = ""
    role: str = ""
    tech_stack: List[str] = Field(default_factory=list)
    team_size: int = Field(default=0, ge=0)
    budget_managed_usd_thousands: float = Field(default=0.0, ge=0.0)
    duration_months: int = Field(default=0, ge=0)
    was_production_launch: bool = False
    risk_events_handled: List[str] = Field(default_factory=list)
    delivery_type: DeliveryType = "hybrid"

    @field_validator("delivery_type", mode="before")
    @classmethod
    def normalize_delivery_type(cls, v):
        return _coerce_delivery_type(v, "hybrid")


class WorkHistoryEntry(BaseModel):
    company: str = ""
    title: str = ""
    start: Optional[str] = None   # YYYY-MM
    end: Optional[str] = None     # YYYY-MM, or present/current/now


class EducationEntry(BaseModel):
    institution: str = ""
    degree: str = ""
    end: Optional[str] = None
    graduation_year: Optional[int] = None


class CareerSummary(BaseModel):
    production_launches: int = Field(default=0, ge=0)
    largest_team: int = Field(default=0, ge=0)
    largest_budget_thousands: float = Field(default=0.0, ge=0.0)
    enterprise_flag: bool = False
    multi_year_flag: bool = False


class ResumeFacts(BaseModel):
    candidate_name: str = ""
    domains: List[str] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    methodologies: List[str] = Field(default_factory=list)
    projects: List[ProjectFact] = Field(default_factory=list)
    work_history: List[WorkHistoryEntry] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)
    certifications: List[str] = Field(default_factory=list)
    total_experience_years: float = Field(default=0.0, ge=0.0)
    career_summary: CareerSummary = Field(default_factory=CareerSummary)

    # Derived aggregates; computed from projects/career_summary unless set explicitly
    hands_on_ratio: float = Field(default=0.5, ge=0.0, le=1.0)
    pmo_ratio: float = Field(default=0.0, ge=0.0, le=1.0)
    largest_team_size: int = Field(default=0, ge=0)
    max_budget_managed: float = Field(default=0.0, ge=0.0)  # USD
    multi_year_programs: int = Field(default=0, ge=0)
    enterprise_scale: bool = False
    high_risk_deliveries: int = Field(default=0, ge=0)
    critical_deliveries_total: int = Field(default=0, ge=0)
    risk_areas_managed: int = Field(default=0, ge=0)
    identified_risk_areas: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def derive_aggregates(self):
        explicit = set(self.model_fields_set)
        summary = self.career_summary
        projects = self.projects

        derived = {}
        largest_team = max((p.team_size for p in projects), default=0)
        derived["largest_team_size"] = largest_team or summary.largest_team

        max_budget = max((p.budget_managed_usd_thousands for p in projects), default=0.0) * 1000
        derived["max_budget_managed"] = max_budget or summary.largest_budget_thousands * 1000

        multi_year = sum(1 for p in projects if p.duration_months > MULTI_YEAR_MONTHS)
        if multi_year == 0 and summary.multi_year_flag:
            multi_year = 1
        derived["multi_year_programs"] = multi_year

        launches = sum(1 for p in projects if p.was_production_launch)
        derived["critical_deliveries_total"] = launches or summary.production_launches

        derived["high_risk_deliveries"] = sum(1 for p in projects if p.risk_events_handled)
        derived["risk_areas_managed"] = sum(len(p.risk_events_handled) for p in projects)
        derived["identified_risk_areas"] = len({
            r.strip().lower() for p in projects for r in p.risk_events_handled if r and r.strip()
        })

        if projects:
            hands_on = sum(1 for p in projects if p.delivery_type in ("hands-on", "hybrid"))
            governance = sum(1 for p in projects if p.delivery_type == "governance")
            derived["hands_on_ratio"] = hands_on / len(projects)
            derived["pmo_ratio"] = governance / len(projects)
        else:
            derived["hands_on_ratio"] = 0.5
            derived["pmo_ratio"] = 0.0

        for name, value in derived.items():
            if name not in explicit:
                setattr(self, name, value)

        self.enterprise_scale = (
            self.enterprise_scale
            or summary.enterprise_flag
            or self.max_budget_managed >= ENTERPRISE_BUDGET_USD
            or self.largest_team_size >= ENTERPRISE_TEAM_SIZE
        )
        return self


class ScaleRequirements(BaseModel):
    enterprise: bool = False
    multi_year: bool = False
    large_budget: bool = False


class JDFacts(BaseModel):
    title: str = ""
    raw_text: str = ""
    domains: List[str] = Field(default_factory=list)
    mandatory_skills: List[str] = Field(default_factory=list)
    preferred_skills: List[str] = Field(default_factory=list)
    tools: List[str] = Field(default_factory=list)
    methodologies: List[str] = Field(default_factory=list)
    min_experience: int = Field(default=0, ge=0)
    critical_deliveries_required: int = Field(default=0, ge=0)
    risk_areas_expected: int = Field(default=0, ge=0)
    delivery_style: DeliveryType = "hands-on"
    scale_requirements: ScaleRequirements = Field(default_factory=ScaleRequirements)

    @field_validator("delivery_style", mode="before")
    @classmethod
    def normalize_delivery_style(cls, v):
        return _coerce_delivery_type(v, "hands-on")
