import pytest
from pydantic import ValidationError as PydanticValidationError

from jdmatch.helpers.extraction import (
    infer_delivery_type,
    infer_jd_defaults,
    jd_facts_from_payload,
    project_from_payload,
    resume_facts_from_payload,
)
from jdmatch.models.facts import JDFacts, ProjectFact, ResumeFacts
from jdmatch.services.normalization import SkillNormalizer, default_table


@pytest.fixture
def normalizer():
    return SkillNormalizer(default_table())


@pytest.fixture
def resume_payload():
    return {
        "candidate_profile": {"name": "Grace Hopper"},
        "domain_experience": ["FinTech", "Healthcare"],
        "skills": {"languages": ["Python", "JS"], "cloud": ["K8s", "Amazon Web Services"]},
        "methodology_experience": "Agile, Scrum",
        "projects": [
            {
                "project_name": "Ledger Migration",
                "role": "Tech Lead",
                "technologies_used": ["python", "postgresql"],
                "team_size": "30",
                "budget_managed": 12000,
                "duration_months": 30,
                "production_launch": "yes",
                "risk_events_handled": ["cutover rollback", "vendor delay"],
            },
            {
                "project_name": "Portfolio Governance",
                "role": "PMO Manager",
                "team_size": "n/a",
            },
        ],
        "work_experience": [
            {"company": "Acme", "job_title": "Engineer", "start_date": "2015-01", "end_date": "2018-12"},
            {"company": "Globex", "title": "Lead", "start_date": "2019-08", "end_date": "Present"},
        ],
        "education": [{"institution": "MIT", "degree": "BSc", "graduation_year": "2014"}],
        "certifications": ["AWS Solutions Architect"],
        "total_experience_years": "9.5",
        "career_summary": {"enterprise_experience": True, "largest_team_managed": 12},
    }


class TestResumeExtraction:
    """Test cases for turning resume payloads into ResumeFacts"""

    def test_resume_facts_from_payload(self, resume_payload, normalizer):
        facts = resume_facts_from_payload(resume_payload, normalizer=normalizer)

        assert facts.candidate_name == "Grace Hopper"
        assert facts.domains == ["fintech", "healthcare"]
        assert facts.skills == ["python", "javascript", "kubernetes", "aws"]
        assert facts.methodologies == ["agile", "scrum"]
        assert facts.total_experience_years == 9.5
        assert len(facts.work_history) == 2
        assert facts.work_history[1].title == "Lead"
        assert facts.education[0].graduation_year == 2014

    def test_derived_aggregates(self, resume_payload, normalizer):
        facts = resume_facts_from_payload(resume_payload, normalizer=normalizer)

        assert facts.projects[0].delivery_type == "hands-on"
        assert facts.projects[1].delivery_type == "governance"
        assert facts.projects[1].team_size == 0
        assert facts.hands_on_ratio == 0.5
        assert facts.pmo_ratio == 0.5
        assert facts.largest_team_size == 30
        assert facts.max_budget_managed == 12_000_000
        assert facts.multi_year_programs == 1
        assert facts.enterprise_scale is True
        assert facts.critical_deliveries_total == 1
        assert facts.high_risk_deliveries == 1
        assert facts.risk_areas_managed == 2
        assert facts.identified_risk_areas == 2

    def test_empty_payload_uses_defaults(self, normalizer):
        facts = resume_facts_from_payload(None, normalizer=normalizer, default_name="cv.pdf", legacy_skills=["Py"])
        assert facts.candidate_name == "cv.pdf"
        assert facts.skills == ["python"]
        assert facts.projects == []
        assert facts.hands_on_ratio == 0.5
        assert facts.enterprise_scale is False

    def test_career_summary_backfills_aggregates(self, normalizer):
        facts = resume_facts_from_payload({
            "career_summary": {
                "total_production_launches": 4,
                "largest_budget_managed": 8000,
                "multi_year_program_experience": "true",
            },
        }, normalizer=normalizer)
        assert facts.critical_deliveries_total == 4
        assert facts.max_budget_managed == 8_000_000
        assert facts.multi_year_programs == 1
        assert facts.enterprise_scale is True

    def test_explicit_aggregates_are_kept(self):
        facts = ResumeFacts(projects=[ProjectFact(delivery_type="governance")], hands_on_ratio=0.9)
        assert facts.hands_on_ratio == 0.9

    def test_negative_counts_rejected(self):
        with pytest.raises(PydanticValidationError):
            ProjectFact(team_size=-1)

    @pytest.mark.parametrize("role,expected", [
        ("PMO Lead", "governance"),
        ("Program Governance", "governance"),
        ("Senior Developer", "hands-on"),
        ("Delivery Manager", "hybrid"),
        ("", "hybrid"),
    ])
    def test_infer_delivery_type(self, role, expected):
        assert infer_delivery_type(role) == expected

    def test_explicit_delivery_type_wins(self):
        project = project_from_payload({"role": "PMO", "delivery_type": "Hands On"})
        assert project.delivery_type == "hands-on"


class TestJDExtraction:
    """Test cases for turning JD payloads into JDFacts"""

    def test_jd_facts_from_payload(self, normalizer):
        jd = jd_facts_from_payload({
            "job_title": "Platform Lead",
            "jd_domains": ["SaaS"],
            "mandatory_skills": ["K8s", "Golang"],
            "preferred_skills": "Kafka; Redis",
            "tools_platforms": ["JIRA"],
            "methodologies": ["Scrum"],
            "min_experience": "7",
            "critical_deliveries_required": 2,
            "risk_areas_expected": 1,
            "jd_delivery_style": "Governance",
            "scale_requirements": {"enterprise_scale": True, "multi_year": "yes"},
        }, normalizer=normalizer)

        assert jd.title == "Platform Lead"
        assert jd.domains == ["saas"]
        assert jd.mandatory_skills == ["kubernetes", "go"]
        assert jd.preferred_skills == ["kafka", "redis"]
        assert jd.methodologies == ["scrum"]
        assert jd.min_experience == 7
        assert jd.critical_deliveries_required == 2
        assert jd.risk_areas_expected == 1
        assert jd.delivery_style == "governance"
        assert jd.scale_requirements.enterprise is True
        assert jd.scale_requirements.multi_year is True
        assert jd.scale_requirements.large_budget is False

    def test_required_skills_alias_and_default_style(self, normalizer):
        jd = jd_facts_from_payload({"required_skills": ["python"]}, normalizer=normalizer)
        assert jd.mandatory_skills == ["python"]
        assert jd.delivery_style == "hands-on"
        # no raw text, nothing inferred
        assert jd.critical_deliveries_required == 0
        assert jd.risk_areas_expected == 0


class TestJDInference:
    """Test cases for keyword backfill over JD text"""

    def test_backfill_minimums(self):
        jd = infer_jd_defaults(JDFacts(raw_text="We build SaaS products for banking clients."))
        assert jd.critical_deliveries_required == 3
        assert jd.risk_areas_expected == 2
        assert jd.domains == ["fintech", "saas"]

    def test_backfill_counts_keywords(self):
        text = (
            "Own the production launch, data migration and go-live of critical enterprise systems. "
            "Handle risk, security, compliance and disaster recovery."
        )
        jd = infer_jd_defaults(JDFacts(raw_text=text))
        assert jd.critical_deliveries_required == 5
        assert jd.risk_areas_expected == 4

    def test_explicit_values_are_kept(self):
        original = JDFacts(raw_text="critical healthcare work", critical_deliveries_required=1, domains=["pharma"])
        jd = infer_jd_defaults(original)
        assert jd.critical_deliveries_required == 1
        assert jd.domains == ["pharma"]
        assert jd.risk_areas_expected == 2
        assert original.risk_areas_expected == 0

    def test_no_text_no_inference(self):
        jd = JDFacts()
        assert infer_jd_defaults(jd) is jd
