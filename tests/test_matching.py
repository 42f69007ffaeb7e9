import pytest

from jdmatch.models.records import SkillWeight
from jdmatch.services.matching import BasicMatchCalculator, FuzzySkillMatcher, round_half_up
from jdmatch.services.normalization import SkillNormalizer, default_table


@pytest.fixture
def matcher():
    return FuzzySkillMatcher(SkillNormalizer(default_table()))


@pytest.fixture
def calculator(matcher):
    return BasicMatchCalculator(matcher)


class TestFuzzySkillMatcher:
    """Test cases for fuzzy skill matching"""

    def test_synonyms_match_exactly(self, matcher):
        assert matcher.is_match("k8s", "Kubernetes")
        assert matcher.is_match("Node.js", "node")

    def test_whole_word_containment(self, matcher):
        assert matcher.is_match("python", "python developer")
        assert matcher.is_match("senior python developer", "python")

    def test_java_does_not_match_javascript(self, matcher):
        assert not matcher.is_match("java", "javascript")
        assert not matcher.matches("java", ["javascript", "typescript"])

    def test_short_tokens_only_match_exactly(self, matcher):
        assert not matcher.is_match("r", "react")
        assert not matcher.is_match("go", "go-to-market strategy")
        assert matcher.is_match("R", "r")

    def test_symbol_tokens(self, matcher):
        assert matcher.is_match("c++", "modern c++ engineer")
        assert not matcher.is_match("c++", "c")

    def test_punctuation_insensitive(self, matcher):
        assert matcher.is_match("vue.js", "vuejs")

    def test_blank_never_matches(self, matcher):
        assert not matcher.is_match("", "python")
        assert not matcher.is_match("python", "   ")
        assert not matcher.matches("python", [])


class TestBasicMatchCalculator:
    """Test cases for simple and weighted percentage matching"""

    def test_empty_required(self, calculator):
        result = calculator.simple_match([], ["python", "aws"])
        assert result.score_pct == 0
        assert result.matched == []
        assert result.extra == ["python", "aws"]

    def test_empty_candidate(self, calculator):
        result = calculator.simple_match(["python", "aws"], [])
        assert result.score_pct == 0
        assert result.missing == ["python", "aws"]
        assert result.total_required == 2

    def test_word_boundary_containment_full_match(self, calculator):
        result = calculator.simple_match(["Python", "AWS"], ["python developer", "aws certified"])
        assert result.score_pct == 100
        assert result.matched == ["Python", "AWS"]
        assert result.extra == []

    def test_short_token_guard(self, calculator):
        result = calculator.simple_match(["r"], ["react"])
        assert result.score_pct == 0
        assert result.missing == ["r"]

    def test_partial_match_rounds_half_up(self, calculator):
        result = calculator.simple_match(["python", "docker", "kafka"], ["python", "docker"])
        assert result.score_pct == 67
        assert result.missing == ["kafka"]
        assert result.total_matched == 2

    def test_duplicate_requirements(self, calculator):
        result = calculator.simple_match(["python", "python"], ["python"])
        assert result.matched == ["python"]
        assert result.total_matched == 2
        assert result.score_pct == 100

    def test_weighted_match(self, calculator):
        required = [
            SkillWeight(skill="python", weight=3),
            {"skill": "kafka", "weight": 1},
        ]
        result = calculator.weighted_match(required, ["python", "aws"])
        assert result.score_pct == 75
        assert result.matched == ["python"]
        assert result.total_weight == 4
        assert result.matched_weight == 3
        assert [m.skill for m in result.missing_with_weight] == ["kafka"]

    def test_weighted_match_zero_weight(self, calculator):
        result = calculator.weighted_match([{"skill": "python", "weight": 0}], ["python"])
        assert result.score_pct == 0


@pytest.mark.parametrize("value,expected", [(0.5, 1), (1.49, 1), (66.5, 67), (66.49, 66), (0, 0)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected
