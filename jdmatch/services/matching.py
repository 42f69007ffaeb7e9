import math
import re
from functools import lru_cache
from typing import Iterable, List, Sequence, Union

from jdmatch.models.records import BasicMatchResult, SkillWeight, WeightedMatchResult
from jdmatch.services.normalization import SkillNormalizer
from jdmatch.utils.logging_config import get_logger

logger = get_logger(__name__)

SHORT_TOKEN_LEN = 2
_PUNCT = re.compile(r"[.\-\s]+")


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


@lru_cache(maxsize=4096)
def _word_pattern(token: str) -> "re.Pattern":
    # \b<token>\b, but tolerant of tokens that start/end with non-word chars (c++, .net)
    return re.compile(r"(?<!\w)" + re.escape(token) + r"(?!\w)", re.IGNORECASE)


def _contains_word(haystack: str, needle: str) -> bool:
    if not needle or not haystack:
        return False
    return _word_pattern(needle).search(haystack) is not None


def _compact(s: str) -> str:
    return _PUNCT.sub("", s)


class FuzzySkillMatcher:
    """Decides whether a required skill is present in a candidate's skill set."""

    def __init__(self, normalizer: SkillNormalizer = None):
        self.normalizer = normalizer or SkillNormalizer()

    def is_match(self, a: str, b: str) -> bool:
        if not a or not b or not a.strip() or not b.strip():
            return False
        raw_a, raw_b = a.strip().lower(), b.strip().lower()
        norm_a, norm_b = self.normalizer.normalize(raw_a), self.normalizer.normalize(raw_b)

        # 1. exact after normalization
        if norm_a == norm_b:
            return True

        # 2. short acronyms only ever match exactly
        if len(norm_a) <= SHORT_TOKEN_LEN or len(norm_b) <= SHORT_TOKEN_LEN:
            return False

        # 3. whole-word containment on the raw strings
        if len(raw_a) > SHORT_TOKEN_LEN and len(raw_b) > SHORT_TOKEN_LEN:
            if _contains_word(raw_b, raw_a) or _contains_word(raw_a, raw_b):
                return True

        # 4. same check on normalized forms, then punctuation-insensitive equality
        if _contains_word(norm_b, norm_a) or _contains_word(norm_a, norm_b):
            return True
        return _compact(norm_a) == _compact(norm_b)

    def matches(self, requirement: str, candidate_skills: Iterable[str]) -> bool:
        return any(self.is_match(requirement, c) for c in candidate_skills or [])


class BasicMatchCalculator:
    """Percentage match over two flat skill lists."""

    def __init__(self, matcher: FuzzySkillMatcher = None):
        self.matcher = matcher or FuzzySkillMatcher()

    def simple_match(self, required: Sequence[str], candidate: Sequence[str]) -> BasicMatchResult:
        required = [s for s in (required or []) if s and s.strip()]
        candidate = [s for s in (candidate or []) if s and s.strip()]
        logger.debug(f"Calculating match for {len(required)} required and {len(candidate)} candidate skills")

        if not required:
            return BasicMatchResult(score_pct=0, extra=list(candidate))

        if not candidate:
            return BasicMatchResult(
                score_pct=0,
                missing=list(required),
                total_required=len(required),
            )

        matched: List[str] = []
        missing: List[str] = []
        for skill in required:
            if self.matcher.matches(skill, candidate):
                matched.append(skill)
            else:
                missing.append(skill)

        extra = [c for c in candidate if not any(self.matcher.is_match(r, c) for r in required)]
        score = round_half_up(len(matched) / len(required) * 100)

        return BasicMatchResult(
            score_pct=score,
            matched=list(dict.fromkeys(matched)),
            missing=missing,
            extra=extra,
            total_required=len(required),
            total_matched=len(matched),
        )

    def weighted_match(
        self,
        required_with_weights: Sequence[Union[SkillWeight, dict]],
        candidate: Sequence[str],
    ) -> WeightedMatchResult:
        candidate = [s for s in (candidate or []) if s and s.strip()]
        total_weight = 0.0
        matched_weight = 0.0
        matched: List[str] = []
        missing: List[SkillWeight] = []

        for entry in required_with_weights or []:
            item = entry if isinstance(entry, SkillWeight) else SkillWeight(**entry)
            total_weight += item.weight
            if self.matcher.matches(item.skill, candidate):
                matched_weight += item.weight
                matched.append(item.skill)
            else:
                missing.append(item)

        score = round_half_up(matched_weight / total_weight * 100) if total_weight > 0 else 0
        return WeightedMatchResult(
            score_pct=score,
            matched=matched,
            missing_with_weight=missing,
            total_weight=total_weight,
            matched_weight=matched_weight,
        )
