import pytest

from jdmatch.services.normalization import DEFAULT_SKILL_GROUPS, SkillNormalizer, SynonymTable, default_table


@pytest.fixture
def normalizer():
    return SkillNormalizer(default_table())


class TestSkillNormalizer:
    """Test cases for skill normalization"""

    @pytest.mark.parametrize("token", [
        "Node.js", "K8S", "  AWS ", "React JS", "golang", "unknown-skill", "C++", "ci/cd",
    ])
    def test_normalize_is_idempotent(self, normalizer, token):
        once = normalizer.normalize(token)
        assert normalizer.normalize(once) == once

    def test_symmetric_within_group(self, normalizer):
        assert normalizer.normalize("Node.js") == normalizer.normalize("nodejs") == normalizer.normalize("node")
        assert normalizer.normalize("nodejs") == "nodejs"

    def test_unknown_token_is_lowercased(self, normalizer):
        assert normalizer.normalize("  SomeNicheTool ") == "somenichetool"

    def test_none_and_blank_returned_unchanged(self, normalizer):
        assert normalizer.normalize(None) is None
        assert normalizer.normalize("   ") == "   "

    def test_normalize_all_dedupes_in_order(self, normalizer):
        result = normalizer.normalize_all(["k8s", "Python", "kubernetes", "", None, "py", "AWS"])
        assert result == ["kubernetes", "python", "aws"]

    def test_normalize_all_empty(self, normalizer):
        assert normalizer.normalize_all(None) == []
        assert normalizer.normalize_all([]) == []

    def test_variations(self, normalizer):
        variations = normalizer.variations("kubernetes")
        assert variations[0] == "kubernetes"
        assert "k8s" in variations
        assert normalizer.variations("not-a-skill") == ["not-a-skill"]

    def test_equivalent(self, normalizer):
        assert normalizer.equivalent("JS", "javascript")
        assert not normalizer.equivalent("java", "javascript")


class TestSynonymTable:
    """Test cases for the immutable synonym table"""

    def test_every_canonical_maps_to_itself(self):
        table = default_table()
        for group in DEFAULT_SKILL_GROUPS:
            canonical = group[0].strip().lower()
            assert table.lookup(canonical) == canonical

    def test_first_group_wins_on_conflict(self):
        table = SynonymTable([("alpha", "shared"), ("beta", "shared")])
        assert table.lookup("shared") == "alpha"
        assert table.lookup("beta") == "beta"

    def test_canonical_of_later_group_keeps_itself(self):
        table = SynonymTable([("alpha", "beta"), ("beta", "gamma")])
        assert table.lookup("beta") == "beta"
        assert table.lookup("gamma") == "beta"

    def test_mapping_is_read_only(self):
        table = SynonymTable([("alpha", "a1")])
        with pytest.raises(TypeError):
            table._mapping["new"] = "alpha"

    def test_default_table_is_built_once(self):
        assert default_table() is default_table()
        assert "k8s" in default_table()
        assert default_table().canonical_count == len({g[0].strip().lower() for g in DEFAULT_SKILL_GROUPS})
