"""Tests for the Format/ATS-Compatibility scorer."""

from resume_optimizer.services.scorers.format import FormatScorer, _clean_line


def _rules(result):
    return {i.rule for i in result.issues}


class TestFormatScorer:
    def setup_method(self):
        self.scorer = FormatScorer()

    def test_well_structured_resume(self, sample_resume):
        result = self.scorer.score(sample_resume)
        assert _rules(result) == {"too-short"}
        assert result.score == 92
        assert result.ats_compatibility == 100
        assert all(s.present for s in result.section_structure if s.recommended)

    def test_missing_sections_and_contact(self):
        result = self.scorer.score("Jane Doe\n- Built APIs for the payments team using Python and Go\n")
        assert {"missing-contact", "missing-section", "too-short"} <= _rules(result)
        missing = {i.section for i in result.issues if i.rule == "missing-section"}
        assert missing == {"summary", "experience", "education", "skills"}
        # each rule is charged once at its worst severity
        assert result.ats_compatibility == 70
        assert result.score == 62

    def test_table_layout(self, sample_resume):
        text = sample_resume + "\nTools | Python | Docker | AWS\n"
        issue = next(i for i in self.scorer.score(text).issues if i.rule == "table-layout")
        assert issue.severity == "high"
        assert issue.context == "Tools | Python | Docker | AWS"

    def test_special_characters_carry_replacement(self, sample_resume):
        text = sample_resume + "\n★ Shipped 3 products to 12 countries\n"
        result = self.scorer.score(text)
        issue = next(i for i in result.issues if i.rule == "special-characters")
        assert issue.context == "★ Shipped 3 products to 12 countries"
        assert issue.replacement == "- Shipped 3 products to 12 countries"
        assert result.ats_compatibility < 100

    def test_standard_bullets_are_safe(self, sample_resume):
        text = sample_resume.replace("- Led", "• Led")
        assert "special-characters" not in _rules(self.scorer.score(text))

    def test_inconsistent_dates(self, sample_resume):
        text = sample_resume + "\nContractor, 03/2018 - December 2019\n"
        issue = next(i for i in self.scorer.score(text).issues if i.rule == "inconsistent-dates")
        assert issue.severity == "low"

    def test_short_input(self):
        result = self.scorer.score("Managed projects.")
        assert result.score == 0
        assert result.ats_compatibility == 0
        assert _rules(result) == {"insufficient-text"}
        assert [s.order for s in result.section_structure] == list(range(1, 8))

    def test_recommendations_are_unique(self):
        result = self.scorer.score("Jane Doe\n- Built APIs for the payments team using Python and Go\n")
        assert len(result.recommendations) == len(set(result.recommendations))


def test_clean_line():
    assert _clean_line("★ Led the team ✓") == "- Led the team"
    assert _clean_line("Plain text") == "Plain text"
