"""Unit tests for job keyword matching and ATS scoring."""

from pathlib import Path

import pytest

from quill.contexts.matching import (
    AtsScorer,
    JobContext,
    compare_documents,
    extract_job_keywords,
    match_keywords,
    score_ats,
)
from quill.contexts.segmentation import extract_skills, segment_document

FIXTURES = Path(__file__).parent.parent / "fixtures"


@pytest.fixture
def sample_resume():
    return (FIXTURES / "sample_resume.txt").read_text(encoding="utf-8")


@pytest.mark.unit
class TestMatchKeywords:
    """Tests for match_keywords function."""

    def test_partial_match(self):
        """Test matched, missing and additional keywords."""
        result = match_keywords(["Python", "SQL"], ["python", "docker"])

        assert result.matched == ("python",)
        assert result.missing == ("docker",)
        assert result.additional == ("SQL",)
        assert result.match_score == 50

    def test_half_point_rounds_up(self):
        """Test a score landing on .5 rounds up (1 of 8 is 12.5)."""
        required = [f"skill{i}" for i in range(7)] + ["python"]
        assert match_keywords(["Python"], required).match_score == 13

    def test_document_text_counts_as_match(self):
        """Test a required keyword found in the text is matched."""
        result = match_keywords(["Python"], ["python", "docker"], "Deployed with Docker")
        assert result.match_score == 100
        assert result.missing == ()

    def test_whole_word_only(self):
        """Test keywords do not match inside longer words."""
        result = match_keywords([], ["java"], "Wrote JavaScript daily")
        assert result.missing == ("java",)

    def test_nothing_required(self):
        """Test an empty requirement list scores 0."""
        result = match_keywords(["Python"], [])
        assert result.match_score == 0
        assert result.additional == ("Python",)

    def test_adding_keywords_never_lowers_score(self):
        """Test the score is monotone in the document's keywords."""
        required = ["python", "docker", "terraform", "redis"]
        offered = []
        previous = match_keywords(offered, required).match_score
        for keyword in ["Docker", "Go", "Redis", "Python"]:
            offered.append(keyword)
            current = match_keywords(offered, required).match_score
            assert current >= previous
            previous = current
        assert previous == 75

    def test_sample_resume_against_job(self, sample_resume):
        """Test the sample résumé matches two of three job keywords."""
        sections = segment_document(sample_resume).sections
        skills = extract_skills(sample_resume, sections)
        result = match_keywords(skills, ["Python", "Kubernetes", "Terraform"], sample_resume)

        assert result.matched == ("Python", "Kubernetes")
        assert result.missing == ("Terraform",)
        assert result.match_score == 67


@pytest.mark.unit
class TestJobKeywords:
    """Tests for job keyword extraction and JobContext."""

    def test_extract_job_keywords(self):
        """Test vocabulary terms, requirement markers and action verbs."""
        text = (
            "We need 5+ years of experience with Python and Kubernetes. "
            "Bachelor's degree required. You will design and implement APIs."
        )
        assert extract_job_keywords(text) == [
            "python",
            "kubernetes",
            "years of experience",
            "degree",
            "design",
            "implement",
        ]

    def test_extract_from_empty_text(self):
        """Test empty or missing text yields no keywords."""
        assert extract_job_keywords("") == []
        assert extract_job_keywords(None) == []

    def test_from_inputs(self):
        """Test JobContext is None without keywords or description."""
        assert JobContext.from_inputs() is None
        assert JobContext.from_inputs([], "   ") is None
        assert JobContext.from_inputs(["Python"]).keywords == ("Python",)

    def test_required_keywords_deduplicated(self):
        """Test explicit and extracted keywords merge without duplicates."""
        job = JobContext.from_inputs(
            ["Python", "python ", "Docker", ""], "Experience with Docker and Terraform."
        )
        assert job.required_keywords() == ["Python", "Docker", "terraform"]


@pytest.mark.unit
class TestAtsScorer:
    """Tests for AtsScorer dimensions."""

    def test_no_job_keywords_scores_neutral(self, sample_resume):
        """Test the keyword dimension is neutral without job keywords."""
        report = score_ats(sample_resume)

        assert report.breakdown["keywords"] == 80
        assert report.breakdown["structure"] == 95
        assert report.keywords == ()
        assert report.passes_ats is True

    def test_breakdown_is_read_only(self, sample_resume):
        """Test report breakdowns cannot be modified."""
        report = score_ats(sample_resume)
        with pytest.raises(TypeError):
            report.breakdown["keywords"] = 100

    def test_box_drawing_characters(self):
        """Test table characters are an error in the formatting dimension."""
        result = AtsScorer().score_formatting("│ Skills │\n- Python")

        assert result.score == 80
        assert result.issues[0].level == "error"

    def test_missing_email(self):
        """Test a header without an email costs structure points."""
        text = "Jane Doe\n555-123-4567"
        result = AtsScorer().score_structure(text, segment_document(text).sections)
        messages = [issue.message for issue in result.issues]

        assert "Email address not found" in messages
        assert "Phone number not found" not in messages

    def test_keyword_share(self):
        """Test the keyword dimension is the share of job keywords present."""
        result, hits = AtsScorer().score_keywords("Python and SQL", ["python", "docker"])

        assert result.score == 50
        assert [hit.found for hit in hits] == [True, False]
        assert "docker" in result.issues[0].message

    def test_keyword_share_rounds_half_up(self):
        """Test a keyword share landing on .5 rounds up."""
        job_keywords = ["python"] + [f"tool{i}" for i in range(7)]
        result, _ = AtsScorer().score_keywords("Python", job_keywords)
        assert result.score == 13

    def test_keyword_stuffing(self):
        """Test a keyword used more than five times costs 10 points."""
        scorer = AtsScorer()
        stuffed, _ = scorer.score_keywords("python " * 6, ["python"])
        limit, _ = scorer.score_keywords("python " * 5, ["python"])

        assert stuffed.score == 90
        assert limit.score == 100

    def test_external_readability_score(self, sample_resume):
        """Test an external readability score replaces the heuristic one."""
        report = score_ats(sample_resume, readability_score=42.4)
        assert report.breakdown["readability"] == 42

    def test_compare_documents(self, sample_resume):
        """Test comparison reports the overall gain and improved dimensions."""
        comparison = compare_documents("Experience\nWorked on some projects", sample_resume)

        assert comparison.improvement == (
            comparison.optimized.overall_score - comparison.original.overall_score
        )
        assert comparison.improvement > 0
        assert any(area.startswith("structure") for area in comparison.improvement_areas)
