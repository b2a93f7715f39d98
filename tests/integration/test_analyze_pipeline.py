"""
Integration test for the full analysis pipeline.
Tests: plain-text résumé -> segmentation -> analyzers -> aggregated breakdown.
"""

from pathlib import Path

import pytest
from omegaconf import OmegaConf

from quill.contexts.matching import JobContext
from quill.contexts.scoring import analyze_document
from quill.contexts.segmentation import (
    extract_contact_info,
    extract_experience_years,
    extract_skills,
    segment_document,
)
from quill.utils.exceptions import ValidationError
from quill.utils.issues import severity_rank
from quill.utils.scores import round_half_up

FIXTURES = Path(__file__).parent.parent / "fixtures"
RESUME_PATH = FIXTURES / "sample_resume.txt"
EXPECTED_PATH = FIXTURES / "sample_resume_expected.yaml"


@pytest.fixture(scope="module")
def resume_text():
    return RESUME_PATH.read_text(encoding="utf-8")


@pytest.fixture(scope="module")
def expected():
    return OmegaConf.to_container(OmegaConf.load(EXPECTED_PATH), resolve=True)


@pytest.mark.integration
def test_segmentation_matches_fixture(resume_text, expected):
    """Test sections, contact details, experience and skills of the sample résumé."""
    document = segment_document(resume_text, "resume")
    sections = document.sections

    assert sections.present() == expected["sections"]
    assert len(sections["experience"]) == expected["experience_items"]

    contact = extract_contact_info(resume_text, sections)
    for field_name, value in expected["contact"].items():
        assert getattr(contact, field_name) == value, f"contact.{field_name}"

    years = extract_experience_years(
        resume_text, sections, current_year=expected["experience_years"]["current_year"]
    )
    assert years == expected["experience_years"]["years"]

    skills = extract_skills(resume_text, sections)
    assert skills[: len(expected["skills"])] == expected["skills"]


@pytest.mark.integration
def test_breakdown_scores_in_range(resume_text):
    """Test every score is within 0-100 and combined follows the weights."""
    breakdown = analyze_document(resume_text, "resume")

    for score in (
        breakdown.ats_score,
        breakdown.readability_score,
        breakdown.grammar_score,
        breakdown.combined_score,
    ):
        assert 0 <= score <= 100

    expected_combined = round_half_up(
        0.4 * breakdown.ats_score
        + 0.3 * breakdown.readability_score
        + 0.3 * breakdown.grammar_score
    )
    assert breakdown.combined_score == expected_combined
    assert breakdown.passes_quality == (breakdown.combined_score >= breakdown.threshold)
    assert breakdown.match_score is None


@pytest.mark.integration
def test_analysis_is_deterministic(resume_text):
    """Test the same input always produces the same breakdown."""
    first = analyze_document(resume_text, "resume", {"keywords": ["Python"]})
    second = analyze_document(resume_text, "resume", {"keywords": ["Python"]})
    assert first.to_dict() == second.to_dict()


@pytest.mark.integration
def test_issue_spans_and_ranking(resume_text):
    """Test grammar spans index the input and top issues are severity-ordered."""
    breakdown = analyze_document(resume_text, "resume")

    for issue in breakdown.grammar.issues:
        assert issue.span.is_valid_for(resume_text)
        assert resume_text[issue.span.start : issue.span.end] == issue.text

    ranks = [severity_rank(issue.severity) for issue in breakdown.top_issues]
    assert ranks == sorted(ranks, reverse=True)
    assert len(breakdown.top_issues) <= 10
    assert breakdown.issue_counts["total"] >= len(breakdown.top_issues)


@pytest.mark.integration
def test_job_context_match(resume_text):
    """Test job keywords are matched and missing ones drive a recommendation."""
    job = {"keywords": ["Python", "Kubernetes", "Terraform"]}
    breakdown = analyze_document(resume_text, "resume", job)

    assert breakdown.match_score == 67
    assert breakdown.match.missing == ("Terraform",)
    assert "Add missing job keywords where relevant: Terraform" in breakdown.recommendations
    assert [hit.keyword for hit in breakdown.ats.keywords] == ["Python", "Kubernetes", "Terraform"]


@pytest.mark.integration
def test_job_context_object_and_description(resume_text):
    """Test a JobContext built from a description is accepted directly."""
    job = JobContext.from_inputs(description="Must know Docker and Redis.")
    breakdown = analyze_document(resume_text, "resume", job)

    assert breakdown.match_score == 100
    assert breakdown.match.matched == ("docker", "redis")


@pytest.mark.integration
def test_external_readability_score(resume_text):
    """Test an external readability score replaces the built-in checker."""
    breakdown = analyze_document(resume_text, "resume", readability_score=90)

    assert breakdown.readability_score == 90
    assert breakdown.readability is None
    assert breakdown.ats.breakdown["readability"] == 90


@pytest.mark.integration
def test_ats_readability_follows_readability_report(resume_text):
    """Test the ATS readability dimension is the readability report's score."""
    breakdown = analyze_document(resume_text, "resume")

    assert breakdown.ats.breakdown["readability"] == breakdown.readability.overall_score


@pytest.mark.integration
@pytest.mark.parametrize("text", ["", "  \n\t ", None])
def test_empty_document_is_neutral(text):
    """Test empty input yields the neutral breakdown instead of an error."""
    breakdown = analyze_document(text)

    assert breakdown.combined_score == 50
    assert breakdown.passes_quality is False
    assert breakdown.match_score is None
    assert breakdown.top_issues == ()

    with_job = analyze_document(text, "resume", {"keywords": ["python"]})
    assert with_job.match_score == 50


@pytest.mark.integration
def test_invalid_inputs_rejected():
    """Test non-string text and malformed job context raise ValidationError."""
    with pytest.raises(ValidationError):
        analyze_document(123)
    with pytest.raises(ValidationError):
        analyze_document("Some text.", "resume", "python")


@pytest.mark.integration
def test_duplicated_sentence_document():
    """Test the grammar dimension for a short text with a repeated misspelled sentence."""
    text = "I worked on a team that recieve awards. I worked on a team that recieve awards."
    breakdown = analyze_document(text, "resume")

    assert breakdown.grammar_score == 65
    assert breakdown.grammar.is_valid is False
    assert breakdown.issue_counts["critical"] >= 3
    assert breakdown.top_issues[0].severity in ("critical", "error")
