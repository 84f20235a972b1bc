"""
Tests for file helpers, logos and the AI output validators.
"""

import base64

import pytest

from smarthire.services.agents import job_details_to_fields, parse_deadline, validate_interview_evaluation
from smarthire.services.email_service import validate_email_draft
from smarthire.services.llm_client import AIServiceError
from smarthire.services.screening_service import (
    clamp_score,
    string_list,
    validate_optimized_resume,
    validate_parsed_jd,
    validate_recommendations,
    validate_score_response,
)
from smarthire.utils.file_upload import extract_from_txt, get_file_extension
from smarthire.utils.logo import generate_company_logo, get_initials


class TestLogo:
    """Tests for generated company logos."""

    def test_initials(self):
        assert get_initials("acme corp industries") == "AC"
        assert get_initials("Globex") == "G"
        assert get_initials("   ") == "C"

    def test_deterministic(self):
        assert generate_company_logo("Acme Corp") == generate_company_logo("Acme Corp")
        assert generate_company_logo("Acme Corp") != generate_company_logo("Initech")

    def test_svg_content(self):
        uri = generate_company_logo("Acme Corp")
        svg = base64.b64decode(uri.split(",", 1)[1]).decode("utf-8")
        assert svg.startswith("<svg")
        assert ">AC</text>" in svg


class TestFileHelpers:
    """Tests for upload helpers."""

    def test_extension(self):
        assert get_file_extension("Resume.PDF") == ".pdf"
        assert get_file_extension("archive.tar.gz") == ".gz"
        assert get_file_extension("README") == ""

    def test_txt_decoding(self):
        assert extract_from_txt("héllo".encode("utf-8")) == "héllo"
        assert extract_from_txt("café".encode("latin-1")) == "café"


class TestScreeningValidators:
    """Tests for resume, JD and recommendation validation."""

    def test_clamp_score(self):
        assert clamp_score(150) == 100
        assert clamp_score(-3) == 0
        assert clamp_score("72.6") == 73
        assert clamp_score("n/a") == 0
        assert clamp_score(None, default=50) == 50

    def test_string_list(self):
        assert string_list(["a", " ", None, 3]) == ["a", "3"]
        assert string_list("solo") == ["solo"]
        assert string_list({"not": "a list"}) == []

    def test_score_response(self):
        result = validate_score_response({"score": "88", "strengths": "Python"})
        assert result["score"] == 88
        assert result["strengths"] == ["Python"]
        assert result["weaknesses"] == []
        assert result["summary"] == ""

    def test_parsed_jd(self):
        assert validate_parsed_jd({"requirements": ["Go", "", "gRPC"]}) == {
            "title": "Untitled Job", "description": "", "requirements": "Go, gRPC",
        }

    def test_optimized_resume(self):
        assert validate_optimized_resume({"optimizedResume": " Text "}) == {"optimized_resume": "Text", "changes": []}
        with pytest.raises(AIServiceError):
            validate_optimized_resume({"changes": ["x"]})

    def test_recommendations_capped(self):
        data = {"recommendations": [{"jobId": i, "reason": "r"} for i in range(1, 9)] + ["junk"]}
        result = validate_recommendations(data, range(1, 9))
        assert [r["job_id"] for r in result["recommendations"]] == [1, 2, 3, 4, 5]
        assert result["scores"] == []


class TestAgentValidators:
    """Tests for strategic agent and video evaluation parsing."""

    def test_parse_deadline(self):
        assert parse_deadline("2031-03-15T00:00:00Z").year == 2031
        assert parse_deadline("next tuesday") is None

    def test_job_details_to_fields(self):
        fields = job_details_to_fields({
            "targetJobTitle": "Ignored",
            "title": " Data Analyst ",
            "workModel": "Hybrid",
            "applicationDeadline": "soon",
            "location": "",
        })
        assert fields == {"title": "Data Analyst", "work_model": "Hybrid"}

    def test_interview_evaluation_defaults(self):
        result = validate_interview_evaluation({"interviewScore": "91", "recommendation": "x" * 300})
        assert result["interview_score"] == 91
        assert result["skill_breakdown"] == []
        assert set(result["communication_analysis"]) == {"clarity", "confidence", "articulation", "overall_fit"}
        assert len(result["recommendation"]) == 200


class TestEmailValidator:

    def test_requires_subject_and_body(self):
        assert validate_email_draft({"subject": " Hi ", "body": "Body"}) == {"subject": "Hi", "body": "Body"}
        with pytest.raises(AIServiceError):
            validate_email_draft({"subject": "Hi", "body": "  "})
