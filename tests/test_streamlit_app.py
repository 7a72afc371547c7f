"""Tests for the Streamlit presentation helpers."""
from ddx_assistant.domain.models import AnalysisResult, DiagnosisCandidate, Mode
from ddx_assistant.presentation.streamlit_app import (
    confidence_badge,
    format_analysis_markdown,
    format_health,
)


def _result():
    return AnalysisResult(
        diagnoses=[
            DiagnosisCandidate(name="Migraine", description="Recurrent headache", confidence=82,
                               category="Neurological", red_flags=["Vision loss"], recommended_tests=["MRI"]),
            DiagnosisCandidate(name="Subarachnoid Hemorrhage", confidence=12, category="Neurological"),
        ],
        red_flags=["Thunderclap onset"],
        recommended_tests=["CT head"],
        overall_confidence=64,
    )


class TestFormatting:
    """Test analysis rendering."""

    def test_confidence_badge(self):
        assert confidence_badge(80) == "High"
        assert confidence_badge(60) == "Medium"
        assert confidence_badge(59) == "Low"

    def test_ranked_diagnoses_and_sections(self):
        text = format_analysis_markdown(_result(), Mode.DOCTOR)
        assert "Differential Diagnosis" in text
        assert "### 1. Migraine" in text
        assert "**82% Confidence** · High · Neurological" in text
        assert "- Red Flags: Vision loss" in text
        assert "- Thunderclap onset" in text
        assert "- CT head" in text
        assert "Overall confidence:** 64% (Medium)" in text

    def test_low_confidence_marked_for_attention(self):
        text = format_analysis_markdown(_result(), Mode.PATIENT)
        assert "### 2. Subarachnoid Hemorrhage (Requires Immediate Attention)" in text
        assert "Migraine (Requires Immediate Attention)" not in text
        assert "NOT a diagnosis" in text

    def test_empty_result(self):
        text = format_analysis_markdown(AnalysisResult(), Mode.DOCTOR)
        assert "No diagnoses returned" in text
        assert "No red flags detected" in text


def test_format_health():
    text = format_health({"reasoner": "connected", "chat": "disconnected"})
    assert "🟢 **Reasoner:** connected" in text
    assert "🔴 **Chat:** disconnected" in text
