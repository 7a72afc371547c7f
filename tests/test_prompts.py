"""Unit tests for prompt construction."""
from ddx_assistant.application.prompts import (
    build_analysis_prompt,
    build_follow_up_questions_prompt,
    build_patient_education_prompt,
)
from ddx_assistant.domain.models import AnalysisResult, DiagnosisCandidate, Gender, Mode, PatientInfo


class TestAnalysisPrompt:
    """Test the diagnosis prompt."""

    def test_doctor_framing_and_codes(self):
        prompt = build_analysis_prompt("fever and rash", Mode.DOCTOR)
        assert "clinical decision support" in prompt
        assert "ICD-10" in prompt
        assert "Patient symptoms: fever and rash" in prompt

    def test_patient_framing_plain_language(self):
        prompt = build_analysis_prompt("fever and rash", Mode.PATIENT)
        assert "patient education" in prompt
        assert "simple, non-technical language" in prompt
        assert "patient-friendly language" in prompt
        assert "ICD-10" not in prompt

    def test_schema_instruction_present(self):
        prompt = build_analysis_prompt("cough", Mode.DOCTOR)
        assert "MUST be a valid JSON object" in prompt
        for key in ("diagnoses", "overallConfidence", "redFlags", "recommendedTests", "category"):
            assert key in prompt

    def test_patient_info_line(self):
        info = PatientInfo(age=42, gender=Gender.FEMALE)
        prompt = build_analysis_prompt("cough", Mode.DOCTOR, info)
        assert "Patient information: Age 42, Gender: female" in prompt

    def test_no_patient_info_line_when_absent(self):
        assert "Patient information" not in build_analysis_prompt("cough", Mode.DOCTOR)

    def test_partial_patient_info(self):
        prompt = build_analysis_prompt("cough", Mode.PATIENT, PatientInfo(age=7))
        assert "Age 7, Gender: unknown" in prompt

    def test_follow_up_answers_appended(self):
        prompt = build_analysis_prompt(
            "headache", Mode.DOCTOR, follow_up_answers={"How long?": "3 days", "Any nausea?": "  "}
        )
        assert "Follow-up answers:" in prompt
        assert "Q: How long?\nA: 3 days" in prompt
        assert "Any nausea?" not in prompt

    def test_empty_symptoms_still_renders(self):
        prompt = build_analysis_prompt("", Mode.PATIENT)
        assert prompt

    def test_idempotent(self):
        info = PatientInfo(age=30, gender="male")
        first = build_analysis_prompt("chest pain", Mode.DOCTOR, info)
        second = build_analysis_prompt("chest pain", Mode.DOCTOR, info)
        assert first == second

    def test_accepts_plain_string_mode(self):
        assert build_analysis_prompt("x", "doctor") == build_analysis_prompt("x", Mode.DOCTOR)


class TestFollowUpPrompt:
    """Test the follow-up question prompt."""

    def test_requests_json_array(self):
        prompt = build_follow_up_questions_prompt("dizziness", Mode.DOCTOR)
        assert "3-6" in prompt
        assert "JSON array" in prompt
        assert '"dizziness"' in prompt

    def test_mode_specific_guidance(self):
        doctor = build_follow_up_questions_prompt("dizziness", Mode.DOCTOR)
        patient = build_follow_up_questions_prompt("dizziness", Mode.PATIENT)
        assert "medications" in doctor.lower()
        assert "plain, everyday language" in patient
        assert doctor != patient

    def test_lists_preliminary_differential(self):
        analysis = AnalysisResult(
            diagnoses=[
                DiagnosisCandidate(name="Migraine", confidence=60),
                DiagnosisCandidate(name="Tension Headache", confidence=30),
            ]
        )
        prompt = build_follow_up_questions_prompt("headache", Mode.DOCTOR, analysis=analysis)
        assert "Preliminary differential: Migraine, Tension Headache" in prompt

    def test_idempotent(self):
        assert build_follow_up_questions_prompt("a", Mode.PATIENT) == build_follow_up_questions_prompt("a", Mode.PATIENT)


def test_education_prompt_names_diagnosis():
    prompt = build_patient_education_prompt("Migraine")
    assert '"Migraine"' in prompt
    assert "When to seek medical care" in prompt
