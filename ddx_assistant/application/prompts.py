from typing import Mapping, Optional

from ddx_assistant.domain.models import AnalysisResult, Mode, PatientInfo


DOCTOR_CONTEXT = "You are assisting a healthcare professional with clinical decision support."
PATIENT_CONTEXT = (
    "You are providing patient education and guidance. Use simple, non-technical language."
)

HEALTH_CHECK_PROMPT = "Hello, respond with 'OK' if you can process this message."

ANALYSIS_SCHEMA = """{
  "diagnoses": [
    {
      "name": "Diagnosis name",
      "description": "Clear description",
      "confidence": 85,
      "category": "Category name",
      "redFlags": ["flag1", "flag2"],
      "recommendedTests": ["test1", "test2"]
    }
  ],
  "overallConfidence": 85,
  "redFlags": ["general red flags"],
  "recommendedTests": ["general tests"]
}"""


def _is_doctor(mode) -> bool:
    return mode == Mode.DOCTOR


def _value(v) -> str:
    if v is None:
        return "unknown"
    return getattr(v, "value", v)


def build_patient_line(patient_info: Optional[PatientInfo]) -> str:
    if patient_info is None:
        return ""
    return f"Patient information: Age {_value(patient_info.age)}, Gender: {_value(patient_info.gender)}"


def build_schema_instructions() -> str:
    return (
        "Provide a differential diagnosis analysis. Your response MUST be a valid JSON object "
        "with this exact structure:\n" + ANALYSIS_SCHEMA
    )


def build_analysis_prompt(
    symptoms: str,
    mode: Mode,
    patient_info: Optional[PatientInfo] = None,
    follow_up_answers: Optional[Mapping[str, str]] = None,
) -> str:
    lines = [
        DOCTOR_CONTEXT if _is_doctor(mode) else PATIENT_CONTEXT,
        "",
        f"Patient symptoms: {symptoms}",
    ]
    patient_line = build_patient_line(patient_info)
    if patient_line:
        lines.append(patient_line)

    answered = [(q, a.strip()) for q, a in (follow_up_answers or {}).items() if a and a.strip()]
    if answered:
        lines.append("")
        lines.append("Follow-up answers:")
        for question, answer in answered:
            lines.append(f"Q: {question}")
            lines.append(f"A: {answer}")

    lines += [
        "",
        build_schema_instructions(),
        "",
        "Focus on:",
        "1. Most likely diagnoses with confidence scores",
        "2. Red flag symptoms requiring immediate attention",
        "3. Appropriate diagnostic tests",
        "4. Clear, actionable recommendations",
    ]
    if _is_doctor(mode):
        lines.append("5. Include ICD-10 codes and medical references where appropriate")
    else:
        lines.append("5. Use patient-friendly language")
    return "\n".join(lines)


def build_follow_up_questions_prompt(
    symptoms: str,
    mode: Mode,
    patient_info: Optional[PatientInfo] = None,
    analysis: Optional[AnalysisResult] = None,
) -> str:
    lines = [f'Based on these symptoms: "{symptoms}"']
    patient_line = build_patient_line(patient_info)
    if patient_line:
        lines.append(patient_line)
    if analysis is not None and analysis.diagnoses:
        names = ", ".join(d.name for d in analysis.diagnoses)
        lines.append(f"Preliminary differential: {names}")

    lines += [
        "",
        "Generate 3-6 specific follow-up questions that would help refine the diagnosis.",
        "",
        "Return only a JSON array of questions:",
        '["Question 1?", "Question 2?", "Question 3?"]',
        "",
        "Focus on:",
    ]
    if _is_doctor(mode):
        lines += [
            "- Onset, timing and duration",
            "- Associated symptoms and pertinent negatives",
            "- Past medical history",
            "- Current medications and allergies",
            "- Use precise clinical wording",
        ]
    else:
        lines += [
            "- What the symptoms feel like",
            "- When they started and how long they last",
            "- Anything that makes them better or worse",
            "- Medicines being taken",
            "- Use plain, everyday language a patient can answer",
        ]
    return "\n".join(lines)


def build_patient_education_prompt(diagnosis: str) -> str:
    return (
        f'Provide patient-friendly educational content about "{diagnosis}". Include:\n'
        "1. What it is in simple terms\n"
        "2. Common causes\n"
        "3. When to seek medical care\n"
        "4. General management tips\n\n"
        "Keep the language simple and reassuring. Avoid medical jargon."
    )
