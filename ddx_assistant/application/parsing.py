"""
Turns free-text model replies into typed results.

Both entry points are total: any string (or None) yields a well-formed value.
"""
import json
import logging
import math
import re
from typing import List, Literal, Union

from pydantic import BaseModel, ValidationError

from ddx_assistant.domain.models import AnalysisResult, DiagnosisCandidate


logger = logging.getLogger(__name__)


_JSON_OBJ_RE = re.compile(r"\{.*\}", re.S)
_JSON_ARRAY_RE = re.compile(r"\[.*\]", re.S)
_ENUMERATION_RE = re.compile(r"^(?:\d+\s*[.):-]?|[-*•])\s*")
_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")

MAX_HEURISTIC_QUESTIONS = 5

GENERIC_FOLLOW_UP_QUESTIONS = [
    "Can you describe the onset and duration of your symptoms?",
    "Have you experienced any associated symptoms?",
    "Are there any specific triggers or patterns you've noticed?",
]

GENERIC_CONFIDENCE = 75


class ParsedStructured(BaseModel):
    kind: Literal["structured"] = "structured"
    result: AnalysisResult


class ParsedGeneric(BaseModel):
    """The reply arrived but no usable JSON structure could be recovered."""

    kind: Literal["generic"] = "generic"
    result: AnalysisResult


ParsedAnalysis = Union[ParsedStructured, ParsedGeneric]


def coerce_confidence(value) -> int:
    """Numbers or numeric strings ("85", "85%") clamped to [0, 100]; otherwise 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, str):
        m = _NUMBER_RE.search(value)
        if not m:
            return 0
        value = float(m.group(0))
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return 0
    return max(0, min(100, int(round(value))))


def coerce_string_list(value) -> List[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    out = []
    for item in value:
        if item is None or isinstance(item, (dict, list)):
            continue
        text = str(item).strip()
        if text:
            out.append(text)
    return out


def _text(value, default: str = "") -> str:
    if value is None or isinstance(value, (dict, list)):
        return default
    return str(value).strip() or default


def _candidate_from_dict(item: dict) -> DiagnosisCandidate:
    return DiagnosisCandidate(
        name=_text(item.get("name"), "Unspecified diagnosis"),
        description=_text(item.get("description")),
        confidence=coerce_confidence(item.get("confidence")),
        category=_text(item.get("category"), "General"),
        red_flags=coerce_string_list(item.get("redFlags")),
        recommended_tests=coerce_string_list(item.get("recommendedTests")),
    )


def result_from_payload(data: dict) -> AnalysisResult:
    diagnoses = data.get("diagnoses")
    if not isinstance(diagnoses, list):
        diagnoses = []
    return AnalysisResult(
        diagnoses=[_candidate_from_dict(d) for d in diagnoses if isinstance(d, dict)],
        follow_up_questions=[],
        red_flags=coerce_string_list(data.get("redFlags")),
        recommended_tests=coerce_string_list(data.get("recommendedTests")),
        overall_confidence=coerce_confidence(data.get("overallConfidence")),
    )


def generic_result() -> AnalysisResult:
    return AnalysisResult(
        diagnoses=[
            DiagnosisCandidate(
                name="Analysis Available",
                description="AI analysis completed. Please review the detailed response.",
                confidence=GENERIC_CONFIDENCE,
                category="General",
            )
        ],
        overall_confidence=GENERIC_CONFIDENCE,
    )


def parse_analysis_response(text: str) -> ParsedAnalysis:
    m = _JSON_OBJ_RE.search(text or "")
    if m:
        try:
            data = json.loads(m.group(0))
            if isinstance(data, dict):
                return ParsedStructured(result=result_from_payload(data))
        except (ValueError, TypeError, RecursionError, ValidationError) as e:
            logger.warning("Failed to parse analysis JSON: %s", e)
    logger.debug("No structured analysis recovered from a %d-character reply", len(text or ""))
    return ParsedGeneric(result=generic_result())


def extract_questions_from_text(text: str) -> List[str]:
    questions = []
    for line in (text or "").split("\n"):
        if "?" not in line:
            continue
        question = _ENUMERATION_RE.sub("", line.strip()).strip()
        if question:
            questions.append(question)
        if len(questions) >= MAX_HEURISTIC_QUESTIONS:
            break
    return questions


def _string_array(value) -> List[str]:
    """The decoded array, only when every item is a string; otherwise empty."""
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        return []
    return [item.strip() for item in value if item.strip()]


def parse_follow_up_questions(text: str) -> List[str]:
    m = _JSON_ARRAY_RE.search(text or "")
    if m:
        try:
            questions = _string_array(json.loads(m.group(0)))
            if questions:
                return questions
        except (ValueError, RecursionError) as e:
            logger.warning("Failed to parse follow-up questions JSON: %s", e)

    questions = extract_questions_from_text(text)
    if questions:
        return questions
    return list(GENERIC_FOLLOW_UP_QUESTIONS)
