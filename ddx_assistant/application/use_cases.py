import logging
from enum import Enum
from typing import List, Mapping, NamedTuple, Optional

from ddx_assistant.application.parsing import (
    ParsedGeneric,
    parse_analysis_response,
    parse_follow_up_questions,
)
from ddx_assistant.application.ports import ModelGatewayPort, ModelUnavailable
from ddx_assistant.application.prompts import (
    HEALTH_CHECK_PROMPT,
    build_analysis_prompt,
    build_follow_up_questions_prompt,
    build_patient_education_prompt,
)
from ddx_assistant.domain.models import AnalysisResult, ApiHealth, Mode, PatientInfo
from ddx_assistant.domain.rules import demo_follow_up_questions, generate_demo_analysis


logger = logging.getLogger(__name__)


EDUCATION_UNAVAILABLE = (
    "Educational content is temporarily unavailable. "
    "Please consult with your healthcare provider for more information."
)


class AnalysisSource(str, Enum):
    MODEL = "model"
    MODEL_GENERIC = "model_generic"
    DEMO = "demo"


class AnalysisOutcome(NamedTuple):
    result: AnalysisResult
    source: AnalysisSource


class SymptomAnalysisUseCase:
    """
    Prompt -> reasoning model -> parse, with the demo engine as the fallback.

    Holds no per-request state; one instance can serve concurrent requests.
    """

    def __init__(self, gateway: ModelGatewayPort):
        self.gateway = gateway

    async def analyze(
        self,
        symptoms: str,
        mode: Mode,
        patient_info: Optional[PatientInfo] = None,
        follow_up_answers: Optional[Mapping[str, str]] = None,
    ) -> AnalysisResult:
        outcome = await self.analyze_detailed(symptoms, mode, patient_info, follow_up_answers)
        return outcome.result

    async def analyze_detailed(
        self,
        symptoms: str,
        mode: Mode,
        patient_info: Optional[PatientInfo] = None,
        follow_up_answers: Optional[Mapping[str, str]] = None,
    ) -> AnalysisOutcome:
        prompt = build_analysis_prompt(symptoms, mode, patient_info, follow_up_answers)
        try:
            raw = await self.gateway.complete(prompt, use_reasoning_model=True)
        except ModelUnavailable as e:
            logger.warning("Falling back to demo analysis: %s", e)
            return AnalysisOutcome(generate_demo_analysis(symptoms, mode, patient_info), AnalysisSource.DEMO)

        parsed = parse_analysis_response(raw)
        if isinstance(parsed, ParsedGeneric):
            logger.info("Model reply had no recoverable structure; using generic result")
            source = AnalysisSource.MODEL_GENERIC
        else:
            source = AnalysisSource.MODEL

        preliminary = parsed.result if source == AnalysisSource.MODEL else None
        questions = await self._follow_up_or_demo(symptoms, mode, patient_info, preliminary)
        return AnalysisOutcome(parsed.result.model_copy(update={"follow_up_questions": questions}), source)

    async def generate_follow_up_questions(
        self,
        symptoms: str,
        mode: Mode,
        patient_info: Optional[PatientInfo] = None,
        analysis: Optional[AnalysisResult] = None,
    ) -> List[str]:
        return await self._follow_up_or_demo(symptoms, mode, patient_info, analysis)

    async def _follow_up_or_demo(self, symptoms, mode, patient_info, analysis) -> List[str]:
        prompt = build_follow_up_questions_prompt(symptoms, mode, patient_info, analysis)
        try:
            raw = await self.gateway.complete(prompt, use_reasoning_model=False)
        except ModelUnavailable as e:
            logger.warning("Using demo follow-up questions: %s", e)
            return demo_follow_up_questions(symptoms, mode)
        return parse_follow_up_questions(raw)

    async def generate_patient_education(self, diagnosis: str) -> str:
        try:
            content = await self.gateway.complete(
                build_patient_education_prompt(diagnosis), use_reasoning_model=False
            )
        except ModelUnavailable as e:
            logger.warning("Patient education unavailable: %s", e)
            return EDUCATION_UNAVAILABLE
        return content.strip() or EDUCATION_UNAVAILABLE

    async def _probe(self, use_reasoning_model: bool) -> str:
        try:
            reply = await self.gateway.complete(HEALTH_CHECK_PROMPT, use_reasoning_model=use_reasoning_model)
        except ModelUnavailable as e:
            logger.error("API health check failed: %s", e)
            return "disconnected"
        return "connected" if "ok" in reply.lower() else "responding"

    async def check_api_health(self) -> ApiHealth:
        reasoner = await self._probe(True)
        chat = await self._probe(False)
        return ApiHealth(reasoner=reasoner, chat=chat)
