import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from ddx_assistant.application.use_cases import AnalysisOutcome, AnalysisSource, SymptomAnalysisUseCase
from ddx_assistant.domain.models import Mode, PatientInfo


logger = logging.getLogger(__name__)


class ConversationEntry(BaseModel):
    type: Literal["user", "ai"]
    message: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ConsultationSession:
    """Keeps one consultation in memory: the exchange, the latest analysis and its follow-up round."""

    def __init__(self, use_case: SymptomAnalysisUseCase, mode: Mode = Mode.DOCTOR,
                 patient_info: Optional[PatientInfo] = None):
        self.use_case = use_case
        self.session_id = str(uuid.uuid4())
        self.mode = Mode(mode)
        self.patient_info = patient_info
        self.symptoms: Optional[str] = None
        self.outcome: Optional[AnalysisOutcome] = None
        self.conversation: List[ConversationEntry] = []
        self.created_at = datetime.now(timezone.utc)

    def start_new(self, mode: Optional[Mode] = None, patient_info: Optional[PatientInfo] = None):
        self.session_id = str(uuid.uuid4())
        self.mode = Mode(mode) if mode else self.mode
        self.patient_info = patient_info
        self.symptoms = None
        self.outcome = None
        self.conversation = []
        self.created_at = datetime.now(timezone.utc)

    @property
    def is_demo(self) -> bool:
        return self.outcome is not None and self.outcome.source == AnalysisSource.DEMO

    def _record(self, kind: str, message: str) -> None:
        self.conversation.append(ConversationEntry(type=kind, message=message))

    async def submit_symptoms(self, symptoms: str) -> AnalysisOutcome:
        self.symptoms = symptoms
        self._record("user", symptoms)
        self.outcome = await self.use_case.analyze_detailed(symptoms, self.mode, self.patient_info)
        self._record("ai", "Provided differential diagnoses and recommendations")
        return self.outcome

    async def submit_answers(self, answers: Dict[str, str]) -> AnalysisOutcome:
        """Re-run the analysis with answers to the previous round's follow-up questions."""
        if self.symptoms is None:
            raise ValueError("No symptoms submitted for this session")
        answered = {q: a for q, a in answers.items() if a and a.strip()}
        for question, answer in answered.items():
            self._record("ai", question)
            self._record("user", answer)
        self.outcome = await self.use_case.analyze_detailed(
            self.symptoms, self.mode, self.patient_info, follow_up_answers=answered
        )
        self._record("ai", "Updated differential diagnoses using follow-up answers")
        return self.outcome

    def submit_symptoms_sync(self, symptoms: str) -> AnalysisOutcome:
        return asyncio.run(self.submit_symptoms(symptoms))

    def submit_answers_sync(self, answers: Dict[str, str]) -> AnalysisOutcome:
        return asyncio.run(self.submit_answers(answers))

    def export(self) -> dict:
        result = self.outcome.result if self.outcome else None
        return {
            "session": {
                "sessionId": self.session_id,
                "mode": self.mode.value,
                "patientInfo": self.patient_info.model_dump(mode="json") if self.patient_info else None,
                "symptoms": self.symptoms,
                "aiAnalysis": result.to_json_dict() if result else None,
                "source": self.outcome.source.value if self.outcome else None,
                "createdAt": self.created_at.isoformat(),
            },
            "diagnoses": [d.model_dump(mode="json", by_alias=True) for d in result.diagnoses] if result else [],
            "conversation": [entry.model_dump(mode="json") for entry in self.conversation],
            "exportedAt": datetime.now(timezone.utc).isoformat(),
        }
