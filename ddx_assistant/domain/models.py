from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator
from pydantic.alias_generators import to_camel


class Mode(str, Enum):
    DOCTOR = "doctor"
    PATIENT = "patient"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class PatientInfo(BaseModel):
    age: Optional[PositiveInt] = None
    gender: Optional[Gender] = None

    @field_validator("gender", mode="before")
    @classmethod
    def normalize_gender(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            if not v:
                return None
        return v


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class DiagnosisCandidate(_CamelModel):
    name: str
    description: str = ""
    confidence: int = Field(..., ge=0, le=100)
    category: str = ""
    red_flags: List[str] = []
    recommended_tests: List[str] = []


class AnalysisResult(_CamelModel):
    """A ranked differential; the first diagnosis is the most likely."""

    diagnoses: List[DiagnosisCandidate] = []
    follow_up_questions: List[str] = []
    red_flags: List[str] = []
    recommended_tests: List[str] = []
    overall_confidence: int = Field(0, ge=0, le=100)

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


ConnectionStatus = Literal["connected", "responding", "disconnected"]


class ApiHealth(BaseModel):
    reasoner: ConnectionStatus
    chat: ConnectionStatus
