import asyncio
import json
import logging

import streamlit as st

from ddx_assistant.application.conversation import ConsultationSession
from ddx_assistant.application.use_cases import SymptomAnalysisUseCase
from ddx_assistant.domain.models import AnalysisResult, Gender, Mode, PatientInfo
from ddx_assistant.infrastructure.config import Settings
from ddx_assistant.infrastructure.llm.mistral_client import MistralModelGateway


logger = logging.getLogger(__name__)


DISCLAIMER = (
    "⚕️ **DISCLAIMER:** This tool does NOT provide medical advice or a diagnosis. "
    "Results are for decision support and education only. "
    "If you experience emergency symptoms, seek immediate care (call local emergency number)."
)

DEMO_NOTICE = (
    "⚠️ The AI models could not be reached. Showing a keyword-based demo analysis instead."
)

# Presentation threshold only; the analysis itself does not use it.
ATTENTION_THRESHOLD = 30

HEALTH_ICONS = {"connected": "🟢", "responding": "🟡", "disconnected": "🔴"}


def confidence_badge(confidence: int) -> str:
    if confidence >= 80:
        return "High"
    if confidence >= 60:
        return "Medium"
    return "Low"


def format_analysis_markdown(result: AnalysisResult, mode: Mode) -> str:
    """Render an analysis as markdown for the consultation panel."""
    heading = "Differential Diagnosis" if mode == Mode.DOCTOR else "Possible Conditions (NOT a diagnosis)"
    lines = [f"## 🏥 {heading}\n"]
    lines.append(f"**Overall confidence:** {result.overall_confidence}% ({confidence_badge(result.overall_confidence)})\n")

    if not result.diagnoses:
        lines.append("_No diagnoses returned._\n")
    for rank, diagnosis in enumerate(result.diagnoses, 1):
        title = f"### {rank}. {diagnosis.name}"
        if diagnosis.confidence < ATTENTION_THRESHOLD:
            title += " (Requires Immediate Attention)"
        lines.append(title)
        lines.append(
            f"**{diagnosis.confidence}% Confidence** · {confidence_badge(diagnosis.confidence)}"
            + (f" · {diagnosis.category}" if diagnosis.category else "")
        )
        if diagnosis.description:
            lines.append(diagnosis.description)
        if diagnosis.red_flags:
            lines.append(f"- Red Flags: {', '.join(diagnosis.red_flags)}")
        if diagnosis.recommended_tests:
            lines.append(f"- Tests: {', '.join(diagnosis.recommended_tests)}")
        lines.append("")

    lines.append("## 🚨 Red Flags")
    if result.red_flags:
        for flag in result.red_flags:
            lines.append(f"- {flag}")
    else:
        lines.append("- ✓ No red flags detected")
    lines.append("")

    lines.append("## 🧪 Recommended Tests")
    if result.recommended_tests:
        for test in result.recommended_tests:
            lines.append(f"- {test}")
    else:
        lines.append("- None suggested")

    return "\n".join(lines)


def format_health(models: dict) -> str:
    return "\n".join(
        f"{HEALTH_ICONS.get(status, '⚪')} **{slot.title()}:** {status}" for slot, status in models.items()
    )


@st.cache_resource
def _build_use_case() -> SymptomAnalysisUseCase:
    return SymptomAnalysisUseCase(gateway=MistralModelGateway(settings=Settings()))


def _init_session_state(use_case: SymptomAnalysisUseCase):
    if "consultation" not in st.session_state:
        st.session_state.consultation = ConsultationSession(use_case)
    if "education" not in st.session_state:
        st.session_state.education = {}


def _patient_info_from_sidebar() -> PatientInfo | None:
    age = st.sidebar.number_input("Age", min_value=0, max_value=120, value=0, step=1)
    gender = st.sidebar.selectbox("Gender", ["", *[g.value for g in Gender]])
    if not age and not gender:
        return None
    return PatientInfo(age=int(age) or None, gender=gender or None)


def _render_sidebar(settings: Settings, use_case: SymptomAnalysisUseCase):
    session: ConsultationSession = st.session_state.consultation

    st.sidebar.title("⚙️ Settings")
    mode_value = st.sidebar.radio(
        "Mode",
        [m.value for m in Mode],
        index=[m.value for m in Mode].index(session.mode.value),
        format_func=str.title,
        horizontal=True,
    )
    session.mode = Mode(mode_value)

    st.sidebar.markdown("### Patient")
    session.patient_info = _patient_info_from_sidebar()

    st.sidebar.markdown("### Models")
    st.sidebar.caption(f"**Reasoning:** {settings.reasoner_model}")
    st.sidebar.caption(f"**Chat:** {settings.chat_model}")
    if not (settings.reasoner_api_key and settings.chat_api_key):
        st.sidebar.warning("⚠️ Mistral API key missing; demo analysis will be used")
    if st.sidebar.button("Check connectivity", use_container_width=True):
        health = asyncio.run(use_case.check_api_health())
        st.sidebar.markdown(format_health(health.model_dump()))

    st.sidebar.divider()

    if session.outcome is not None:
        st.sidebar.download_button(
            "⬇️ Export consultation",
            data=json.dumps(session.export(), indent=2),
            file_name=f"consultation-{session.session_id}.json",
            mime="application/json",
            use_container_width=True,
        )

    if st.sidebar.button("🔄 New Consultation", use_container_width=True):
        session.start_new(mode=session.mode)
        st.session_state.education = {}
        st.rerun()


def _render_follow_up_form(session: ConsultationSession):
    questions = session.outcome.result.follow_up_questions
    if not questions:
        return
    st.markdown("## ❓ Follow-up Questions")
    with st.form("follow_up_form"):
        answers = {q: st.text_input(q, key=f"answer_{i}") for i, q in enumerate(questions)}
        submit = st.form_submit_button("Refine analysis")
    if submit:
        if not any(a.strip() for a in answers.values()):
            st.warning("Answer at least one question to refine the analysis.")
            return
        with st.spinner("🔬 Refining analysis..."):
            session.submit_answers_sync(answers)
        st.rerun()


def _render_education(use_case: SymptomAnalysisUseCase, session: ConsultationSession):
    st.markdown("## 📚 Learn More")
    for diagnosis in session.outcome.result.diagnoses:
        with st.expander(diagnosis.name):
            cached = st.session_state.education.get(diagnosis.name)
            if cached is None and st.button("Explain in simple terms", key=f"edu_{diagnosis.name}"):
                with st.spinner("⏳ Preparing information..."):
                    cached = asyncio.run(use_case.generate_patient_education(diagnosis.name))
                st.session_state.education[diagnosis.name] = cached
            if cached:
                st.markdown(cached)


def main():
    settings = Settings()
    logging.basicConfig(level=settings.log_level)

    st.set_page_config(
        page_title="Differential Diagnosis Assistant",
        page_icon="⚕️",
        layout="centered",
        initial_sidebar_state="expanded",
    )

    use_case = _build_use_case()
    _init_session_state(use_case)
    _render_sidebar(settings, use_case)
    session: ConsultationSession = st.session_state.consultation

    st.markdown("# 🏥 Differential Diagnosis Assistant")
    st.info(DISCLAIMER)

    placeholder = (
        "Describe the presenting complaint, onset, duration and associated findings..."
        if session.mode == Mode.DOCTOR
        else "Describe how you feel, when it started and anything that makes it better or worse..."
    )
    with st.form("symptom_form"):
        symptoms = st.text_area("Symptoms", placeholder=placeholder, height=150)
        analyze = st.form_submit_button("Analyze symptoms", use_container_width=True)

    if analyze:
        if not symptoms.strip():
            st.error("❌ Please describe the symptoms first")
        else:
            with st.spinner("🔬 Analyzing symptoms..."):
                session.submit_symptoms_sync(symptoms.strip())
            st.session_state.education = {}

    if session.outcome is None:
        return

    if session.is_demo:
        st.warning(DEMO_NOTICE)
    st.markdown(format_analysis_markdown(session.outcome.result, session.mode))
    _render_follow_up_form(session)
    _render_education(use_case, session)


if __name__ == "__main__":
    main()
