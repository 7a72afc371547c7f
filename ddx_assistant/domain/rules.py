from typing import Dict, List, Optional

from .models import AnalysisResult, DiagnosisCandidate, Mode, PatientInfo


# Order matters: ties (and inputs matching nothing) resolve to the earliest pattern.
SYMPTOM_PATTERNS: List[dict] = [
    {
        "keywords": ["fever", "joint pain", "muscle ache"],
        "diagnoses": [
            ("Dengue Fever", 72, "Viral Infection"),
            ("Chikungunya", 20, "Viral Infection"),
            ("Viral Fever", 8, "Viral Infection"),
        ],
        "questions": [
            "How long has the fever lasted?",
            "Any recent travel to tropical areas?",
            "Any skin rashes or bleeding?",
            "Has there been sore throat or cough?",
        ],
        "red_flags": ["Check for bleeding gums", "Monitor platelet count"],
        "tests": ["CBC with platelet count", "Dengue NS1 antigen", "Liver function tests"],
    },
    {
        "keywords": ["headache", "migraine", "head pain"],
        "diagnoses": [
            ("Tension Headache", 65, "Neurological"),
            ("Migraine", 25, "Neurological"),
            ("Cluster Headache", 10, "Neurological"),
        ],
        "questions": [
            "Where exactly is the pain located?",
            "Is the pain throbbing or constant?",
            "Any visual changes or nausea?",
            "What triggers seem to make it worse?",
        ],
        "red_flags": ["Sudden severe headache", "Neck stiffness", "Vision changes"],
        "tests": ["Neurological examination", "Blood pressure check", "CT scan if severe"],
    },
    {
        "keywords": ["chest pain", "breathing", "shortness of breath"],
        "diagnoses": [
            ("Anxiety", 45, "Psychological"),
            ("Acid Reflux", 30, "Gastrointestinal"),
            ("Costochondritis", 25, "Musculoskeletal"),
        ],
        "questions": [
            "Is the pain sharp or burning?",
            "Does it worsen with deep breathing?",
            "Any recent stress or anxiety?",
            "Does it relate to eating or lying down?",
        ],
        "red_flags": [
            "Severe crushing chest pain",
            "Pain radiating to arm/jaw",
            "Severe shortness of breath",
        ],
        "tests": ["ECG", "Chest X-ray", "Stress test if indicated"],
    },
    {
        "keywords": ["nausea", "vomiting", "diarrhea", "stomach pain", "abdominal pain"],
        "diagnoses": [
            ("Viral Gastroenteritis", 60, "Gastrointestinal"),
            ("Food Poisoning", 30, "Gastrointestinal"),
            ("Gastritis", 10, "Gastrointestinal"),
        ],
        "questions": [
            "When did the vomiting or diarrhea start?",
            "Can you keep fluids down?",
            "Has anyone who ate the same food become ill?",
            "Is there blood in the stool or vomit?",
        ],
        "red_flags": ["Signs of dehydration", "Blood in stool or vomit", "Severe localized abdominal pain"],
        "tests": ["Electrolyte panel", "Stool culture", "Abdominal examination"],
    },
    {
        "keywords": ["cough", "sore throat", "runny nose", "congestion", "sneezing"],
        "diagnoses": [
            ("Common Cold", 55, "Respiratory"),
            ("Influenza", 30, "Respiratory"),
            ("Acute Bronchitis", 15, "Respiratory"),
        ],
        "questions": [
            "Is the cough dry or producing phlegm?",
            "Have you had a high temperature or chills?",
            "Has anyone around you been sick recently?",
            "Do you have a history of asthma or lung disease?",
        ],
        "red_flags": ["Difficulty breathing", "Coughing up blood", "High fever lasting more than 3 days"],
        "tests": ["Throat swab", "Rapid influenza test", "Chest X-ray if persistent"],
    },
]

DIAGNOSIS_DESCRIPTIONS: Dict[str, Dict[str, str]] = {
    "Dengue Fever": {
        "doctor": "Mosquito-borne viral infection. Monitor for hemorrhagic complications and plasma leakage.",
        "patient": "A viral infection spread by mosquitoes. Usually gets better with rest and fluids, but needs monitoring.",
    },
    "Chikungunya": {
        "doctor": "Alphavirus infection with characteristic joint involvement. Chronic arthralgia may persist.",
        "patient": "A viral infection that causes fever and joint pain. Joint pain may last several weeks.",
    },
    "Viral Fever": {
        "doctor": "Nonspecific self-limiting viral syndrome. Exclude focal bacterial source if fever persists.",
        "patient": "A common viral illness that causes fever and tiredness. It usually passes within a few days.",
    },
    "Tension Headache": {
        "doctor": "Primary headache disorder. Often stress-related with bilateral distribution.",
        "patient": "Common type of headache often caused by stress, tension, or muscle strain in the head and neck.",
    },
    "Migraine": {
        "doctor": "Neurological disorder with recurrent episodes. Consider prophylaxis if frequent.",
        "patient": "A type of headache that can be very painful and may come with nausea or sensitivity to light.",
    },
    "Cluster Headache": {
        "doctor": "Trigeminal autonomic cephalalgia with unilateral periorbital pain in clusters.",
        "patient": "Very painful headaches around one eye that come in groups over weeks.",
    },
    "Anxiety": {
        "doctor": "Somatic presentation of anxiety. Diagnosis of exclusion after cardiac causes are ruled out.",
        "patient": "Stress and worry can cause chest tightness and fast breathing. A doctor should first rule out heart problems.",
    },
    "Acid Reflux": {
        "doctor": "Gastroesophageal reflux with retrosternal burning. Assess relation to meals and posture.",
        "patient": "Stomach acid moving up into the food pipe, causing a burning feeling in the chest.",
    },
    "Costochondritis": {
        "doctor": "Inflammation of costochondral junctions. Reproducible tenderness on palpation.",
        "patient": "Irritation of the cartilage joining the ribs to the breastbone. It hurts when you press on the chest.",
    },
    "Viral Gastroenteritis": {
        "doctor": "Acute infectious diarrhea, usually self-limiting. Assess hydration status.",
        "patient": "A stomach bug that causes vomiting and diarrhea. Drinking fluids is the most important thing.",
    },
    "Common Cold": {
        "doctor": "Viral upper respiratory tract infection. Symptomatic management.",
        "patient": "A mild viral infection of the nose and throat that usually clears up in a week.",
    },
    "Influenza": {
        "doctor": "Acute febrile respiratory illness. Consider antivirals within 48 hours in high-risk patients.",
        "patient": "The flu: fever, aches and cough that come on quickly. Rest and fluids help.",
    },
}

DOCTOR_GENERIC_QUESTIONS = [
    "What are the vital signs?",
    "Any relevant medical history?",
    "Current medications?",
]

PATIENT_GENERIC_QUESTIONS = [
    "How would you rate the pain from 1-10?",
    "Does anything make it better or worse?",
    "Are you taking any medications?",
]

MAX_FOLLOW_UP_QUESTIONS = 5
WARNING_GLYPH = "⚠️"


def _match_count(pattern: dict, symptoms_lower: str) -> int:
    return sum(1 for keyword in pattern["keywords"] if keyword in symptoms_lower)


def select_pattern(symptoms: str) -> dict:
    """Pick the pattern with the most keyword hits; the first pattern wins ties."""
    symptoms_lower = (symptoms or "").lower()
    best = SYMPTOM_PATTERNS[0]
    best_count = 0
    for pattern in SYMPTOM_PATTERNS:
        count = _match_count(pattern, symptoms_lower)
        if count > best_count:
            best, best_count = pattern, count
    return best


def describe_diagnosis(name: str, mode: Mode) -> str:
    key = "doctor" if mode == Mode.DOCTOR else "patient"
    entry = DIAGNOSIS_DESCRIPTIONS.get(name)
    if entry:
        return entry[key]
    if mode == Mode.DOCTOR:
        return "Clinical condition requiring evaluation."
    return "Medical condition that should be evaluated by a healthcare provider."


def demo_follow_up_questions(symptoms: str, mode: Mode) -> List[str]:
    pattern = select_pattern(symptoms)
    generic = DOCTOR_GENERIC_QUESTIONS if mode == Mode.DOCTOR else PATIENT_GENERIC_QUESTIONS
    return (pattern["questions"] + generic)[:MAX_FOLLOW_UP_QUESTIONS]


def generate_demo_analysis(
    symptoms: str, mode: Mode, patient_info: Optional[PatientInfo] = None
) -> AnalysisResult:
    """Keyword-matched canned analysis used when the model cannot be reached.

    patient_info is accepted for signature parity with the model path; the
    canned patterns do not vary by age or gender.
    """
    pattern = select_pattern(symptoms)

    if mode == Mode.DOCTOR:
        candidate_flags = list(pattern["red_flags"])
    else:
        candidate_flags = [f"{WARNING_GLYPH} {flag}" for flag in pattern["red_flags"]]

    diagnoses = [
        DiagnosisCandidate(
            name=name,
            description=describe_diagnosis(name, mode),
            confidence=confidence,
            category=category,
            red_flags=candidate_flags,
            recommended_tests=list(pattern["tests"]),
        )
        for name, confidence, category in pattern["diagnoses"]
    ]

    # Half-up rounding of the mean.
    mean = sum(d.confidence for d in diagnoses) / len(diagnoses)
    overall = int(mean + 0.5)

    return AnalysisResult(
        diagnoses=diagnoses,
        follow_up_questions=demo_follow_up_questions(symptoms, mode),
        red_flags=list(pattern["red_flags"]),
        recommended_tests=list(pattern["tests"]),
        overall_confidence=overall,
    )
