"""
Follow-up question suggester.

Derives up to a few suggested next questions from an assistant reply using
keyword rules. Suggestions are returned with the turn and never persisted.

Dependencies: medassist.core.session.templates
System role: Ephemeral conversation hints for the client
"""

import re
from collections.abc import Iterable

from medassist.core.session.templates import MEDICAL_DISCLAIMER

# (keywords, question) in priority order
TOPIC_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        ("chest pain", "heart attack", "difficulty breathing", "stroke", "emergency"),
        "Which warning signs mean I should go to the emergency department right away?",
    ),
    (
        ("fever", "temperature"),
        "How long should a fever last before I see a doctor?",
    ),
    (
        ("headache", "migraine"),
        "What can I do at home to ease the headache?",
    ),
    (
        ("cough", "cold", "flu", "sore throat"),
        "When should I be concerned about a persistent cough?",
    ),
    (
        ("blood pressure", "hypertension"),
        "What lifestyle changes help lower blood pressure?",
    ),
    (
        ("diabetes", "blood sugar", "glucose"),
        "How often should I check my blood sugar?",
    ),
    (
        ("stomach", "abdominal", "nausea", "vomiting", "diarrhea"),
        "Which foods should I avoid while my stomach recovers?",
    ),
    (
        ("anxiety", "stress", "depression", "sleep"),
        "What are some ways to manage stress and sleep better?",
    ),
    (
        ("medication", "medicine", "dose", "prescription"),
        "Are there side effects of this medication I should watch for?",
    ),
    (
        ("specialist", "doctor", "healthcare provider", "physician"),
        "What kind of specialist should I see for this?",
    ),
)

# Whole words and phrases only
REPORT_PATTERN = re.compile(
    r"\b(?:reports?|(?:test|lab|blood) (?:results?|values?)|lab work|"
    r"reference ranges?|normal ranges?|abnormal|(?:high|low|elevated) levels?)\b"
)

REPORT_QUESTIONS: tuple[str, ...] = (
    "Which of these results are outside the normal range?",
    "What follow-up tests might my doctor recommend?",
    "Should I change any medications or habits based on these results?",
)


def _mentions(text: str, keywords: Iterable[str]) -> bool:
    return any(keyword in text for keyword in keywords)


def suggest_follow_ups(content: str | None, limit: int = 3) -> list[str]:
    """
    Suggest follow-up questions for an assistant reply.

    Report questions come first when the reply discusses report values,
    then topic questions in rule order. Duplicates are dropped.

    Args:
        content: Assistant reply text
        limit: Maximum number of suggestions

    Returns:
        list[str]: Between 0 and `limit` questions
    """
    if not content or limit <= 0:
        return []

    # The disclaimer mentions doctors and emergencies on every reply
    text = content.replace(MEDICAL_DISCLAIMER, "").lower()
    suggestions: list[str] = []

    if REPORT_PATTERN.search(text):
        suggestions.extend(REPORT_QUESTIONS)

    for keywords, question in TOPIC_RULES:
        if _mentions(text, keywords):
            suggestions.append(question)

    return list(dict.fromkeys(suggestions))[:limit]
