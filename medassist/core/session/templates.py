"""
Fixed assistant texts and session title rules.

Dependencies: datetime, re
System role: Canonical texts written into transcripts by the engine itself
"""

import re
from datetime import datetime

DEFAULT_TITLE_PREFIX = "Medical Consultation"

GREETING_MESSAGE = (
    "Hello! I'm your medical AI assistant. I can help you understand symptoms, "
    "analyze medical reports, and provide health information. "
    "How can I assist you today?"
)

MEDICAL_DISCLAIMER = (
    "\n\n**Medical Disclaimer**: This information is for educational purposes only and "
    "should not replace professional medical advice. Please consult a qualified healthcare "
    "provider for proper diagnosis and treatment. In case of emergency, call 999 or visit "
    "your nearest emergency department."
)

FALLBACK_REPLY = (
    "I apologize, but I'm currently experiencing technical difficulties and "
    "couldn't prepare a full answer. Here are some general guidelines in the meantime:\n\n"
    "1. For urgent medical concerns, contact emergency services (999) or visit your nearest hospital\n"
    "2. For non-urgent issues, consider booking an appointment with your doctor\n"
    "3. Keep monitoring your symptoms and note any changes\n\n"
    "Please try sending your message again in a moment."
)

_WHITESPACE_RE = re.compile(r"\s+")


def default_title(created_at: datetime) -> str:
    """Title every session starts with."""
    return f"{DEFAULT_TITLE_PREFIX} - {created_at:%Y-%m-%d}"


def is_default_title(title: str, created_at: datetime) -> bool:
    return title == default_title(created_at)


def derive_title(
    current_title: str,
    created_at: datetime,
    user_turns: int,
    text: str,
    mutable_turns: int,
    max_length: int,
) -> str | None:
    """
    Derive a session title from a user message.

    The title only changes while it is still the default one and fewer than
    `mutable_turns` user turns were recorded; afterwards it is frozen.

    Args:
        current_title: Title stored on the session
        created_at: Session creation time the default title was built from
        user_turns: User turns recorded before this message
        text: Incoming user message
        mutable_turns: Number of turns during which the title may change
        max_length: Maximum title length, ellipsis included

    Returns:
        str | None: New title, or None when the title stays unchanged
    """
    if user_turns >= mutable_turns or not is_default_title(current_title, created_at):
        return None
    collapsed = _WHITESPACE_RE.sub(" ", text).strip()
    if not collapsed:
        return None
    if len(collapsed) > max_length:
        collapsed = collapsed[: max_length - 3].rstrip() + "..."
    return collapsed


def upload_notice(file_name: str, file_size: int) -> str:
    """System notice recorded ahead of a report analysis."""
    return f"Medical report uploaded: {file_name} ({round(file_size / 1024)}KB)"


def preview(content: str | None, length: int) -> str:
    """Shorten a message for session listings."""
    if not content:
        return "No messages"
    if len(content) <= length:
        return content
    return content[:length] + "..."


def report_excerpt(analysis: str | None, length: int) -> str | None:
    """Latest report analysis, disclaimer removed, cut to `length` characters."""
    if not analysis:
        return None
    text = analysis.replace(MEDICAL_DISCLAIMER, "").strip()
    return text[:length] or None
