"""
Test suite for transcript texts and title rules.

System role: Verification of fixed assistant texts and title derivation
"""

from datetime import datetime, timezone

from medassist.core.session.templates import (
    MEDICAL_DISCLAIMER,
    default_title,
    derive_title,
    is_default_title,
    preview,
    report_excerpt,
    upload_notice,
)

CREATED = datetime(2026, 1, 1, 8, 0, tzinfo=timezone.utc)
DEFAULT = default_title(CREATED)


def test_default_title_uses_creation_date():
    created = datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)

    assert default_title(created) == "Medical Consultation - 2026-03-14"
    assert is_default_title(default_title(created), created)


def test_derive_title_from_first_message():
    title = derive_title(DEFAULT, CREATED, 0, "  I have a\n headache  ", 3, 60)

    assert title == "I have a headache"


def test_derive_title_truncates_long_messages():
    text = "word " * 40

    title = derive_title(DEFAULT, CREATED, 0, text, 3, 20)

    assert len(title) <= 20
    assert title.endswith("...")


def test_derive_title_frozen_after_mutable_turns():
    assert derive_title(DEFAULT, CREATED, 3, "late message", 3, 60) is None


def test_derive_title_keeps_custom_title():
    assert derive_title("Knee pain", CREATED, 0, "another topic", 3, 60) is None


def test_derived_title_with_default_prefix_is_frozen():
    derived = derive_title(DEFAULT, CREATED, 0, "Medical Consultation follow-up for my knee", 3, 60)

    assert not is_default_title(derived, CREATED)
    assert derive_title(derived, CREATED, 1, "another topic", 3, 60) is None


def test_derive_title_ignores_blank_text():
    assert derive_title(DEFAULT, CREATED, 0, "   ", 3, 60) is None


def test_upload_notice_reports_size_in_kb():
    assert upload_notice("blood.pdf", 20480) == "Medical report uploaded: blood.pdf (20KB)"


def test_preview_shortens_long_content():
    assert preview("a" * 150, 100) == "a" * 100 + "..."
    assert preview("short", 100) == "short"


def test_preview_empty_transcript():
    assert preview(None, 100) == "No messages"
    assert preview("", 100) == "No messages"


def test_report_excerpt_drops_disclaimer_and_truncates():
    analysis = "Cholesterol is elevated. " * 100 + MEDICAL_DISCLAIMER

    excerpt = report_excerpt(analysis, 1000)

    assert len(excerpt) == 1000
    assert "Medical Disclaimer" not in excerpt
    assert report_excerpt(None, 1000) is None
    assert report_excerpt(MEDICAL_DISCLAIMER, 1000) is None
