# tests/test_prompt.py
from __future__ import annotations

from greeter.core.prompt import (
    ACKNOWLEDGEMENT,
    CLOSING_PHRASE_ARABIC,
    EID_HADITHS,
    EID_QURAN_VERSES,
    REFUSAL_TEXT,
    TONE_INSTRUCTIONS,
    URDU_ADDENDUM,
    Citation,
    Language,
    Tone,
    build_history,
    build_system_instruction,
    build_user_prompt,
)


def test_instruction_carries_topic_lock_and_examples() -> None:
    instruction = build_system_instruction(Language.ENGLISH, Tone.GENERAL)

    assert f'respond ONLY with: "{REFUSAL_TEXT}"' in instruction
    assert CLOSING_PHRASE_ARABIC in instruction
    assert len(EID_QURAN_VERSES) == 5
    assert len(EID_HADITHS) == 5
    for citation in EID_QURAN_VERSES + EID_HADITHS:
        assert f"{citation.text} - {citation.reference}" in instruction
    assert "📖 QURAN" in instruction
    assert "🕌 HADITH" in instruction
    assert URDU_ADDENDUM not in instruction
    assert "Tone instruction" not in instruction


def test_urdu_instruction_uses_urdu_headings_and_addendum() -> None:
    instruction = build_system_instruction(Language.URDU, Tone.GENERAL)

    assert "📖 قرآن پاک" in instruction
    assert "🕌 حدیث شریف" in instruction
    assert "📖 QURAN" not in instruction
    assert instruction.rstrip().endswith("Add appropriate decorative elements that suit Urdu text aesthetics")


def test_tone_guidance_is_appended_last() -> None:
    for tone_key, guidance in TONE_INSTRUCTIONS.items():
        instruction = build_system_instruction(Language.URDU, Tone(tone_key))
        assert instruction.endswith(f"\nTone instruction: {guidance}")


def test_custom_and_general_tones_have_no_guidance() -> None:
    for tone in (Tone.GENERAL, Tone.CUSTOM):
        assert "Tone instruction" not in build_system_instruction(Language.ENGLISH, tone)


def test_injected_examples_replace_defaults() -> None:
    verse = Citation("Custom verse text", "Quran 1:1")
    instruction = build_system_instruction(
        Language.ENGLISH,
        Tone.FAMILY,
        quran_examples=[verse],
        hadith_examples=[],
        tone_instructions={"family": "Be brief."},
    )

    assert "Custom verse text - Quran 1:1" in instruction
    assert EID_QURAN_VERSES[0].reference not in instruction
    assert instruction.endswith("Tone instruction: Be brief.")


def test_history_has_instruction_then_acknowledgement() -> None:
    history = build_history("INSTRUCTIONS")
    assert history == [
        {"role": "user", "content": "INSTRUCTIONS"},
        {"role": "assistant", "content": ACKNOWLEDGEMENT},
    ]


def test_user_prompt_from_options() -> None:
    assert (
        build_user_prompt(Language.ENGLISH, Tone.FAMILY)
        == "Generate an Eid greeting in english with a family tone"
    )
    assert build_user_prompt(
        Language.URDU, Tone.FRIENDS, include_hadith=True, include_quran=True, custom_text="for Ali"
    ) == (
        "Generate an Eid greeting in urdu with a friends tone, include a relevant Hadith, "
        "include a relevant Quranic ayat. Additional details: for Ali"
    )


def test_custom_tone_sends_text_verbatim() -> None:
    text = "Eid greeting for my brother in English, something brotherly with a Quranic verse"
    assert build_user_prompt(Language.ENGLISH, Tone.CUSTOM, include_hadith=True, custom_text=text) == text
