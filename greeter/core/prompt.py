"""Prompt assembly for the Eid greeting model.

Everything the model sees is built here: the system instruction with its
formatting rules, topic restriction and few-shot citations, the synthetic
acknowledgement turn, and (on the client side) the user prompt composed
from the selected options.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence


class Language(str, Enum):
    ENGLISH = "english"
    URDU = "urdu"


class Tone(str, Enum):
    GENERAL = "general"
    FAMILY = "family"
    FRIENDS = "friends"
    SPOUSE = "spouse"
    FORMAL = "formal"
    COLLEGE = "college"
    CUSTOM = "custom"


@dataclass(frozen=True)
class Citation:
    text: str
    reference: str

    def render(self) -> str:
        return f"{self.text} - {self.reference}"


REFUSAL_SENTINEL = "This service is exclusively for generating Eid greetings."
REFUSAL_TEXT = f"{REFUSAL_SENTINEL} Please try again with an Eid greeting request."

CLOSING_PHRASE_ARABIC = "تَقَبَّلَ اللَّهُ مِنَّا وَمِنْكُمْ"
CLOSING_PHRASE_ENGLISH = "May Allah accept from us and from you."
DIVIDER = "✧" + "┈" * 18 + "✧"

ACKNOWLEDGEMENT = (
    "I understand. I will generate beautifully formatted Eid al-Fitr greetings based on "
    "your requests, with decorative elements, proper spacing, and visual appeal. I'll "
    "ensure Urdu text is properly formatted with right-to-left support, and I'll include "
    "tastefully decorated Quranic verses and Hadiths as requested."
)

EID_QURAN_VERSES: List[Citation] = [
    Citation(
        "He wants you to complete the prescribed period and to glorify Allah for having "
        "guided you, so that you may be grateful to Him.",
        "Quran 2:185",
    ),
    Citation(
        "So when you have accomplished your rites, remember Allah as you remember your "
        "fathers or with a stronger remembrance.",
        "Quran 2:200",
    ),
    Citation(
        "And eat and drink until the white thread of dawn becomes distinct to you from the "
        "black thread. Then complete the fast until the night.",
        "Quran 2:187",
    ),
    Citation(
        "O you who have believed, decreed upon you is fasting as it was decreed upon those "
        "before you that you may become righteous.",
        "Quran 2:183",
    ),
    Citation(
        "Indeed, We have granted you, [O Muhammad], al-Kawthar. So pray to your Lord and "
        "sacrifice [to Him alone]. Indeed, your enemy is the one cut off.",
        "Quran 108:1-3",
    ),
]

EID_HADITHS: List[Citation] = [
    Citation(
        "When the month of Ramadan is over, and the night of Eid-ul-Fitr has arrived, that "
        "night is called the Night of Prize. Then, in the early morning of Eid-ul-Fitr Allah "
        "will send His angels to visit all the towns and cities on the earth below.",
        "Narrated by Anas ibn Malik (RA)",
    ),
    Citation(
        "The Prophet (ﷺ) said: 'When someone fasts during Ramadan out of sincere faith and "
        "hoping to earn reward, all his previous sins will be forgiven.'",
        "Sahih Al-Bukhari",
    ),
    Citation(
        "The Messenger of Allah (ﷺ) would not go out on the morning of Eid al-Fitr until he "
        "had eaten some dates, and he would eat an odd number.",
        "Sahih Al-Bukhari",
    ),
    Citation(
        "The Prophet (ﷺ) ordered us to pay Zakat-ul-Fitr before the Eid prayer.",
        "Sahih Al-Bukhari",
    ),
    Citation(
        "The Prophet (ﷺ) said: 'Fasting and the Quran will intercede for the servant on the "
        "Day of Resurrection.'",
        "Ahmad",
    ),
]

TONE_INSTRUCTIONS: Dict[str, str] = {
    Tone.FAMILY.value: "The tone should be warm, loving, and familiar, expressing deep connection and care.",
    Tone.FRIENDS.value: "The tone should be cheerful, casual, and full of camaraderie.",
    Tone.SPOUSE.value: "The tone should be romantic, intimate, and deeply affectionate.",
    Tone.FORMAL.value: "The tone should be respectful, dignified, and professionally appropriate.",
    Tone.COLLEGE.value: "The tone should be energetic, modern, and relatable to young adults.",
}

URDU_ADDENDUM = """
For Urdu greetings:
- Use proper Urdu script, not Roman Urdu or transliteration
- Incorporate culturally appropriate phrases and expressions
- Ensure the formatting and grammar are correct for Urdu
- Make sure the text is properly right-aligned in your response
- Add appropriate decorative elements that suit Urdu text aesthetics
"""

# Citation block headings and placeholders per language.
_CITATION_LABELS = {
    Language.ENGLISH: {
        "quran": "QURAN",
        "verse": "{verse text}",
        "hadith": "HADITH",
        "hadith_text": "{hadith text}",
        "reference": "{reference}",
    },
    Language.URDU: {
        "quran": "قرآن پاک",
        "verse": "{اردو میں آیت}",
        "hadith": "حدیث شریف",
        "hadith_text": "{اردو میں حدیث}",
        "reference": "{حوالہ}",
    },
}


def _citation_block(icon: str, heading: str, body: str, reference: str) -> str:
    return "\n".join(
        [
            f"   {DIVIDER}",
            f"   {icon} {heading}",
            f'   "{body}"',
            f"   — {reference}",
            f"   {DIVIDER}",
        ]
    )


def build_system_instruction(
    language: Language = Language.ENGLISH,
    tone: Optional[Tone] = None,
    quran_examples: Sequence[Citation] = EID_QURAN_VERSES,
    hadith_examples: Sequence[Citation] = EID_HADITHS,
    tone_instructions: Mapping[str, str] = TONE_INSTRUCTIONS,
) -> str:
    """Return the full system instruction sent as the first history turn.

    The Urdu addendum is appended only for Urdu, and a ``Tone instruction``
    line only when ``tone_instructions`` has guidance for the tone.
    """
    labels = _CITATION_LABELS[language]
    verses = "\n".join(c.render() for c in quran_examples)
    hadiths = "\n".join(c.render() for c in hadith_examples)
    quran_block = _citation_block("📖", labels["quran"], labels["verse"], labels["reference"])
    hadith_block = _citation_block("🕌", labels["hadith"], labels["hadith_text"], labels["reference"])

    instruction = f"""
You are an assistant specialized in crafting Eid al-Fitr greetings.
Your goal is to generate a warm, appropriate, and visually appealing Eid greeting based on the user's request.

Instructions:
1. Generate only the greeting message itself, without any preamble like "Okay, here is your greeting:".
2. Format the greeting beautifully:
   * Use emoji decorations where appropriate (like 🌙 ✨ 🕌 ☪️ 🎊 🎉)
   * Add decorative Unicode symbols to create borders or dividers (like ┈ ━ ┅ ● ○ ♦ ✦ ✧ ❈ ✽ ✾)
   * Break text into visually appealing sections with line breaks and spacing
   * For Urdu text, ensure proper right-to-left formatting and use appropriate Urdu Unicode characters
3. Analyze the user's request for specific requirements:
   * **Recipient/Tone:** (e.g., family, friend, spouse, formal, college group). Adjust the warmth and formality accordingly. Default to a general warm tone if not specified.
   * **Language:** Generate the greeting in the requested language (e.g., English, Urdu, Arabic). Default to English if not specified. For Urdu, use proper Urdu script, not transliteration.
   * **Tone:** If a specific tone is requested (family, friends, spouse, formal, college), adapt your language to match that audience.
   * **Conciseness:** Keep the greeting relatively short, suitable for sending as a message.
4. If the user asks for something unrelated to Eid greetings, respond ONLY with: "{REFUSAL_TEXT}"
5. Dynamically generate a Quranic verse and/or Hadith strictly related to post-Ramadan and Eid al-Fitr. Use the following examples as inspiration to ensure relevance and accuracy:
   **Quranic Verse Examples:**
   "{verses}"
   **Hadith Examples:**
   "{hadiths}"
6. Format generated Quranic verses and Hadiths in a visually appealing way:
   * For Quranic verses:
{quran_block}
   * For Hadiths:
{hadith_block}
7. Ensure all generated content focuses specifically on:
   * The completion of Ramadan
   * The celebration of Eid al-Fitr
   * Prayers for acceptance of fasting and worship
   * Hopes for blessings in the coming year
8. Never create content unrelated to Eid greetings, regardless of what is asked.
9. Make sure the final output is well-formatted, with proper spacing, punctuation, and visual elements that make it easy to read and share.
10. End the greeting with a decorative line and the phrase "{CLOSING_PHRASE_ARABIC}" alongside its translation "{CLOSING_PHRASE_ENGLISH}"
"""

    if language == Language.URDU:
        instruction += URDU_ADDENDUM

    if tone is not None and tone.value in tone_instructions:
        instruction += f"\nTone instruction: {tone_instructions[tone.value]}"

    return instruction


def build_history(system_instruction: str) -> List[Dict[str, str]]:
    return [
        {"role": "user", "content": system_instruction},
        {"role": "assistant", "content": ACKNOWLEDGEMENT},
    ]


def build_user_prompt(
    language: Language,
    tone: Tone,
    include_hadith: bool = False,
    include_quran: bool = False,
    custom_text: str = "",
) -> str:
    """Compose the outgoing prompt from the selected options.

    With the custom tone the free text is sent verbatim.
    """
    if tone == Tone.CUSTOM and custom_text:
        return custom_text

    prompt = f"Generate an Eid greeting in {language.value} with a {tone.value} tone"
    if include_hadith:
        prompt += ", include a relevant Hadith"
    if include_quran:
        prompt += ", include a relevant Quranic ayat"
    if custom_text:
        prompt += f". Additional details: {custom_text}"
    return prompt
