from __future__ import annotations

from typing import List, Optional, Protocol

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI, HarmBlockThreshold, HarmCategory

from config.settings import Settings


TEMPERATURE = 0.7
TOP_K = 1
TOP_P = 1.0
MAX_OUTPUT_TOKENS = 400

SAFETY_SETTINGS = {
    HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
}


class GreetingOracle(Protocol):
    def generate(self, history: List[dict], prompt: str) -> Optional[str]: ...


def to_lc_messages(history: List[dict]) -> List[BaseMessage]:
    messages: List[BaseMessage] = []
    for item in history or []:
        role = (item.get("role") or "").lower()
        content = item.get("content") or ""
        if not content:
            continue
        if role in ("user", "human"):
            messages.append(HumanMessage(content=content))
        elif role in ("assistant", "ai", "model"):
            messages.append(AIMessage(content=content))
        else:
            # Default unknown to HumanMessage for safety
            messages.append(HumanMessage(content=content))
    return messages


def _message_text(message: Optional[BaseMessage]) -> Optional[str]:
    if message is None:
        return None
    content = message.content
    if isinstance(content, list):
        # Gemini may return content parts instead of a single string
        content = "".join(
            part if isinstance(part, str) else str(part.get("text", ""))
            for part in content
        )
    return content or None


class GeminiOracle:
    """Single blocking chat round-trip against Gemini with fixed sampling and safety."""

    def __init__(self, llm: ChatGoogleGenerativeAI):
        self.llm = llm

    def generate(self, history: List[dict], prompt: str) -> Optional[str]:
        messages = to_lc_messages(history)
        messages.append(HumanMessage(content=prompt))
        return _message_text(self.llm.invoke(messages))


def build_llm(settings: Settings) -> ChatGoogleGenerativeAI:
    return ChatGoogleGenerativeAI(
        model=settings.gemini_model,
        google_api_key=settings.gemini_api_key,
        temperature=TEMPERATURE,
        top_k=TOP_K,
        top_p=TOP_P,
        max_output_tokens=MAX_OUTPUT_TOKENS,
        safety_settings=SAFETY_SETTINGS,
    )


def build_oracle(settings: Settings) -> Optional[GeminiOracle]:
    if not settings.gemini_api_key:
        return None
    return GeminiOracle(build_llm(settings))
