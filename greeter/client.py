"""Conversation view for the greeting endpoint.

Keeps the displayed messages in order, composes the outgoing prompt from the
selected options and turns handler errors into ``error`` messages. Nothing
is persisted between runs.
"""

from __future__ import annotations

import argparse
import logging
import uuid
from dataclasses import dataclass, field
from typing import List, Literal, Optional

import httpx

from greeter.core.prompt import Language, Tone, build_user_prompt
from greeter.schemas import GreetingOptions


logger = logging.getLogger(__name__)

Role = Literal["user", "model", "system", "error"]

WELCOME = (
    "Assalamu Alaikum! How can I help you create an Eid greeting today? "
    "Use the options below to customize your greeting."
)
DEFAULT_ENDPOINT = "http://127.0.0.1:8000/api/generate"


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    text: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))


class ChatSession:
    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        options: Optional[GreetingOptions] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.endpoint = endpoint
        self.options = options or GreetingOptions()
        self.messages: List[ChatMessage] = [ChatMessage(role="system", text=WELCOME)]
        self.is_loading = False
        self._http = http_client or httpx.Client(timeout=60.0)

    def build_prompt(self, custom_text: str = "") -> str:
        return build_user_prompt(
            self.options.language,
            self.options.tone,
            include_hadith=self.options.include_hadith,
            include_quran=self.options.include_quran,
            custom_text=custom_text,
        )

    def send(self, custom_text: str = "") -> Optional[ChatMessage]:
        """Send one request and return the appended reply (model or error).

        Returns None without sending while a request is in flight, or when
        the custom tone is selected and no text was entered.
        """
        text = custom_text.strip()
        if (not text and self.options.tone == Tone.CUSTOM) or self.is_loading:
            return None

        prompt = self.build_prompt(text)
        self.messages.append(ChatMessage(role="user", text=prompt))
        self.is_loading = True
        try:
            greeting = self._request_greeting(prompt)
            reply = ChatMessage(role="model", text=greeting)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Greeting request failed: %s", exc)
            reply = ChatMessage(
                role="error",
                text=f"Sorry, I encountered an error: {exc}. Please try again later.",
            )
        finally:
            self.is_loading = False
        self.messages.append(reply)
        return reply

    def _request_greeting(self, prompt: str) -> str:
        response = self._http.post(
            self.endpoint,
            json={"prompt": prompt, "options": self.options.model_dump(by_alias=True, mode="json")},
        )
        if response.is_error:
            try:
                data = response.json()
            except ValueError:
                data = {"error": "Failed to parse error response"}
            detail = data.get("error") if isinstance(data, dict) else None
            raise ValueError(detail or f"HTTP error! Status: {response.status_code}")

        data = response.json()
        greeting = data.get("greeting") if isinstance(data, dict) else None
        if not greeting:
            raise ValueError("Received an empty greeting from the API.")
        return greeting

    def close(self) -> None:
        self._http.close()


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Chat with the Eid greeting assistant")
    parser.add_argument("--url", default=DEFAULT_ENDPOINT)
    parser.add_argument("--language", choices=[lang.value for lang in Language], default=Language.ENGLISH.value)
    parser.add_argument("--tone", choices=[t.value for t in Tone], default=Tone.GENERAL.value)
    parser.add_argument("--hadith", action="store_true", help="include a relevant Hadith")
    parser.add_argument("--quran", action="store_true", help="include a relevant Quranic ayat")
    args = parser.parse_args(argv)

    options = GreetingOptions(
        language=Language(args.language),
        tone=Tone(args.tone),
        include_hadith=args.hadith,
        include_quran=args.quran,
    )
    session = ChatSession(endpoint=args.url, options=options)
    print(WELCOME)
    try:
        while True:
            try:
                text = input("> ")
            except EOFError:
                break
            reply = session.send(text)
            if reply is not None:
                print(f"\n{reply.text}\n")
    finally:
        session.close()


if __name__ == "__main__":
    main()
