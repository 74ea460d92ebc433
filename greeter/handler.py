"""Request handler for greeting generation.

One call per request. All cross-request state (quota counters, block flags,
log lists) lives in the injected key-value store; the handler keeps none.

The quota check (before any work) and the increment (after a successful
generation) are separate store calls, so concurrent requests from the same
client can both pass the check before either increments.
"""

from __future__ import annotations

import logging
from typing import Optional

from greeter.audit import ACTION_BLOCKED, ACTION_BLOCKED_NON_EID, record_security_event, record_usage
from greeter.core.identity import redact_client_id
from greeter.core.policy import GreetingPolicy, ensure_closing_phrase
from greeter.core.prompt import build_history, build_system_instruction
from greeter.oracle import GreetingOracle
from greeter.schemas import GreetingOptions, GreetingResult
from greeter.store import KeyValueStore, blocked_key, rate_limit_key


logger = logging.getLogger(__name__)

RATE_LIMITED = "Rate limit exceeded. Please try again later."
SUSPENDED = "Your access to this service has been temporarily suspended due to suspicious activity."
PROMPT_REQUIRED = "Prompt is required"
FLAGGED = "This service is exclusively for Eid greetings. Your request has been flagged and temporarily blocked."
NO_API_KEY = "API key not configured"
GENERATION_FAILED = "Failed to generate response or content blocked."
NON_EID_WARNING = "Your account has been temporarily blocked for requesting non-Eid content."


class GreetingError(Exception):
    """Policy, validation or upstream rejection surfaced to the caller as ``{"error": message}``."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class GreetingHandler:
    def __init__(
        self,
        store: KeyValueStore,
        oracle: Optional[GreetingOracle],
        policy: Optional[GreetingPolicy] = None,
    ):
        self.store = store
        self.oracle = oracle
        self.policy = policy or GreetingPolicy()

    def handle(
        self,
        client_id: str,
        prompt: Optional[str],
        options: Optional[GreetingOptions] = None,
    ) -> GreetingResult:
        request_count = self.check_client(client_id)
        return self.generate(client_id, request_count, prompt, options)

    def check_client(self, client_id: str) -> Optional[int]:
        """Reject over-quota or blocked clients; return the current request count.

        Runs before the request body is looked at.
        """
        raw_count = self.store.get(rate_limit_key(client_id))
        request_count = int(raw_count) if raw_count is not None else None
        if request_count is not None and request_count >= self.policy.requests_per_window:
            logger.warning("Rate limit hit: client=%s count=%s", redact_client_id(client_id), request_count)
            raise GreetingError(429, RATE_LIMITED)

        if self.store.get(blocked_key(client_id)):
            logger.warning("Blocked client rejected: client=%s", redact_client_id(client_id))
            raise GreetingError(403, SUSPENDED)

        return request_count

    def generate(
        self,
        client_id: str,
        request_count: Optional[int],
        prompt: Optional[str],
        options: Optional[GreetingOptions] = None,
    ) -> GreetingResult:
        options = options or GreetingOptions()
        policy = self.policy
        counter_key = rate_limit_key(client_id)

        if not prompt:
            raise GreetingError(400, PROMPT_REQUIRED)

        if policy.is_policy_violation(prompt):
            self._block(client_id, prompt, ACTION_BLOCKED)
            raise GreetingError(403, FLAGGED)

        if self.oracle is None:
            logger.error("Generation requested without GEMINI_API_KEY configured")
            raise GreetingError(500, NO_API_KEY)

        instruction = build_system_instruction(
            options.language,
            options.tone,
            quran_examples=policy.quran_examples,
            hadith_examples=policy.hadith_examples,
            tone_instructions=policy.tone_instructions,
        )
        response_text = self.oracle.generate(build_history(instruction), prompt)
        if not response_text:
            logger.warning("Model returned no content: client=%s", redact_client_id(client_id))
            raise GreetingError(500, GENERATION_FAILED)

        if policy.is_refusal(response_text):
            self._block(client_id, prompt, ACTION_BLOCKED_NON_EID)
            return GreetingResult(greeting=response_text, warning=NON_EID_WARNING)

        response_text = ensure_closing_phrase(response_text)

        if request_count is None:
            self.store.set(counter_key, 1, ex=policy.window_seconds)
        else:
            self.store.incr(counter_key)

        record_usage(self.store, client_id, options, prompt, response_text)
        logger.info(
            "Greeting generated: client=%s language=%s tone=%s chars=%s",
            redact_client_id(client_id),
            options.language.value,
            options.tone.value,
            len(response_text),
        )
        return GreetingResult(greeting=response_text)

    def _block(self, client_id: str, prompt: str, action: str) -> None:
        self.store.set(blocked_key(client_id), 1, ex=self.policy.block_seconds)
        record_security_event(self.store, client_id, prompt, action)
