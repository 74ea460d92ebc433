"""Append-only security and usage log entries kept in the key-value store."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from greeter.core.identity import redact_client_id
from greeter.schemas import GreetingOptions
from greeter.store import SECURITY_LOG_KEY, USAGE_LOG_KEY, KeyValueStore


logger = logging.getLogger(__name__)

ACTION_BLOCKED = "blocked"
ACTION_BLOCKED_NON_EID = "blocked-non-eid"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class SecurityLogEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    timestamp: str = Field(default_factory=_now_iso)
    client_id: str = Field(..., alias="clientId")
    prompt: str
    action: str


class UsageLogEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    timestamp: str = Field(default_factory=_now_iso)
    client_id: str = Field(..., alias="clientId")
    language: str
    tone: str
    include_hadith: bool = Field(False, alias="includeHadith")
    include_quran: bool = Field(False, alias="includeQuran")
    prompt_length: int = Field(..., alias="promptLength")
    response_length: int = Field(..., alias="responseLength")


def record_security_event(store: KeyValueStore, client_id: str, prompt: str, action: str) -> SecurityLogEntry:
    entry = SecurityLogEntry(
        client_id=redact_client_id(client_id),
        prompt=prompt[:50] + "...",
        action=action,
    )
    store.lpush(SECURITY_LOG_KEY, entry.model_dump_json(by_alias=True))
    logger.warning("Security event: action=%s client=%s", action, entry.client_id)
    return entry


def record_usage(
    store: KeyValueStore,
    client_id: str,
    options: GreetingOptions,
    prompt: str,
    response: str,
) -> UsageLogEntry:
    entry = UsageLogEntry(
        client_id=redact_client_id(client_id),
        language=options.language.value,
        tone=options.tone.value,
        include_hadith=options.include_hadith,
        include_quran=options.include_quran,
        prompt_length=len(prompt),
        response_length=len(response),
    )
    store.lpush(USAGE_LOG_KEY, entry.model_dump_json(by_alias=True))
    return entry
