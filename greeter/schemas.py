from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from greeter.core.prompt import Language, Tone


class GreetingOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    language: Language = Field(Language.ENGLISH, description="'english' or 'urdu'")
    tone: Tone = Field(Tone.GENERAL, description="Recipient/tone key")
    include_hadith: bool = Field(False, alias="includeHadith")
    include_quran: bool = Field(False, alias="includeQuran")


class GenerateRequest(BaseModel):
    prompt: Optional[str] = Field(None, description="Instruction composed by the client")
    options: Optional[GreetingOptions] = None


class GreetingResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    greeting: str
    formatted_greeting: bool = Field(True, alias="formattedGreeting")
    warning: Optional[str] = None

    def to_body(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
