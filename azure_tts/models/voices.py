# ABOUTME: This file defines Pydantic models for voices returned by the Azure voice list endpoint.
# ABOUTME: Includes the style and role capability enums and the chainable VoiceFilter.

from enum import Enum
from typing import FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_HYPHENATED_STYLES = {
    "documentary_narration",
    "narration_professional",
    "narration_relaxed",
    "newscast_casual",
    "newscast_formal",
    "poetry_reading",
}


class VoiceStyle(str, Enum):
    advertisement_upbeat = "advertisement_upbeat"
    affectionate = "affectionate"
    angry = "angry"
    assistant = "assistant"
    calm = "calm"
    chat = "chat"
    cheerful = "cheerful"
    customerservice = "customerservice"
    depressed = "depressed"
    disgruntled = "disgruntled"
    documentary_narration = "documentary_narration"
    embarrassed = "embarrassed"
    empathetic = "empathetic"
    envious = "envious"
    excited = "excited"
    fearful = "fearful"
    friendly = "friendly"
    gentle = "gentle"
    hopeful = "hopeful"
    lyrical = "lyrical"
    narration_professional = "narration_professional"
    narration_relaxed = "narration_relaxed"
    newscast = "newscast"
    newscast_casual = "newscast_casual"
    newscast_formal = "newscast_formal"
    poetry_reading = "poetry_reading"
    sad = "sad"
    serious = "serious"
    shouting = "shouting"
    sports_commentary = "sports_commentary"
    sports_commentary_excited = "sports_commentary_excited"
    whispering = "whispering"
    terrified = "terrified"
    unfriendly = "unfriendly"

    @property
    def style_name(self) -> str:
        """Name used by the service in SSML and in StyleList."""
        if self.value in _HYPHENATED_STYLES:
            return self.value.replace("_", "-")
        return self.value

    @classmethod
    def from_style_name(cls, name: str) -> Optional["VoiceStyle"]:
        try:
            return cls(name.replace("-", "_"))
        except ValueError:
            return None


class VoiceRole(str, Enum):
    Girl = "Girl"
    Boy = "Boy"
    YoungAdultFemale = "YoungAdultFemale"
    YoungAdultMale = "YoungAdultMale"
    OlderAdultFemale = "OlderAdultFemale"
    OlderAdultMale = "OlderAdultMale"
    SeniorFemale = "SeniorFemale"
    SeniorMale = "SeniorMale"


class Voice(BaseModel):
    """A synthesis voice as described by the voice list endpoint."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(alias="Name")
    display_name: str = Field(alias="DisplayName")
    local_name: str = Field(alias="LocalName")
    short_name: str = Field(alias="ShortName")
    gender: str = Field(alias="Gender")
    locale: str = Field(alias="Locale")
    sample_rate_hertz: str = Field("", alias="SampleRateHertz")
    voice_type: str = Field("", alias="VoiceType")
    status: str = Field("", alias="Status")
    styles: FrozenSet[VoiceStyle] = Field(default_factory=frozenset, alias="StyleList")
    roles: FrozenSet[VoiceRole] = Field(default_factory=frozenset, alias="RolePlayList")

    @field_validator("styles", mode="before")
    @classmethod
    def known_styles(cls, value):
        # The service adds styles over time; unknown names are dropped
        if value is None:
            return frozenset()
        styles = set()
        for item in value:
            style = item if isinstance(item, VoiceStyle) else VoiceStyle.from_style_name(str(item))
            if style is not None:
                styles.add(style)
        return frozenset(styles)

    @field_validator("roles", mode="before")
    @classmethod
    def known_roles(cls, value):
        if value is None:
            return frozenset()
        roles = set()
        for item in value:
            try:
                roles.add(VoiceRole(item))
            except ValueError:
                continue
        return frozenset(roles)


class StyleSsml(BaseModel):
    """A speaking style together with its intensity."""

    model_config = ConfigDict(frozen=True)

    style: VoiceStyle
    style_degree: float = Field(1.0, ge=0.01, le=2.0)

    @property
    def style_name(self) -> str:
        return self.style.style_name


class VoiceFilter:
    """Chainable filtering over a list of voices. Each step returns a new filter."""

    def __init__(self, voices: List[Voice]):
        self._voices = list(voices)

    def by_locale(self, locale: str) -> "VoiceFilter":
        return VoiceFilter([v for v in self._voices if v.locale.startswith(locale)])

    def by_gender(self, gender: str) -> "VoiceFilter":
        return VoiceFilter([v for v in self._voices if v.gender.lower() == gender.lower()])

    def with_styles(self) -> "VoiceFilter":
        return VoiceFilter([v for v in self._voices if v.styles])

    def with_roles(self) -> "VoiceFilter":
        return VoiceFilter([v for v in self._voices if v.roles])

    def with_style(self, style: VoiceStyle) -> "VoiceFilter":
        return VoiceFilter([v for v in self._voices if style in v.styles])

    def with_role(self, role: VoiceRole) -> "VoiceFilter":
        return VoiceFilter([v for v in self._voices if role in v.roles])

    def neural(self) -> "VoiceFilter":
        return VoiceFilter([v for v in self._voices if v.voice_type.lower() == "neural"])

    def search(self, query: str) -> "VoiceFilter":
        needle = query.lower()
        return VoiceFilter([
            v for v in self._voices
            if needle in v.display_name.lower()
            or needle in v.short_name.lower()
            or needle in v.local_name.lower()
        ])

    @property
    def results(self) -> List[Voice]:
        return list(self._voices)

    @property
    def first(self) -> Optional[Voice]:
        return self._voices[0] if self._voices else None

    def first_or_raise(self) -> Voice:
        if not self._voices:
            raise LookupError("No voices found matching the criteria")
        return self._voices[0]

    def __len__(self) -> int:
        return len(self._voices)
