"""
Persona Registry

Closed, read-only catalog of persona profiles. Each profile names the
vocabulary that compression must keep verbatim and the feedback message the
evaluator emits when a response drifts away from the role.

The registry is filled once at startup and frozen; lookups afterwards need
no synchronization.
"""

import logging
from collections.abc import Iterator
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..errors import InvalidPersonaError

logger = logging.getLogger(__name__)


class PersonaId(str, Enum):
    """Built-in persona identifiers."""

    ARCHITECT = "architect"
    SECURITY = "security"
    FRONTEND = "frontend"
    BACKEND = "backend"
    DATA_ANALYST = "data_analyst"


class PersonaProfile(BaseModel):
    """A role profile parameterizing which vocabulary is critical."""

    id: str = Field(..., min_length=1, description="Persona identifier")
    preserve_keywords: tuple[str, ...] = Field(
        ...,
        min_length=3,
        max_length=5,
        description="Terms compression keeps verbatim (matched case-insensitively)",
    )
    feedback_message: str = Field(..., min_length=1, description="Feedback shown when a response needs correction")

    display_name: str = Field(default="", description="Human-readable persona name")
    focus_areas: tuple[str, ...] = Field(default=(), description="Topics the persona cares about")
    summarization_focus: str = Field(default="", description="What a summary for this persona should emphasize")

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    @field_validator("preserve_keywords")
    @classmethod
    def validate_keywords(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Reject blank or symbol-only keywords and case-insensitive duplicates."""
        if any(not k.strip() for k in v):
            raise ValueError("preserve keywords must not be blank")
        if any(any(ch.isspace() for ch in k) or not any(ch.isalnum() for ch in k) for k in v):
            raise ValueError("preserve keywords must be single words containing a letter or digit")
        lowered = [k.lower() for k in v]
        if len(set(lowered)) != len(lowered):
            raise ValueError("preserve keywords must be unique (case-insensitive)")
        return v

    def keywords_in(self, text: str) -> list[str]:
        """Return the preserve keywords occurring in text, in profile order."""
        haystack = text.lower()
        return [k for k in self.preserve_keywords if k.lower() in haystack]

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


BUILTIN_PROFILES: tuple[PersonaProfile, ...] = (
    PersonaProfile(
        id=PersonaId.ARCHITECT.value,
        preserve_keywords=("시스템", "설계", "구조", "아키텍처"),
        feedback_message="💡 시스템 설계 관점을 더 포함해보세요",
        display_name="Architect",
        focus_areas=("system_design", "architecture", "patterns"),
        summarization_focus="high-level structure and design patterns",
    ),
    PersonaProfile(
        id=PersonaId.SECURITY.value,
        preserve_keywords=("보안", "취약점", "암호화", "위협"),
        feedback_message="🔒 보안 측면을 좀 더 고려해보세요",
        display_name="Security Expert",
        focus_areas=("security_threats", "vulnerabilities", "mitigation"),
        summarization_focus="security implications and mitigation strategies",
    ),
    PersonaProfile(
        id=PersonaId.FRONTEND.value,
        preserve_keywords=("UI", "UX", "사용자", "화면"),
        feedback_message="🎨 사용자 경험 관점을 추가해보세요",
        display_name="Frontend Developer",
        focus_areas=("user_interface", "user_experience", "visual_design"),
        summarization_focus="UI components and user interaction flows",
    ),
    PersonaProfile(
        id=PersonaId.BACKEND.value,
        preserve_keywords=("API", "데이터베이스", "서버", "성능"),
        feedback_message="⚙️ 서버/데이터 처리 관점을 강화해보세요",
        display_name="Backend Developer",
        focus_areas=("api_design", "data_processing", "performance"),
        summarization_focus="API endpoints and data flow",
    ),
    PersonaProfile(
        id=PersonaId.DATA_ANALYST.value,
        preserve_keywords=("데이터", "분석", "통계", "인사이트"),
        feedback_message="📊 데이터 기반 인사이트를 더 제공해보세요",
        display_name="Data Analyst",
        focus_areas=("data_analysis", "insights", "visualization"),
        summarization_focus="data patterns and analytical insights",
    ),
)


class PersonaRegistry:
    """
    Registry of persona profiles keyed by id.

    Profiles may be registered until freeze() is called; after that the
    registry is immutable for the rest of the process.
    """

    def __init__(self, profiles: tuple[PersonaProfile, ...] | list[PersonaProfile] = (), frozen: bool = False):
        self._profiles: dict[str, PersonaProfile] = {}
        self._frozen = False
        for profile in profiles:
            self.register(profile)
        self._frozen = frozen

    @classmethod
    def builtin(cls) -> "PersonaRegistry":
        """Registry holding the five built-in personas, frozen."""
        return cls(BUILTIN_PROFILES, frozen=True)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Disallow further registrations."""
        self._frozen = True

    def register(self, profile: PersonaProfile) -> None:
        """
        Add a profile at startup.

        Raises:
            RuntimeError: If the registry is already frozen
            ValueError: If a profile with the same id exists
        """
        if self._frozen:
            raise RuntimeError("Persona registry is frozen; register profiles at startup")
        if profile.id in self._profiles:
            raise ValueError(f"Persona already registered: {profile.id}")
        self._profiles[profile.id] = profile
        logger.debug(f"Registered persona {profile.id}", extra={"persona": profile.id})

    @staticmethod
    def _normalize(persona_id: Any) -> Any:
        if isinstance(persona_id, PersonaId):
            return persona_id.value
        return persona_id

    def lookup(self, persona_id: PersonaId | str) -> PersonaProfile:
        """
        Look up a profile by id.

        Raises:
            InvalidPersonaError: If the id is not registered
        """
        profile = self.get(persona_id)
        if profile is None:
            raise InvalidPersonaError(persona_id, known=self.ids())
        return profile

    def get(self, persona_id: PersonaId | str | None) -> PersonaProfile | None:
        """Lenient lookup: None for unknown or missing ids."""
        key = self._normalize(persona_id)
        if not isinstance(key, str):
            return None
        return self._profiles.get(key)

    def ids(self) -> list[str]:
        return list(self._profiles)

    def profiles(self) -> list[PersonaProfile]:
        return list(self._profiles.values())

    def __contains__(self, persona_id: object) -> bool:
        return self.get(persona_id) is not None  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[PersonaProfile]:
        return iter(self.profiles())

    def __len__(self) -> int:
        return len(self._profiles)


_registry_instance: PersonaRegistry | None = None


def get_persona_registry() -> PersonaRegistry:
    """Get the process-wide registry of built-in personas."""
    global _registry_instance

    if _registry_instance is None:
        _registry_instance = PersonaRegistry.builtin()

    return _registry_instance
