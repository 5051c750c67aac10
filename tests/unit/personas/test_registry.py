"""
Unit Tests for the Persona Registry
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from persona_context.errors import InvalidPersonaError
from persona_context.personas import (
    BUILTIN_PROFILES,
    PersonaId,
    PersonaProfile,
    PersonaRegistry,
    get_persona_registry,
)


def _profile(persona_id: str = "reviewer", keywords: tuple[str, ...] = ("리뷰", "품질", "테스트")) -> PersonaProfile:
    return PersonaProfile(id=persona_id, preserve_keywords=keywords, feedback_message="🧪 테스트 관점을 추가해보세요")


class TestBuiltinProfiles:
    """The closed set of built-in personas."""

    def test_ids_match_enum(self):
        assert [p.id for p in BUILTIN_PROFILES] == [pid.value for pid in PersonaId]

    def test_keyword_counts(self):
        for profile in BUILTIN_PROFILES:
            assert 3 <= len(profile.preserve_keywords) <= 5

    def test_security_keywords(self):
        registry = PersonaRegistry.builtin()

        assert registry.lookup("security").preserve_keywords == ("보안", "취약점", "암호화", "위협")

    def test_every_profile_has_feedback(self):
        for profile in BUILTIN_PROFILES:
            assert profile.feedback_message
            assert profile.display_name


class TestPersonaProfile:
    """Validation of profile fields."""

    def test_too_few_keywords(self):
        with pytest.raises(PydanticValidationError):
            _profile(keywords=("a", "b"))

    def test_too_many_keywords(self):
        with pytest.raises(PydanticValidationError):
            _profile(keywords=("a", "b", "c", "d", "e", "f"))

    def test_case_insensitive_duplicates_rejected(self):
        with pytest.raises(PydanticValidationError):
            _profile(keywords=("API", "api", "서버"))

    def test_multi_word_keyword_rejected(self):
        with pytest.raises(PydanticValidationError):
            _profile(keywords=("data base", "서버", "성능"))

    def test_symbol_only_keyword_rejected(self):
        with pytest.raises(PydanticValidationError):
            _profile(keywords=("---", "서버", "성능"))

    def test_frozen(self):
        profile = _profile()

        with pytest.raises(PydanticValidationError):
            profile.id = "other"  # type: ignore[misc]

    def test_keywords_in_is_case_insensitive(self):
        profile = PersonaRegistry.builtin().lookup(PersonaId.FRONTEND)

        assert profile.keywords_in("the ui and ux of the 화면") == ["UI", "UX", "화면"]

    def test_to_dict_uses_camel_case(self):
        payload = PersonaRegistry.builtin().lookup("backend").to_dict()

        assert payload["preserveKeywords"] == ["API", "데이터베이스", "서버", "성능"]
        assert payload["displayName"] == "Backend Developer"
        assert "summarizationFocus" in payload


class TestPersonaRegistry:
    """Lookup and registration."""

    def test_lookup_accepts_enum_and_string(self):
        registry = PersonaRegistry.builtin()

        assert registry.lookup(PersonaId.ARCHITECT) is registry.lookup("architect")

    def test_unknown_lookup_raises(self):
        registry = PersonaRegistry.builtin()

        with pytest.raises(InvalidPersonaError) as exc_info:
            registry.lookup("designer")

        assert exc_info.value.details["known_personas"] == registry.ids()

    def test_get_is_lenient(self):
        registry = PersonaRegistry.builtin()

        assert registry.get("designer") is None
        assert registry.get(None) is None
        assert registry.get("security") is not None

    def test_container_protocol(self):
        registry = PersonaRegistry.builtin()

        assert len(registry) == 5
        assert "data_analyst" in registry
        assert PersonaId.BACKEND in registry
        assert "designer" not in registry
        assert [p.id for p in registry] == registry.ids()

    def test_register_before_freeze(self):
        registry = PersonaRegistry()
        registry.register(_profile())
        registry.freeze()

        assert registry.frozen
        assert registry.lookup("reviewer").preserve_keywords == ("리뷰", "품질", "테스트")

    def test_register_after_freeze_fails(self):
        registry = PersonaRegistry.builtin()

        with pytest.raises(RuntimeError):
            registry.register(_profile())

    def test_duplicate_id_rejected(self):
        registry = PersonaRegistry([_profile()])

        with pytest.raises(ValueError):
            registry.register(_profile())

    def test_empty_registry(self):
        registry = PersonaRegistry()

        assert len(registry) == 0
        with pytest.raises(InvalidPersonaError):
            registry.lookup("security")

    def test_shared_registry_is_singleton(self):
        assert get_persona_registry() is get_persona_registry()
        assert get_persona_registry().frozen
