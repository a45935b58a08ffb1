"""Unit tests for settings and vocabulary overrides."""

import pytest

from docwatch.application.dto.vocabulary import DEFAULT_OBLIGATION_VERBS, ChangeVocabulary
from docwatch.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch) -> None:
        monkeypatch.delenv("DRIVE_FOLDER_ID", raising=False)
        settings = Settings(_env_file=None)
        assert settings.diff_max_chunks == 8
        assert settings.scheduler_interval_minutes == 60
        assert settings.explanations_enabled is False
        assert settings.drive_folder_id is None

    def test_vocabulary_override_from_env(self, monkeypatch) -> None:
        monkeypatch.setenv("HIGH_RISK_PHRASES", '["overtime", "night shift"]')
        vocabulary = Settings(_env_file=None).vocabulary()
        assert vocabulary.high_risk_phrases == ("overtime", "night shift")
        assert vocabulary.obligation_verbs == DEFAULT_OBLIGATION_VERBS


class TestChangeVocabulary:
    def test_with_overrides_skips_none(self) -> None:
        vocabulary = ChangeVocabulary().with_overrides(
            storage_keywords=["vault"], system_keywords=None
        )
        assert vocabulary.storage_keywords == ("vault",)
        assert vocabulary.system_keywords == ChangeVocabulary().system_keywords

    def test_unknown_list(self) -> None:
        with pytest.raises(ValueError, match="Unknown vocabulary lists"):
            ChangeVocabulary().with_overrides(colors=["red"])
