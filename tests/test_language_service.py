"""Language registry tests."""

import pytest

from recruitment.errors import InvalidArgumentError, NotFoundError
from recruitment.services.language_service import LanguageService
from tests.conftest import run_db


@pytest.mark.db
def test_list_languages():
    async def scenario(session, seed):
        service = LanguageService(session)
        active = await service.get_languages()
        assert [lang.code for lang in active] == ["fr", "en"]

        everything = await service.get_languages(active_only=False)
        assert [lang.code for lang in everything] == ["fr", "en", "es"]
        assert await service.get_default_language_code() == "fr"

    run_db(scenario)


@pytest.mark.db
def test_default_language_cannot_be_deactivated():
    async def scenario(session, seed):
        service = LanguageService(session)
        with pytest.raises(InvalidArgumentError) as exc_info:
            await service.toggle_language_active("fr")
        assert exc_info.value.code == "default_language_locked"

        french = await service.get_language("fr")
        assert french.is_active is True

    run_db(scenario)


@pytest.mark.db
def test_toggle_non_default_language():
    async def scenario(session, seed):
        service = LanguageService(session)
        spanish = await service.toggle_language_active("es")
        assert spanish.is_active is True
        english = await service.toggle_language_active("en")
        assert english.is_active is False

        with pytest.raises(NotFoundError):
            await service.toggle_language_active("de")

    run_db(scenario)


@pytest.mark.db
def test_set_default_moves_the_flag():
    async def scenario(session, seed):
        service = LanguageService(session)
        await service.set_default_language("en")

        languages = await service.get_languages(active_only=False)
        defaults = [lang.code for lang in languages if lang.is_default]
        assert defaults == ["en"]
        assert await service.get_default_language_code() == "en"

        # fr is no longer locked
        french = await service.toggle_language_active("fr")
        assert french.is_active is False

    run_db(scenario)


@pytest.mark.db
def test_set_default_requires_active_language():
    async def scenario(session, seed):
        service = LanguageService(session)
        with pytest.raises(InvalidArgumentError):
            await service.set_default_language("es")
        assert await service.get_default_language_code() == "fr"

        unchanged = await service.set_default_language("fr")
        assert unchanged.is_default is True

    run_db(scenario)


@pytest.mark.db
def test_upsert_language_normalizes_code():
    async def scenario(session, seed):
        service = LanguageService(session)
        created = await service.upsert_language(" DE ", "Deutsch")
        assert created.code == "de"
        assert created.is_active is True
        assert created.is_default is False

        renamed = await service.upsert_language("de", "German")
        assert renamed.id == created.id
        assert renamed.name == "German"

    run_db(scenario)
