"""Tests for IntegrationRepository."""

import pytest
from sqlalchemy.exc import IntegrityError

from github_org_sync.db.models import GitHubIntegration
from github_org_sync.db.repositories import IntegrationRepository
from tests.conftest import JAN_15
from tests.factories import make_integration, make_user


class TestIntegrationRepositoryQuery:
    """Query method tests for IntegrationRepository."""

    async def test_get_none_when_not_connected(self, db_session):
        repository = IntegrationRepository(db_session)

        assert await repository.get() is None

    async def test_get_existing(self, db_session):
        make_integration(db_session, access_token="gho_abc", user=make_user("alice"))
        await db_session.flush()

        integration = await IntegrationRepository(db_session).get()

        assert integration is not None
        assert integration.access_token == "gho_abc"
        assert integration.user["login"] == "alice"


class TestIntegrationRepositoryUpsert:
    """Upsert tests for IntegrationRepository."""

    async def test_upsert_creates(self, db_session):
        repository = IntegrationRepository(db_session)

        integration = await repository.upsert("gho_new", make_user("alice"), scope="repo")

        assert integration.access_token == "gho_new"
        assert integration.scope == "repo"
        assert integration.token_type == "bearer"
        assert integration.connected is True
        assert integration.connected_at is not None
        assert await repository.count() == 1

    async def test_upsert_overwrites_single_record(self, db_session):
        """Connecting again replaces the stored account instead of adding one."""
        repository = IntegrationRepository(db_session)
        await repository.upsert("gho_first", make_user("alice"))

        integration = await repository.upsert("gho_second", make_user("bob"), connected_at=JAN_15)

        assert await repository.count() == 1
        assert integration.access_token == "gho_second"
        assert integration.user["login"] == "bob"
        assert integration.connected_at == JAN_15

    async def test_second_slot_rejected(self, db_session):
        """The table cannot hold a second integration."""
        make_integration(db_session)
        await db_session.flush()

        db_session.add(GitHubIntegration(slot=2, access_token="gho_other"))
        with pytest.raises(IntegrityError):
            await db_session.flush()


class TestIntegrationRepositoryDelete:
    """Delete tests for IntegrationRepository."""

    async def test_delete_existing(self, db_session):
        make_integration(db_session)
        await db_session.flush()
        repository = IntegrationRepository(db_session)

        assert await repository.delete() is True
        assert await repository.get() is None

    async def test_delete_when_missing(self, db_session):
        assert await IntegrationRepository(db_session).delete() is False
