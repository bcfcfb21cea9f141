"""Tests for CollectionRepository."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy import select, text

from github_org_sync.db.models import CollectionRecord, ResourceCollection
from github_org_sync.db.repositories import CollectionRepository
from tests.factories import make_collection_records, make_commit, make_page, make_user


class TestReplaceCollection:
    """Write tests for CollectionRepository.replace_collection."""

    async def test_writes_records_in_order(self, db_session):
        repository = CollectionRepository(db_session)
        commits = [make_commit(f"sha{i}") for i in range(3)]

        count = await repository.replace_collection(ResourceCollection.COMMITS, commits)

        assert count == 3
        assert await repository.get_records(ResourceCollection.COMMITS) == commits

    async def test_replaces_existing_contents(self, db_session):
        """A second write replaces rather than appends."""
        make_collection_records(db_session, ResourceCollection.USERS, [make_user("old")])
        await db_session.flush()
        repository = CollectionRepository(db_session)

        await repository.replace_collection(ResourceCollection.USERS, [make_user("new")])

        records = await repository.get_records(ResourceCollection.USERS)
        assert [r["login"] for r in records] == ["new"]

    async def test_same_batch_twice_is_not_doubled(self, db_session):
        repository = CollectionRepository(db_session)
        records = make_page(7)

        await repository.replace_collection(ResourceCollection.ISSUES, records)
        await repository.replace_collection(ResourceCollection.ISSUES, records)

        assert await repository.count_records(ResourceCollection.ISSUES) == 7

    async def test_empty_batch_leaves_existing_contents(self, db_session):
        """An empty fetch never wipes stored data."""
        make_collection_records(db_session, ResourceCollection.PULLS, make_page(2))
        await db_session.flush()
        repository = CollectionRepository(db_session)

        count = await repository.replace_collection(ResourceCollection.PULLS, [])

        assert count == 0
        assert await repository.count_records(ResourceCollection.PULLS) == 2

    async def test_other_collections_untouched(self, db_session):
        make_collection_records(db_session, ResourceCollection.ORGANIZATIONS, make_page(1))
        await db_session.flush()
        repository = CollectionRepository(db_session)

        await repository.replace_collection(ResourceCollection.REPOSITORIES, make_page(4))

        assert await repository.count_records(ResourceCollection.ORGANIZATIONS) == 1
        assert await repository.count_records(ResourceCollection.REPOSITORIES) == 4

    async def test_inserts_in_batches(self, db_session):
        """Records are inserted in consecutive chunks of at most batch_size."""
        repository = CollectionRepository(db_session)
        repository.commit = AsyncMock(wraps=repository.commit)

        count = await repository.replace_collection(
            ResourceCollection.COMMITS, make_page(12), batch_size=5
        )

        assert count == 12
        # One commit after the delete, then one per batch (5 + 5 + 2)
        assert repository.commit.await_count == 4
        positions = (
            await db_session.execute(
                select(CollectionRecord.position)
                .where(CollectionRecord.collection == ResourceCollection.COMMITS)
                .order_by(CollectionRecord.position)
            )
        ).scalars().all()
        assert list(positions) == list(range(12))

    async def test_partial_write_on_failure(self, db_session):
        """A failing batch leaves earlier batches committed and propagates."""
        make_collection_records(db_session, ResourceCollection.COMMITS, make_page(3, 100))
        await db_session.commit()
        repository = CollectionRepository(db_session)

        real_commit = repository.commit
        calls = 0

        async def failing_commit():
            nonlocal calls
            calls += 1
            if calls == 3:  # delete, first batch, then fail on the second batch
                raise RuntimeError("disk full")
            await real_commit()

        repository.commit = failing_commit

        with pytest.raises(RuntimeError, match="disk full"):
            await repository.replace_collection(
                ResourceCollection.COMMITS, make_page(4), batch_size=2
            )
        await db_session.rollback()

        records = await repository.get_records(ResourceCollection.COMMITS)
        assert records == make_page(2)

    async def test_stores_collection_identifier(self, db_session):
        """Rows carry the prefixed identifier, readable without the ORM."""
        repository = CollectionRepository(db_session)

        await repository.replace_collection(ResourceCollection.COMMITS, [{"sha": "a"}])
        await repository.replace_collection(
            ResourceCollection.ISSUE_CHANGELOGS, [{"event": "closed"}]
        )

        rows = await db_session.execute(
            text("SELECT DISTINCT collection FROM collection_records ORDER BY collection")
        )
        assert [r[0] for r in rows] == ["github-commits", "github-issue-changelogs"]

    async def test_invalid_batch_size(self, db_session):
        repository = CollectionRepository(db_session)

        with pytest.raises(ValueError):
            await repository.replace_collection(ResourceCollection.USERS, make_page(1), batch_size=0)


class TestCollectionQueries:
    """Query tests for CollectionRepository."""

    async def test_get_records_limit(self, db_session):
        make_collection_records(db_session, ResourceCollection.USERS, make_page(5))
        await db_session.flush()
        repository = CollectionRepository(db_session)

        records = await repository.get_records(ResourceCollection.USERS, limit=2)

        assert records == make_page(2)

    async def test_get_records_empty(self, db_session):
        repository = CollectionRepository(db_session)

        assert await repository.get_records(ResourceCollection.ISSUE_CHANGELOGS) == []

    async def test_list_collections(self, db_session):
        """Only non-empty collections are listed, in registry order."""
        make_collection_records(db_session, ResourceCollection.USERS, make_page(2))
        make_collection_records(db_session, ResourceCollection.ORGANIZATIONS, make_page(1))
        await db_session.flush()
        repository = CollectionRepository(db_session)

        counts = await repository.list_collections()

        assert list(counts.items()) == [
            (ResourceCollection.ORGANIZATIONS, 1),
            (ResourceCollection.USERS, 2),
        ]

    async def test_count(self, db_session):
        make_collection_records(db_session, ResourceCollection.USERS, make_page(2))
        make_collection_records(db_session, ResourceCollection.PULLS, make_page(3))
        await db_session.flush()

        assert await CollectionRepository(db_session).count() == 5
