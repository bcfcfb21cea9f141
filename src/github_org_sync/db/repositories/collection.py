"""Repository for named collections of synced GitHub records."""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import delete, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from github_org_sync.db.models import CollectionRecord, ResourceCollection
from github_org_sync.logging import get_logger

from .base import BaseRepository

logger = get_logger(__name__)


class CollectionRepository(BaseRepository[CollectionRecord]):
    """Repository for collection contents.

    Each collection is replaced wholesale on every resync. Writes commit
    as they go: the delete and every inserted batch are committed
    separately, so a failure part way through leaves the collection empty
    or partially written rather than rolled back to its previous contents.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, CollectionRecord)

    # -------------------------------------------------------------------------
    # Write Methods
    # -------------------------------------------------------------------------

    async def replace_collection(
        self,
        collection: ResourceCollection,
        records: Sequence[dict[str, Any]],
        batch_size: int = 500,
    ) -> int:
        """Replace the entire contents of a collection.

        An empty batch is a no-op: the existing contents are left alone so a
        transient empty fetch does not wipe stored data.

        Args:
            collection: Target collection
            records: Records to store, in order
            batch_size: Maximum records per insert batch

        Returns:
            Number of records written
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")

        if not records:
            logger.info("No data to insert for {}", collection.value)
            return 0

        await self._session.execute(
            delete(CollectionRecord).where(CollectionRecord.collection == collection)
        )
        await self.commit()

        for start in range(0, len(records), batch_size):
            batch = records[start : start + batch_size]
            await self._session.execute(
                insert(CollectionRecord),
                [
                    {
                        "collection": collection,
                        "position": start + offset,
                        "payload": record,
                    }
                    for offset, record in enumerate(batch)
                ],
            )
            await self.commit()
            logger.debug(
                "Inserted {} records into {} ({}/{})",
                len(batch),
                collection.value,
                start + len(batch),
                len(records),
            )

        return len(records)

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    async def get_records(
        self,
        collection: ResourceCollection,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Get a collection's records in their stored order.

        Args:
            collection: Collection to read
            limit: Maximum number of records to return

        Returns:
            List of record payloads
        """
        stmt = (
            select(CollectionRecord.payload)
            .where(CollectionRecord.collection == collection)
            .order_by(CollectionRecord.position)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def count_records(self, collection: ResourceCollection) -> int:
        """Count the records stored in one collection."""
        stmt = (
            select(func.count())
            .select_from(CollectionRecord)
            .where(CollectionRecord.collection == collection)
        )
        result = await self._session.execute(stmt)
        return result.scalar() or 0

    async def list_collections(self) -> dict[ResourceCollection, int]:
        """Get every non-empty collection with its record count.

        Returns:
            Mapping of collection to count, in registry order
        """
        stmt = select(CollectionRecord.collection, func.count()).group_by(
            CollectionRecord.collection
        )
        result = await self._session.execute(stmt)
        counts = {row[0]: row[1] for row in result.all()}
        return {c: counts[c] for c in ResourceCollection if c in counts}
