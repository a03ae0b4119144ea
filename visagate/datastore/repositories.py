"""
Repository layer - cache record persistence
"""

import json

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from visagate.datastore.models import VisaCacheDB
from visagate.services.cache import CacheRecord
from visagate.services.errors import CacheError

ELIGIBILITY_COLLECTION = "visaEligibilityCache"
OPTIONS_COLLECTION = "visaCache"


class VisaCacheRepository:
    """Read and replace cached lookups by key"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, collection: str, cache_key: str) -> CacheRecord | None:
        """Load a record, or None if nothing was ever stored under the key"""
        try:
            result = await self.session.execute(
                select(VisaCacheDB).where(
                    VisaCacheDB.collection == collection,
                    VisaCacheDB.cache_key == cache_key,
                )
            )
            row = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise CacheError(f"Cache read failed: {e}") from e

        if row is None:
            return None

        try:
            payload = json.loads(row.data_json)
        except json.JSONDecodeError as e:
            raise CacheError(f"Cache record {cache_key} is corrupt: {e}") from e

        return CacheRecord(key=row.cache_key, payload=payload, stored_at=row.timestamp)

    async def replace(self, collection: str, record: CacheRecord) -> None:
        """Store a record, overwriting whatever was under the key"""
        row = VisaCacheDB(
            collection=collection,
            cache_key=record.key,
            data_json=json.dumps(record.payload, ensure_ascii=False),
            timestamp=record.stored_at,
            hash=record.hash,
        )
        try:
            await self.session.merge(row)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise CacheError(f"Cache write failed: {e}") from e

        logger.debug(f"Stored cache record {collection}/{record.key[:12]}...")
