"""Name/value access to the settings table.

Every read and write goes through ``SettingKey`` so the read and write paths
cannot drift apart, and values are always bound as parameters.
"""

import logging
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notifier.exceptions import InternalException
from notifier.models.setting import Setting, SettingKey

logger = logging.getLogger(__name__)


class SettingsWriter:
    """Applies ordered updates inside an open settings transaction."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def set(self, key: SettingKey, value: str | None) -> None:
        """Update one row, inserting it if it was never seeded."""
        result = await self.db.execute(
            update(Setting)
            .where(Setting.name == key.value)
            .values(value=value)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.add(Setting(name=key.value, value=value))
            await self.db.flush()


class SettingsStore:
    """Reads and transactional writes over the settings table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_names(self, keys: Iterable[SettingKey]) -> dict[SettingKey, str | None]:
        """Fetch several settings in one query.

        Rows that do not exist are absent from the result; rows stored as
        NULL map to None.
        """
        names = [key.value for key in keys]
        try:
            result = await self.db.execute(
                select(Setting.name, Setting.value).where(Setting.name.in_(names))
            )
            rows = result.all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to read settings {names}: {e}")
            raise InternalException(f"Failed to read settings: {e}") from e

        return {SettingKey(name): value for name, value in rows}

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[SettingsWriter]:
        """Group several updates into one atomic commit.

        Any exception raised inside the block rolls back every update made
        in it. Storage errors are re-raised as InternalException.
        """
        writer = SettingsWriter(self.db)
        try:
            yield writer
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Settings transaction rolled back: {e}")
            raise InternalException(f"Failed to update settings: {e}") from e
        except Exception:
            await self.db.rollback()
            raise
