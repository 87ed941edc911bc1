import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, insert, select, update
from sqlalchemy.engine import Row
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from links.exceptions import DuplicateKeyError, NotFoundError, StoreError
from links.models import links as Link

logger = logging.getLogger(__name__)


class LinkStore:
    """CRUD over the ``links`` table, bound to one session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_original_url(self, original_url: str) -> Optional[Row]:
        statement = (
            select(Link)
            .where(Link.c.original_url == original_url)
            .order_by(Link.c.id)
            .limit(1)
        )
        result = await self._execute(statement)
        return result.first()

    async def find_by_code(self, code: str) -> Optional[Row]:
        statement = select(Link).where(Link.c.code == code)
        result = await self._execute(statement)
        return result.first()

    async def count_by_code(self, code: str) -> int:
        statement = select(func.count()).select_from(Link).where(Link.c.code == code)
        result = await self._execute(statement)
        return result.scalar_one()

    async def insert(self, code: str, original_url: str) -> Row:
        statement = (
            insert(Link)
            .values(
                code=code,
                original_url=original_url,
                visits=0,
                created_at=datetime.now(timezone.utc),
            )
            .returning(Link)
        )
        result = await self._execute(statement)
        link = result.one()
        await self._commit()
        return link

    async def increment_visits(self, code: str) -> None:
        # Relative update so concurrent redirects never overwrite each other
        statement = (
            update(Link)
            .where(Link.c.code == code)
            .values(visits=Link.c.visits + 1)
        )
        result = await self._execute(statement)
        if result.rowcount == 0:
            await self.session.rollback()
            raise NotFoundError(f"No link with code {code!r}")
        await self._commit()

    async def list_recent(self, limit: int) -> list[Row]:
        statement = (
            select(Link)
            .order_by(Link.c.created_at.desc(), Link.c.id.desc())
            .limit(limit)
        )
        result = await self._execute(statement)
        return list(result.all())

    async def _execute(self, statement):
        try:
            return await self.session.execute(statement)
        except IntegrityError as exc:
            await self.session.rollback()
            raise DuplicateKeyError(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error("Query failed: %s", exc)
            raise StoreError(str(exc)) from exc

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            raise DuplicateKeyError(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error("Commit failed: %s", exc)
            raise StoreError(str(exc)) from exc
