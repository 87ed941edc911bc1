import logging
from typing import Callable

from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from links.codes import RESERVED_CODES, generate_random_code
from links.exceptions import (
    DuplicateKeyError,
    GenerationExhaustedError,
    LinkError,
    NotFoundError,
)
from links.store import LinkStore
from links.validators import validate_url

logger = logging.getLogger(__name__)

MAX_LIST_LIMIT = 100


class LinkService:
    """Shortening, lookup and listing on top of a :class:`LinkStore`."""

    def __init__(
        self,
        store: LinkStore,
        base_url: str,
        code_length: int = 6,
        max_attempts: int = 8,
        generate_code: Callable[[int], str] = generate_random_code,
    ):
        self.store = store
        self.base_url = base_url.rstrip("/")
        self.code_length = code_length
        self.max_attempts = max_attempts
        self.generate_code = generate_code

    async def resolve_unique_code(self) -> str:
        """
        Return a freshly generated code that is not stored yet.
        Raises GenerationExhaustedError once max_attempts candidates were taken.
        """
        for attempt in range(1, self.max_attempts + 1):
            candidate = self.generate_code(self.code_length)
            if candidate in RESERVED_CODES:
                continue
            if await self.store.count_by_code(candidate) == 0:
                if attempt > 1:
                    logger.debug("Found free code %s after %d attempts", candidate, attempt)
                return candidate
        raise GenerationExhaustedError(
            f"No free code of length {self.code_length} after {self.max_attempts} attempts"
        )

    async def shorten(self, url: str) -> tuple[Row, bool]:
        """
        Map ``url`` to a short code. Returns the link and whether it was
        created by this call; a URL that is already stored keeps its code.
        """
        url = validate_url(url)

        existing = await self.store.find_by_original_url(url)
        if existing is not None:
            return existing, False

        for attempt in range(1, self.max_attempts + 1):
            code = await self.resolve_unique_code()
            try:
                link = await self.store.insert(code, url)
            except DuplicateKeyError:
                # Another writer took the code between the check and the insert
                logger.warning(
                    "Code %s collided on insert (attempt %d/%d)",
                    code,
                    attempt,
                    self.max_attempts,
                )
                continue
            logger.info("Created short link %s -> %s", link.code, link.original_url)
            return link, True

        raise GenerationExhaustedError(
            f"Every inserted code collided after {self.max_attempts} attempts"
        )

    def short_url(self, code: str) -> str:
        return f"{self.base_url}/{code}"

    async def get_link(self, code: str) -> Row:
        link = await self.store.find_by_code(code)
        if link is None:
            raise NotFoundError(f"No link with code {code!r}")
        return link

    async def list_recent(self, limit: int = MAX_LIST_LIMIT) -> list[Row]:
        return await self.store.list_recent(max(0, min(limit, MAX_LIST_LIMIT)))


async def record_visit(session_maker: async_sessionmaker[AsyncSession], code: str) -> None:
    """Count one visit of ``code``. Failures are logged, never raised."""
    async with session_maker() as session:
        try:
            await LinkStore(session).increment_visits(code)
        except LinkError:
            logger.exception("Could not record visit for %s", code)
