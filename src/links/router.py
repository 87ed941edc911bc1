from fastapi import APIRouter, BackgroundTasks, Depends, Response, status
from fastapi.responses import PlainTextResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from config import BASE_URL, CODE_LENGTH, CODE_MAX_ATTEMPTS, LIST_LIMIT
from database import async_session_maker, get_async_session
from links.schemas import ErrorResponse, LinkRead, ShortenRequest, ShortenResponse
from links.service import LinkService, record_visit
from links.store import LinkStore


router = APIRouter(tags=["links"])


def get_link_store(session: AsyncSession = Depends(get_async_session)) -> LinkStore:
    return LinkStore(session)


def get_link_service(store: LinkStore = Depends(get_link_store)) -> LinkService:
    return LinkService(
        store,
        base_url=BASE_URL,
        code_length=CODE_LENGTH,
        max_attempts=CODE_MAX_ATTEMPTS,
    )


@router.get("/health", response_class=PlainTextResponse)
async def health():
    return "ok"


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_short_link(
    data: ShortenRequest,
    response: Response,
    service: LinkService = Depends(get_link_service),
):
    """
    Create a short link for the given URL.
    Answers 200 with the existing code if the URL was shortened before.
    """
    link, created = await service.shorten(data.url)
    if not created:
        response.status_code = status.HTTP_200_OK
    return ShortenResponse(code=link.code, short_url=service.short_url(link.code))


@router.get("/list", response_model=list[LinkRead])
async def list_links(service: LinkService = Depends(get_link_service)):
    """
    Most recently created links, newest first.
    """
    return await service.list_recent(LIST_LIMIT)


@router.get(
    "/stats/{code}",
    response_model=LinkRead,
    responses={404: {"model": ErrorResponse}},
)
async def get_link_stats(code: str, service: LinkService = Depends(get_link_service)):
    return await service.get_link(code)


@router.get(
    "/{code}",
    status_code=status.HTTP_302_FOUND,
    responses={404: {"model": ErrorResponse}},
)
async def redirect_to_url(
    code: str,
    background_tasks: BackgroundTasks,
    service: LinkService = Depends(get_link_service),
):
    """
    Redirect to the original URL. The visit is counted after the response
    is sent, and a failed count never turns into a failed redirect.
    """
    link = await service.get_link(code)
    background_tasks.add_task(record_visit, async_session_maker, code)
    return RedirectResponse(url=link.original_url, status_code=status.HTTP_302_FOUND)
