import asyncio
from typing import AbstractSet, AsyncIterator, Callable, Dict, List, Optional, Tuple
import httpx
from ..config import settings
from ..logger import logger
from ..schemas.movies_schemas import (
    MovieDetail,
    MovieDetailState,
    MovieListPage,
    MovieListType,
)
from ..schemas.result_schemas import Error, Loading, ResultState
from ..utils.bookmarks import apply_bookmark, apply_bookmarks_to_page
from ..utils.result import run_result
from ..utils.utils_movies_client import (
    get_movies,
    get_movie_detail as fetch_movie_detail,
    get_movie_credits,
    get_similar_movies as fetch_similar_movies,
    get_recommendation_movies,
    map_to_credits,
    map_to_detail,
    map_to_page,
)
from .bookmark_store import BookmarkStore

SectionStates = Dict[MovieListType, ResultState]
ErrorCallback = Callable[[MovieListType, Error], None]


def _client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT)


async def load_movie_page(
    client: httpx.AsyncClient,
    store: BookmarkStore,
    list_type: MovieListType,
    page: int = 1
) -> MovieListPage:
    """
    Fetch one page of a movie list and overlay the bookmark set.
    The set is read after the fetch so the flags are current at read time.

    :param client: HTTP client for making API requests
    :param store: Bookmark set to overlay
    :param list_type: Which list to load
    :param page: 1-based page number
    :return: MovieListPage with bookmark flags applied
    """
    data = await get_movies(client, list_type, page)
    return apply_bookmarks_to_page(map_to_page(data), await store.ids())


async def _load_section(
    client: httpx.AsyncClient,
    store: BookmarkStore,
    list_type: MovieListType,
    page: int
) -> Tuple[MovieListType, ResultState]:
    state = await run_result(
        lambda: load_movie_page(client, store, list_type, page)
    )
    return list_type, state


def _notify(
    list_type: MovieListType,
    state: ResultState,
    on_error: Optional[ErrorCallback]
) -> None:
    if not isinstance(state, Error):
        return
    logger.warning(f"section {list_type.value} failed: {state.error.value}")
    if on_error:
        on_error(list_type, state)


async def load_sections(
    client: httpx.AsyncClient,
    store: BookmarkStore,
    page: int = 1,
    on_error: Optional[ErrorCallback] = None
) -> SectionStates:
    """
    Load every movie list section concurrently
    Each section succeeds or fails on its own; a failing section becomes an
    Error entry and is reported through on_error, the others are untouched

    :param client: HTTP client for making API requests
    :param store: Bookmark set to overlay
    :param page: Page to load for every section
    :param on_error: Called once per failing section
    :return: Terminal state per section, in MovieListType order
    """
    loaded = dict(await asyncio.gather(*[
        _load_section(client, store, list_type, page)
        for list_type in MovieListType
    ]))
    for list_type in MovieListType:
        _notify(list_type, loaded[list_type], on_error)
    return {list_type: loaded[list_type] for list_type in MovieListType}


async def stream_sections(
    client: httpx.AsyncClient,
    store: BookmarkStore,
    page: int = 1,
    on_error: Optional[ErrorCallback] = None
) -> AsyncIterator[SectionStates]:
    """
    Same as load_sections(), observed as successive snapshots
    The first snapshot has every section Loading, then one snapshot follows
    each section completion. Closing the iterator cancels the fetches that
    are still in flight.

    :param client: HTTP client for making API requests
    :param store: Bookmark set to overlay
    :param page: Page to load for every section
    :param on_error: Called once per failing section
    :return: Async iterator of section state maps in MovieListType order
    """
    states: SectionStates = {list_type: Loading() for list_type in MovieListType}
    yield dict(states)
    tasks = [
        asyncio.ensure_future(_load_section(client, store, list_type, page))
        for list_type in MovieListType
    ]
    try:
        for done in asyncio.as_completed(tasks):
            list_type, state = await done
            states[list_type] = state
            _notify(list_type, state, on_error)
            yield dict(states)
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)


async def load_movie_detail(
    client: httpx.AsyncClient,
    store: BookmarkStore,
    movie_id: int
) -> ResultState:
    """
    Load the detail screen of a movie: its details and credits, fetched
    concurrently and reported as one result.

    :param client: HTTP client for making API requests
    :param store: Bookmark set to overlay
    :param movie_id: TMDB ID of the movie
    :return: Success(MovieDetailState) or Error
    """
    async def fetch() -> MovieDetailState:
        detail, credits = await asyncio.gather(
            fetch_movie_detail(client, movie_id),
            get_movie_credits(client, movie_id),
        )
        return MovieDetailState(
            detail=apply_bookmark(map_to_detail(detail), await store.ids()),
            credits=map_to_credits(credits),
        )

    return await run_result(fetch)


async def load_similar_movies(
    client: httpx.AsyncClient,
    store: BookmarkStore,
    movie_id: int,
    page: int = 1
) -> ResultState:
    async def fetch() -> MovieListPage:
        data = await fetch_similar_movies(client, movie_id, page)
        return apply_bookmarks_to_page(map_to_page(data), await store.ids())

    return await run_result(fetch)


async def load_recommended_movies(
    client: httpx.AsyncClient,
    store: BookmarkStore,
    movie_id: int,
    page: int = 1
) -> ResultState:
    async def fetch() -> MovieListPage:
        data = await get_recommendation_movies(client, movie_id, page)
        return apply_bookmarks_to_page(map_to_page(data), await store.ids())

    return await run_result(fetch)


async def load_bookmarked_movies(
    client: httpx.AsyncClient,
    store: BookmarkStore,
    ids: Optional[AbstractSet[int]] = None
) -> ResultState:
    """
    Load the details of every bookmarked movie, in ascending id order.
    Ids TMDB answers with 404 for are skipped; any other failure makes the
    whole result an Error.

    :param client: HTTP client for making API requests
    :param store: Bookmark set to list
    :param ids: Bookmarked ids already read from the store, if any
    :return: Success(List[MovieDetail]) or Error
    """
    async def fetch() -> List[MovieDetail]:
        movie_ids = sorted(ids if ids is not None else await store.ids())
        details = await asyncio.gather(*[
            fetch_movie_detail(client, movie_id) for movie_id in movie_ids
        ], return_exceptions=True)
        movies = []
        for movie_id, detail in zip(movie_ids, details):
            if _is_not_found(detail):
                logger.warning(f"bookmarked movie {movie_id} not found, skipped")
                continue
            if isinstance(detail, BaseException):
                raise detail
            movies.append(
                map_to_detail(detail).model_copy(update={'bookmarked': True}))
        return movies

    return await run_result(fetch)


def _is_not_found(detail) -> bool:
    return (
        isinstance(detail, httpx.HTTPStatusError)
        and detail.response is not None
        and detail.response.status_code == 404
    )


async def get_home_sections(
    store: BookmarkStore,
    page: int = 1,
    on_error: Optional[ErrorCallback] = None
) -> SectionStates:
    async with _client() as client:
        return await load_sections(client, store, page, on_error)


async def get_movie_page(
    store: BookmarkStore,
    list_type: MovieListType,
    page: int = 1
) -> ResultState:
    async with _client() as client:
        return await run_result(
            lambda: load_movie_page(client, store, list_type, page)
        )


async def get_movie_detail(store: BookmarkStore, movie_id: int) -> ResultState:
    async with _client() as client:
        return await load_movie_detail(client, store, movie_id)


async def get_similar_movies(
    store: BookmarkStore,
    movie_id: int,
    page: int = 1
) -> ResultState:
    async with _client() as client:
        return await load_similar_movies(client, store, movie_id, page)


async def get_recommended_movies(
    store: BookmarkStore,
    movie_id: int,
    page: int = 1
) -> ResultState:
    async with _client() as client:
        return await load_recommended_movies(client, store, movie_id, page)


async def get_bookmarked_movies(
    store: BookmarkStore,
    ids: Optional[AbstractSet[int]] = None
) -> ResultState:
    async with _client() as client:
        return await load_bookmarked_movies(client, store, ids)
