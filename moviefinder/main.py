from typing import List

from fastapi import FastAPI, HTTPException, Query

from .clients.bookmark_store import BookmarkStore
from .clients.movie_client import (
    get_bookmarked_movies,
    get_home_sections,
    get_movie_detail,
    get_movie_page,
    get_recommended_movies,
    get_similar_movies,
)
from .logger import logger
from .schemas.movies_schemas import (
    BookmarkListResponse,
    BookmarkToggleResponse,
    ErrorResponse,
    HomeSectionsResponse,
    MovieListType,
    SectionNotice,
)
from .schemas.result_schemas import Error, ResultUnion

app = FastAPI()
bookmark_store = BookmarkStore.from_url()


@app.get('/movies/sections', response_model=HomeSectionsResponse)
async def movie_sections(page: int = Query(1, ge=1)):
    notices: List[SectionNotice] = []

    def notify(list_type: MovieListType, error: Error) -> None:
        notices.append(SectionNotice(
            list_type=list_type, error=error.error, message=error.user_message
        ))

    sections = await get_home_sections(bookmark_store, page, on_error=notify)
    return HomeSectionsResponse(sections=sections, notices=notices)


@app.get('/movies/lists/{list_type}', response_model=ResultUnion)
async def movie_list(list_type: MovieListType, page: int = Query(1, ge=1)):
    return await get_movie_page(bookmark_store, list_type, page)


@app.get('/movies/{movie_id}', response_model=ResultUnion)
async def movie_detail(movie_id: int):
    return await get_movie_detail(bookmark_store, movie_id)


@app.get('/movies/{movie_id}/similar', response_model=ResultUnion)
async def similar_movies(movie_id: int, page: int = Query(1, ge=1)):
    return await get_similar_movies(bookmark_store, movie_id, page)


@app.get('/movies/{movie_id}/recommendations', response_model=ResultUnion)
async def recommended_movies(movie_id: int, page: int = Query(1, ge=1)):
    return await get_recommended_movies(bookmark_store, movie_id, page)


@app.get('/bookmarks', response_model=BookmarkListResponse,
         responses={502: {'model': ErrorResponse}})
async def bookmarks():
    try:
        ids = await bookmark_store.ids()
    except Exception as e:
        logger.error(f"bookmark store error: {e}")
        raise HTTPException(
            status_code=502, detail=f"Bookmark store error: {str(e)}")
    movies = await get_bookmarked_movies(bookmark_store, ids)
    return BookmarkListResponse(ids=sorted(ids), movies=movies)


@app.post('/bookmarks/{movie_id}/toggle', response_model=BookmarkToggleResponse,
          responses={502: {'model': ErrorResponse}})
async def toggle_bookmark(movie_id: int):
    try:
        bookmarked = await bookmark_store.toggle(movie_id)
    except Exception as e:
        logger.error(f"bookmark store error: {e}")
        raise HTTPException(
            status_code=502, detail=f"Bookmark store error: {str(e)}")
    return BookmarkToggleResponse(movie_id=movie_id, bookmarked=bookmarked)
