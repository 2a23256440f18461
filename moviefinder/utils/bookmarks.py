from typing import AbstractSet, List, TypeVar

from ..schemas.movies_schemas import (
    Movie,
    MovieDetail,
    MovieDetailState,
    MovieListPage,
)
from ..schemas.result_schemas import ResultState, Success

M = TypeVar('M', Movie, MovieDetail)


def apply_bookmark(movie: M, bookmarked_ids: AbstractSet[int]) -> M:
    """
    Return a copy of the movie flagged with its bookmark set membership.
    The original record is never modified.
    """
    bookmarked = movie.id in bookmarked_ids
    if movie.bookmarked == bookmarked:
        return movie
    return movie.model_copy(update={'bookmarked': bookmarked})


def apply_bookmarks(
    movies: List[Movie],
    bookmarked_ids: AbstractSet[int]
) -> List[Movie]:
    return [apply_bookmark(m, bookmarked_ids) for m in movies]


def apply_bookmarks_to_page(
    page: MovieListPage,
    bookmarked_ids: AbstractSet[int]
) -> MovieListPage:
    return page.model_copy(
        update={'movies': apply_bookmarks(page.movies, bookmarked_ids)}
    )


def apply_bookmarks_to_state(
    state: ResultState,
    bookmarked_ids: AbstractSet[int]
) -> ResultState:
    """
    Re-run the overlay on an already loaded result state.

    Loading and Error states pass through untouched; a Success carrying a
    page, a movie, a detail or a list of movies gets a fresh overlay.

    :param state: A result state produced by one of the loaders.
    :param bookmarked_ids: Current content of the bookmark set.
    :return: The state with bookmark flags matching the set.
    """
    if not isinstance(state, Success):
        return state
    data = state.data
    if isinstance(data, MovieListPage):
        data = apply_bookmarks_to_page(data, bookmarked_ids)
    elif isinstance(data, (Movie, MovieDetail)):
        data = apply_bookmark(data, bookmarked_ids)
    elif isinstance(data, MovieDetailState):
        data = data.model_copy(
            update={'detail': apply_bookmark(data.detail, bookmarked_ids)}
        )
    elif isinstance(data, list):
        data = [
            apply_bookmark(m, bookmarked_ids)
            if isinstance(m, (Movie, MovieDetail)) else m
            for m in data
        ]
    return Success(data=data)
