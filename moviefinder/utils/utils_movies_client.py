import json
import httpx
import redis.asyncio as redis
from typing import Any, Dict, Optional
from ..config import settings
from ..logger import logger
from ..schemas.movies_schemas import (
    CastMember,
    CrewMember,
    Movie,
    MovieCredits,
    MovieDetail,
    MovieListPage,
    MovieListType,
    MovieStatus,
)

# Redis client
_redis = redis.from_url(
    settings.REDIS_URL, encoding="utf-8", decode_responses=True)
BASE_URL = settings.TMDB_BASE_URL
IMAGE_BASE_URL = settings.TMDB_IMAGE_BASE_URL

CACHE_TTL_LIST = 600       # 10 minutes
CACHE_TTL_DETAIL = 3600    # 1 hour

CAST_LIMIT = 5
DIRECTOR_JOB = 'Director'


def _query(**extra: Any) -> Dict[str, Any]:
    """
    Build the query parameters every TMDB request carries.
    """
    query = {'api_key': settings.TMDB_API_KEY,
             'language': settings.TMDB_LANGUAGE}
    query.update(extra)
    return query


async def _get_json(
    client: httpx.AsyncClient,
    path: str,
    ttl: int,
    **params: Any
) -> dict:
    """
    GET a TMDB resource, serving it from the Redis cache when present.
    Only successful responses are cached.

    :param client: HTTP client for making API requests.
    :param path: Path below BASE_URL, starting with a slash.
    :param ttl: Cache lifetime in seconds.
    :param params: Extra query parameters (page, ...).
    :return: Decoded JSON body.
    """
    suffix = ':'.join(f"{k}={v}" for k, v in sorted(params.items()))
    key = f"tmdb:{settings.TMDB_LANGUAGE}:{path}:{suffix}"
    cached = await _redis.get(key)
    if cached:
        logger.debug(f"cache hit {key}")
        return json.loads(cached)

    resp = await client.get(f"{BASE_URL}{path}", params=_query(**params))
    resp.raise_for_status()
    data = resp.json()
    await _redis.set(key, json.dumps(data), ex=ttl)
    return data


async def get_movies(
    client: httpx.AsyncClient,
    list_type: MovieListType,
    page: int = 1
) -> dict:
    """
    Fetch one page of a movie list (now playing, popular, top rated, upcoming).

    :param client: HTTP client for making API requests.
    :param list_type: Which list to fetch.
    :param page: 1-based page number.
    :return: Raw TMDB list response.
    """
    return await _get_json(
        client, f"/movie/{list_type.value}", CACHE_TTL_LIST, page=page)


async def get_movie_detail(
    client: httpx.AsyncClient,
    movie_id: int
) -> dict:
    """
    Fetch the details of a single movie.

    :param client: HTTP client for making API requests.
    :param movie_id: TMDB ID of the movie.
    :return: Raw TMDB movie detail response.
    """
    return await _get_json(client, f"/movie/{movie_id}", CACHE_TTL_DETAIL)


async def get_movie_credits(
    client: httpx.AsyncClient,
    movie_id: int
) -> dict:
    """
    Fetch cast and crew of a movie.

    :param client: HTTP client for making API requests.
    :param movie_id: TMDB ID of the movie.
    :return: Raw TMDB credits response.
    """
    return await _get_json(
        client, f"/movie/{movie_id}/credits", CACHE_TTL_DETAIL)


async def get_similar_movies(
    client: httpx.AsyncClient,
    movie_id: int,
    page: int = 1
) -> dict:
    """
    Fetch movies similar to the given one.

    :param client: HTTP client for making API requests.
    :param movie_id: TMDB ID of the movie.
    :param page: 1-based page number.
    :return: Raw TMDB list response.
    """
    return await _get_json(
        client, f"/movie/{movie_id}/similar", CACHE_TTL_LIST, page=page)


async def get_recommendation_movies(
    client: httpx.AsyncClient,
    movie_id: int,
    page: int = 1
) -> dict:
    """
    Fetch TMDB's recommendations for the given movie.

    :param client: HTTP client for making API requests.
    :param movie_id: TMDB ID of the movie.
    :param page: 1-based page number.
    :return: Raw TMDB list response.
    """
    return await _get_json(
        client, f"/movie/{movie_id}/recommendations", CACHE_TTL_LIST,
        page=page)


def poster_url(path: Optional[str], size: str = 'w500') -> Optional[str]:
    """
    Build the full image URL for a TMDB poster file name.

    :param path: poster_path as returned by TMDB (e.g. "/abc.jpg").
    :param size: TMDB image size bucket.
    :return: Absolute URL, or None when the movie has no poster.
    """
    if not path:
        return None
    return f"{IMAGE_BASE_URL}{size}{path}"


def map_to_movie(item: dict) -> Movie:
    """
    Map a TMDB list item to a Movie. The bookmark flag always starts False.
    """
    path = item.get('poster_path') or ''
    return Movie(
        id=item['id'],
        title=item.get('title') or '',
        poster_path=path,
        poster_url=poster_url(path),
        vote_average=item.get('vote_average') or 0.0,
        overview=item.get('overview') or None,
    )


def map_to_page(data: dict) -> MovieListPage:
    """
    Map a TMDB list response to a MovieListPage, keeping server order.

    :param data: Raw TMDB list response.
    :return: MovieListPage with next_page set unless this is the last page.
    """
    page = data.get('page') or 1
    total_pages = data.get('total_pages') or page
    return MovieListPage(
        page=page,
        total_pages=total_pages,
        total_results=data.get('total_results') or 0,
        next_page=page + 1 if page < total_pages else None,
        movies=[map_to_movie(item) for item in data.get('results', [])],
    )


def map_to_detail(data: dict) -> MovieDetail:
    path = data.get('poster_path') or ''
    return MovieDetail(
        id=data['id'],
        title=data.get('title') or '',
        overview=data.get('overview') or None,
        tagline=data.get('tagline') or None,
        poster_path=path,
        poster_url=poster_url(path),
        backdrop_path=data.get('backdrop_path') or '',
        vote_average=data.get('vote_average') or 0.0,
        vote_count=data.get('vote_count') or 0,
        release_date=data.get('release_date') or None,
        runtime=data.get('runtime'),
        genres=[g['name'] for g in data.get('genres', []) if g.get('name')],
        status=MovieStatus.from_original_name(data.get('status')),
    )


def map_to_credits(data: dict) -> MovieCredits:
    """
    Map a TMDB credits response: the first crew member credited as
    Director, and the top billed cast.

    :param data: Raw TMDB credits response.
    :return: MovieCredits object.
    """
    director = next(
        (c for c in data.get('crew', []) if c.get('job') == DIRECTOR_JOB),
        None
    )
    return MovieCredits(
        director=CrewMember(
            id=director['id'],
            job=director['job'],
            name=director.get('name') or '',
            profile_path=director.get('profile_path') or '',
        ) if director else None,
        cast=[
            CastMember(
                id=c['id'],
                name=c.get('name') or '',
                character=c.get('character') or '',
                profile_path=c.get('profile_path') or '',
            )
            for c in data.get('cast', [])[:CAST_LIMIT]
        ],
    )
