import asyncio
from typing import Set, TypeVar

import redis.asyncio as redis

from ..config import settings
from ..logger import logger
from ..schemas.movies_schemas import Movie, MovieDetail

M = TypeVar('M', Movie, MovieDetail)

BOOKMARKS_KEY = 'bookmarks'

# Read-modify-write runs inside Redis so toggles from several workers
# sharing the set cannot interleave.
TOGGLE_SCRIPT = """
if redis.call('SISMEMBER', KEYS[1], ARGV[1]) == 1 then
    redis.call('SREM', KEYS[1], ARGV[1])
    return 0
end
redis.call('SADD', KEYS[1], ARGV[1])
return 1
"""


class BookmarkStore:
    """
    The set of bookmarked movie ids, kept as a Redis set.

    Reads go straight to Redis. A toggle is a single server-side script, so
    racing toggles are applied one after the other across processes; within
    one process the lock keeps them in call order.
    """

    def __init__(self, client: redis.Redis, key: str = BOOKMARKS_KEY):
        self._redis = client
        self._key = key
        self._lock = asyncio.Lock()

    @classmethod
    def from_url(cls, url: str = settings.REDIS_URL) -> 'BookmarkStore':
        return cls(redis.from_url(url, encoding="utf-8", decode_responses=True))

    async def ids(self) -> Set[int]:
        members = await self._redis.smembers(self._key)
        return {int(m) for m in members}

    async def contains(self, movie_id: int) -> bool:
        return bool(await self._redis.sismember(self._key, str(movie_id)))

    async def add(self, movie_id: int) -> None:
        async with self._lock:
            await self._redis.sadd(self._key, str(movie_id))

    async def remove(self, movie_id: int) -> None:
        async with self._lock:
            await self._redis.srem(self._key, str(movie_id))

    async def toggle(self, movie_id: int) -> bool:
        """
        Invert the membership of a movie in the bookmark set.

        :param movie_id: TMDB ID of the movie.
        :return: True if the movie is bookmarked after the toggle.
        """
        async with self._lock:
            bookmarked = bool(await self._redis.eval(
                TOGGLE_SCRIPT, 1, self._key, str(movie_id)))
        logger.info(f"movie {movie_id} bookmarked={bookmarked}")
        return bookmarked

    async def toggle_bookmark(self, movie: M) -> M:
        """
        Toggle a movie and return a copy carrying the new flag.
        """
        bookmarked = await self.toggle(movie.id)
        return movie.model_copy(update={'bookmarked': bookmarked})
