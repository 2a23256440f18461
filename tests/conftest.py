import pytest

from moviefinder.clients.bookmark_store import TOGGLE_SCRIPT, BookmarkStore


class FakeRedis:
    """In-memory stand-in for the subset of redis.asyncio.Redis we use."""

    def __init__(self):
        self.values = {}
        self.sets = {}
        self.ttls = {}

    async def get(self, key):
        return self.values.get(key)

    async def set(self, key, value, ex=None):
        self.values[key] = value
        self.ttls[key] = ex

    async def smembers(self, key):
        return set(self.sets.get(key, set()))

    async def sismember(self, key, member):
        return int(member in self.sets.get(key, set()))

    async def sadd(self, key, *members):
        s = self.sets.setdefault(key, set())
        added = len(set(members) - s)
        s.update(members)
        return added

    async def srem(self, key, *members):
        s = self.sets.setdefault(key, set())
        removed = len(set(members) & s)
        s.difference_update(members)
        return removed

    async def eval(self, script, numkeys, *keys_and_args):
        # only the toggle script runs server-side; applied in one step
        assert script == TOGGLE_SCRIPT
        key, member = keys_and_args[:numkeys][0], keys_and_args[numkeys]
        s = self.sets.setdefault(key, set())
        if member in s:
            s.discard(member)
            return 0
        s.add(member)
        return 1


class FakeResp:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        pass

    def json(self):
        return self.payload


class DummyClient:
    """Records requested URLs and answers from a url -> payload dict."""

    def __init__(self, responses=None):
        self.responses = responses or {}
        self.calls = []

    async def get(self, url, params=None):
        self.calls.append((url, params))
        return FakeResp(self.responses.get(url, {}))


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def store(fake_redis):
    return BookmarkStore(fake_redis)


def list_payload(*movies, page=1, total_pages=1):
    return {
        "page": page,
        "total_pages": total_pages,
        "total_results": len(movies),
        "results": [
            {"id": mid, "title": title, "poster_path": f"/{mid}.jpg",
             "vote_average": 7.5, "overview": f"About {title}"}
            for mid, title in movies
        ],
    }
