from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from .result_schemas import ErrorType, ResultState


class MovieListType(str, Enum):
    NOW_PLAYING = 'now_playing'
    POPULAR = 'popular'
    TOP_RATED = 'top_rated'
    UPCOMING = 'upcoming'


class MovieStatus(str, Enum):
    RELEASED = 'Released'
    COMING_SOON = 'ComingSoon'

    @classmethod
    def from_original_name(cls, original_name: Optional[str]) -> 'MovieStatus':
        name = (original_name or '').lower()
        return next(
            (s for s in cls if s.value.lower() == name), cls.RELEASED
        )


class Movie(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    poster_path: str = ''
    poster_url: Optional[str] = None
    vote_average: float = 0.0
    overview: Optional[str] = None
    bookmarked: bool = False


class MovieListPage(BaseModel):
    model_config = ConfigDict(frozen=True)

    page: int
    total_pages: int
    total_results: int
    next_page: Optional[int]
    movies: List[Movie]


class MovieDetail(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    overview: Optional[str] = None
    tagline: Optional[str] = None
    poster_path: str = ''
    poster_url: Optional[str] = None
    backdrop_path: str = ''
    vote_average: float = 0.0
    vote_count: int = 0
    release_date: Optional[str] = None
    runtime: Optional[int] = None
    genres: List[str] = []
    status: MovieStatus = MovieStatus.RELEASED
    bookmarked: bool = False


class CastMember(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    character: str = ''
    profile_path: str = ''


class CrewMember(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    job: str
    name: str
    profile_path: str = ''


class MovieCredits(BaseModel):
    model_config = ConfigDict(frozen=True)

    director: Optional[CrewMember]
    cast: List[CastMember]


class MovieDetailState(BaseModel):
    model_config = ConfigDict(frozen=True)

    detail: MovieDetail
    credits: MovieCredits


class SectionNotice(BaseModel):
    list_type: MovieListType
    error: ErrorType
    message: str


class HomeSectionsResponse(BaseModel):
    sections: Dict[MovieListType, ResultState]
    notices: List[SectionNotice]


class BookmarkToggleResponse(BaseModel):
    movie_id: int
    bookmarked: bool


class BookmarkListResponse(BaseModel):
    ids: List[int]
    movies: ResultState


class ErrorResponse(BaseModel):
    code: int
    message: str
