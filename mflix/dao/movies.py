"""
Movies DAO: search, pagination, faceted search and per-movie lookups.
"""
import logging
from typing import Any, Dict, List, NamedTuple, Optional, Tuple, Union

from pymongo import DESCENDING
from pymongo.database import Database
from pymongo.errors import PyMongoError

from mflix.dao.base import BaseDAO, DAOResponse
from mflix.dao.errors import InvalidIdError

logger = logging.getLogger(__name__)

DEFAULT_SORT = [('tomatoes.viewer.numReviews', DESCENDING)]
DEFAULT_MOVIES_PER_PAGE = 20

RUNTIME_BOUNDARIES = [0, 60, 90, 120, 180]
RATING_BOUNDARIES = [0, 50, 70, 90, 100]

FACETED_SEARCH_TOO_LARGE = 'Results too large, be more restrictive in filter'
FACETED_SEARCH_NO_FILTER = 'Must specify a filter to search by.'
INVALID_PAGE = 'Page must be >= 0 and movies per page must be > 0'


class QueryParams(NamedTuple):
    """A parsed query, projection and sort bundle."""
    query: Dict[str, Any]
    project: Dict[str, Any]
    sort: List[Tuple[str, Any]]


def _as_list(value: Union[str, List[str]]) -> List[str]:
    """Accept either a list or a ", "-joined string of values."""
    if isinstance(value, (list, tuple)):
        return list(value)
    return value.split(', ')


def _is_valid_page(page: int, movies_per_page: int) -> bool:
    """Pages start at 0; page sizes must be positive since limit(0) means no limit."""
    for value in (page, movies_per_page):
        if isinstance(value, bool) or not isinstance(value, int):
            return False
    return page >= 0 and movies_per_page > 0


class MoviesDAO(BaseDAO):
    """
    Query façade over the ``movies`` collection.

    Movies are never written through this class, only read and aggregated.
    """

    collection_name = 'movies'

    def __init__(self, db: Database):
        super().__init__(db)

    # --- Query builders ---

    @staticmethod
    def text_search_query(text: str) -> QueryParams:
        """
        Build the query for movies matching text in their indexed fields.

        Results are projected and sorted by the text score.
        """
        meta_score = {'$meta': 'textScore'}
        return QueryParams(
            query={'$text': {'$search': text}},
            project={'score': meta_score},
            sort=[('score', meta_score)]
        )

    @staticmethod
    def cast_search_query(cast: Union[str, List[str]]) -> QueryParams:
        """Build the query for movies including one or more cast members."""
        return QueryParams(
            query={'cast': {'$in': _as_list(cast)}},
            project={},
            sort=DEFAULT_SORT
        )

    @staticmethod
    def genre_search_query(genre: Union[str, List[str]]) -> QueryParams:
        """Build the query for movies matching one or more genres."""
        return QueryParams(
            query={'genres': {'$in': _as_list(genre)}},
            project={},
            sort=DEFAULT_SORT
        )

    def build_query_params(self, filters: Optional[Dict[str, Any]]) -> QueryParams:
        """Pick the search kind from the first of ``text``, ``cast``, ``genre`` present."""
        if filters:
            if 'text' in filters:
                return self.text_search_query(filters['text'])
            if 'cast' in filters:
                return self.cast_search_query(filters['cast'])
            if 'genre' in filters:
                return self.genre_search_query(filters['genre'])
        return QueryParams(query={}, project={}, sort=DEFAULT_SORT)

    # --- Reads ---

    def get_movies(
        self,
        filters: Optional[Dict[str, Any]] = None,
        page: int = 0,
        movies_per_page: int = DEFAULT_MOVIES_PER_PAGE
    ) -> Tuple[List[Dict], int]:
        """
        Get one page of movies, optionally filtered by text, cast or genre.

        Args:
            filters: Mapping with one of ``text``, ``cast`` or ``genre``
            page: Zero-based page number
            movies_per_page: Page size

        Returns:
            ``(movies, total_num_movies)``. The total is only counted for
            page 0 and is 0 for every later page.
        """
        if not _is_valid_page(page, movies_per_page):
            logger.error(f"Invalid page {page!r} or page size {movies_per_page!r}")
            return [], 0

        query, project, sort = self.build_query_params(filters)

        try:
            cursor = self.collection.find(query, projection=project or None).sort(sort)
            movies = list(cursor.skip(page * movies_per_page).limit(movies_per_page))
            total_num_movies = self.collection.count_documents(query) if page == 0 else 0
        except PyMongoError as e:
            logger.error(f"Unable to issue find command or count documents: {e}")
            return [], 0

        return movies, total_num_movies

    def get_movies_by_country(self, countries: Union[str, List[str]]) -> List[Dict]:
        """Get ``_id`` and ``title`` of movies from any of the given countries."""
        try:
            return list(self.collection.find(
                {'countries': {'$in': _as_list(countries)}},
                {'title': 1}
            ))
        except PyMongoError as e:
            logger.error(f"Unable to issue find command: {e}")
            return []

    def get_movie_by_id(self, movie_id: str) -> Union[Dict, DAOResponse, None]:
        """
        Get a movie with its comments joined in, newest comment first.

        Returns:
            The movie document, ``None`` for a malformed or unknown id, or an
            error response if the database call fails
        """
        try:
            object_id = self.to_object_id(movie_id)
        except InvalidIdError as e:
            logger.debug(f"get_movie_by_id: {e}")
            return None

        pipeline = [
            {
                '$match': {'_id': object_id}
            },
            {
                '$lookup': {
                    'from': 'comments',
                    'let': {'id': '$_id'},
                    'pipeline': [
                        {
                            '$match': {
                                '$expr': {'$eq': ['$movie_id', '$$id']}
                            }
                        },
                        {
                            '$sort': {'date': -1}
                        }
                    ],
                    'as': 'comments'
                }
            }
        ]

        try:
            return next(self.collection.aggregate(pipeline), None)
        except PyMongoError as e:
            logger.error(f"Something went wrong in get_movie_by_id: {e}")
            return self.error_response(e)

    # --- Aggregations ---

    def faceted_search(
        self,
        filters: Optional[Dict[str, Any]] = None,
        page: int = 0,
        movies_per_page: int = DEFAULT_MOVIES_PER_PAGE
    ) -> DAOResponse:
        """
        Search movies and bucket the matches by runtime and metacritic rating.

        Args:
            filters: Non-empty match document, e.g. ``{'cast': {'$in': [...]}}``
            page: Zero-based page number
            movies_per_page: Page size

        Returns:
            A single document with ``runtime``, ``rating``, ``movies`` and
            ``count``, or an error response
        """
        if not filters:
            return self.error_response(FACETED_SEARCH_NO_FILTER)
        if not _is_valid_page(page, movies_per_page):
            return self.error_response(INVALID_PAGE)

        match_stage = {'$match': filters}
        sort_stage = {'$sort': {'tomatoes.viewer.numReviews': -1}}
        counting_pipeline = [match_stage, sort_stage, {'$count': 'count'}]
        skip_stage = {'$skip': movies_per_page * page}
        limit_stage = {'$limit': movies_per_page}
        facet_stage = {
            '$facet': {
                'runtime': [
                    {
                        '$bucket': {
                            'groupBy': '$runtime',
                            'boundaries': RUNTIME_BOUNDARIES,
                            'default': 'other',
                            'output': {'count': {'$sum': 1}}
                        }
                    }
                ],
                'rating': [
                    {
                        '$bucket': {
                            'groupBy': '$metacritic',
                            'boundaries': RATING_BOUNDARIES,
                            'default': 'other',
                            'output': {'count': {'$sum': 1}}
                        }
                    }
                ],
                'movies': [
                    {
                        '$addFields': {'title': '$title'}
                    }
                ]
            }
        }

        query_pipeline = [match_stage, sort_stage, skip_stage, limit_stage, facet_stage]

        try:
            results = next(self.collection.aggregate(query_pipeline), None) or {}
            count = next(self.collection.aggregate(counting_pipeline), None) or {'count': 0}
        except PyMongoError as e:
            logger.error(f"Faceted search failed: {e}")
            return self.error_response(FACETED_SEARCH_TOO_LARGE)

        return {**results, **count}

    def top_genres(self, n: int = 10) -> Union[List[Dict], DAOResponse]:
        """Most common genres across all movies."""
        return self.top_n('genres', n, pre_stages=[{'$unwind': '$genres'}])

    # --- Diagnostics ---

    def get_configuration(self) -> DAOResponse:
        """
        Report the connection pool size, write timeout and user role of the
        current client.
        """
        try:
            role_info = self.db.command({'connectionStatus': 1})
        except PyMongoError as e:
            logger.error(f"Unable to read connection status: {e}")
            return self.error_response(e)

        roles = role_info.get('authInfo', {}).get('authenticatedUserRoles', [])
        return {
            'pool_size': self.db.client.options.pool_options.max_pool_size,
            'wtimeout': self.collection.write_concern.document.get('wtimeout'),
            'auth_info': roles[0] if roles else None
        }
