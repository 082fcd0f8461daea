"""
Shared behaviour for the collection DAOs.
"""
import logging
from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from pymongo.database import Database
from pymongo.errors import PyMongoError

from mflix.dao.errors import InvalidIdError

logger = logging.getLogger(__name__)

DAOResponse = Dict[str, Any]


class BaseDAO:
    """Binds a DAO to one collection of an injected database handle."""

    collection_name: str = ''

    def __init__(self, db: Database, collection_name: Optional[str] = None):
        self.db = db
        self.collection_name = collection_name or self.collection_name
        self.collection = db[self.collection_name]
        logger.debug(f"Initialized DAO for collection: {self.collection_name}")

    @staticmethod
    def to_object_id(value: Union[str, ObjectId]) -> ObjectId:
        """Convert a string to an ObjectId, raising InvalidIdError when malformed."""
        if isinstance(value, ObjectId):
            return value
        if isinstance(value, str) and ObjectId.is_valid(value):
            return ObjectId(value)
        raise InvalidIdError(value)

    @staticmethod
    def error_response(message: Any) -> DAOResponse:
        return {'error': str(message)}

    def top_n(
        self,
        group_field: str,
        n: int,
        pre_stages: Optional[List[Dict]] = None
    ) -> Union[List[Dict], DAOResponse]:
        """
        Count documents grouped by a field, most frequent first.

        Args:
            group_field: Field to group on, without the leading ``$``
            n: Maximum number of groups to return
            pre_stages: Optional stages run before grouping (e.g. ``$unwind``)

        Returns:
            List of ``{'_id': key, 'count': count}`` documents, or an error
            response
        """
        if isinstance(n, bool) or not isinstance(n, int) or n <= 0:
            return self.error_response(f"Limit must be a positive integer, got {n!r}")

        pipeline = list(pre_stages or [])
        pipeline.extend([
            {
                '$group': {
                    '_id': f'${group_field}',
                    'count': {'$sum': 1}
                }
            },
            {
                '$sort': {'count': -1}
            },
            {
                '$limit': n
            }
        ])

        try:
            return list(self.collection.aggregate(pipeline))
        except PyMongoError as e:
            logger.error(f"Unable to aggregate top {n} by {group_field} in {self.collection_name}: {e}")
            return self.error_response(e)
