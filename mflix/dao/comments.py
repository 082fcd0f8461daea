"""
Comments DAO.

Updates and deletes filter on both the comment ``_id`` and the author email,
so a comment can only be changed by the user who posted it. A mismatch is not
an error: it shows up as zero matched/deleted documents.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Union

from pymongo.database import Database
from pymongo.errors import PyMongoError

from mflix.dao.base import BaseDAO, DAOResponse
from mflix.dao.errors import InvalidIdError

logger = logging.getLogger(__name__)

MOST_ACTIVE_COMMENTERS_LIMIT = 20


class CommentsDAO(BaseDAO):
    """Query façade over the ``comments`` collection."""

    collection_name = 'comments'

    def __init__(self, db: Database):
        super().__init__(db)

    def add_comment(
        self,
        movie_id: str,
        user: Mapping[str, Any],
        comment: str,
        date: datetime
    ) -> DAOResponse:
        """
        Insert a comment on a movie.

        Args:
            movie_id: The ``_id`` of the movie being commented on
            user: Mapping with the poster's ``name`` and ``email``
            comment: Text of the comment
            date: When the comment was posted

        Returns:
            ``{'acknowledged', 'inserted_id'}`` or an error response
        """
        try:
            comment_doc = {
                'name': user['name'],
                'email': user['email'],
                'movie_id': self.to_object_id(movie_id),
                'text': comment,
                'date': date
            }
            result = self.collection.insert_one(comment_doc)
        except (InvalidIdError, KeyError, PyMongoError) as e:
            logger.error(f"Unable to post comment: {e}")
            return self.error_response(e)

        return {
            'acknowledged': result.acknowledged,
            'inserted_id': result.inserted_id
        }

    def update_comment(
        self,
        comment_id: str,
        user_email: str,
        text: str,
        date: datetime
    ) -> DAOResponse:
        """
        Replace the text and date of a comment owned by ``user_email``.

        Returns:
            ``{'matched_count', 'modified_count'}`` or an error response
        """
        try:
            result = self.collection.update_one(
                {'_id': self.to_object_id(comment_id), 'email': user_email},
                {'$set': {'text': text, 'date': date}}
            )
        except (InvalidIdError, PyMongoError) as e:
            logger.error(f"Unable to update comment: {e}")
            return self.error_response(e)

        return {
            'matched_count': result.matched_count,
            'modified_count': result.modified_count
        }

    def delete_comment(self, comment_id: str, user_email: str) -> DAOResponse:
        """
        Delete a comment owned by ``user_email``.

        Returns:
            ``{'deleted_count'}`` or an error response
        """
        try:
            result = self.collection.delete_one(
                {'_id': self.to_object_id(comment_id), 'email': user_email}
            )
        except (InvalidIdError, PyMongoError) as e:
            logger.error(f"Unable to delete comment: {e}")
            return self.error_response(e)

        return {'deleted_count': result.deleted_count}

    def get_comment(self, comment_id: str) -> Union[Dict, DAOResponse, None]:
        """Get a single comment; ``None`` for a malformed or unknown id."""
        try:
            object_id = self.to_object_id(comment_id)
        except InvalidIdError:
            return None

        try:
            return self.collection.find_one({'_id': object_id})
        except PyMongoError as e:
            logger.error(f"Unable to fetch comment: {e}")
            return self.error_response(e)

    def most_active_commenters(
        self,
        limit: int = MOST_ACTIVE_COMMENTERS_LIMIT
    ) -> Union[List[Dict], DAOResponse]:
        """Emails with the most comments, as ``{'_id': email, 'count': n}``."""
        return self.top_n('email', limit)
