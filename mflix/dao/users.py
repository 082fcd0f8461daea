"""
Users DAO.
"""
import logging
from typing import Any, Dict, Mapping, Union

from pymongo import WriteConcern
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from mflix.dao.base import BaseDAO, DAOResponse

logger = logging.getLogger(__name__)

DUPLICATE_USER = 'A user with the given email already exists.'
USER_NOT_FOUND = 'No user found with that email'


class UsersDAO(BaseDAO):
    """Query façade over the ``users`` collection. Passwords arrive already hashed."""

    collection_name = 'users'

    def __init__(self, db: Database):
        super().__init__(db)

    def get_user(self, email: str) -> Union[Dict, DAOResponse, None]:
        try:
            return self.collection.find_one({'email': email})
        except PyMongoError as e:
            logger.error(f"Unable to fetch user: {e}")
            return self.error_response(e)

    def add_user(self, name: str, email: str, hashed_password: str) -> DAOResponse:
        """
        Insert a new user, relying on the unique ``email`` index to reject
        duplicates.
        """
        try:
            self.collection.with_options(
                write_concern=WriteConcern(w='majority')
            ).insert_one({
                'name': name,
                'email': email,
                'password': hashed_password
            })
        except DuplicateKeyError:
            return self.error_response(DUPLICATE_USER)
        except PyMongoError as e:
            logger.error(f"Unable to add user: {e}")
            return self.error_response(e)

        return {'success': True}

    def delete_user(self, email: str) -> DAOResponse:
        try:
            result = self.collection.delete_one({'email': email})
        except PyMongoError as e:
            logger.error(f"Unable to delete user: {e}")
            return self.error_response(e)

        if result.deleted_count == 0:
            return self.error_response(USER_NOT_FOUND)
        return {'success': True}

    def update_preferences(self, email: str, preferences: Mapping[str, Any]) -> DAOResponse:
        """Replace the ``preferences`` sub-document of a user."""
        if not isinstance(preferences, Mapping):
            return self.error_response('Preferences must be a mapping')

        try:
            result = self.collection.update_one(
                {'email': email},
                {'$set': {'preferences': dict(preferences)}}
            )
        except PyMongoError as e:
            logger.error(f"Unable to update preferences: {e}")
            return self.error_response(e)

        if result.matched_count == 0:
            return self.error_response(USER_NOT_FOUND)
        return {
            'matched_count': result.matched_count,
            'modified_count': result.modified_count
        }
