"""
Data-access objects for the mflix collections.
"""

from .base import BaseDAO
from .comments import CommentsDAO
from .errors import DAOError, InvalidIdError
from .movies import MoviesDAO, QueryParams
from .users import UsersDAO

__all__ = [
    'BaseDAO',
    'CommentsDAO',
    'DAOError',
    'InvalidIdError',
    'MoviesDAO',
    'QueryParams',
    'UsersDAO'
]
