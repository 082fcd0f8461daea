"""
Startup wiring: logging, the MongoDB client, and one DAO per collection.

The DAOs are built once from a live client and handed out as an immutable
``DAOHandles`` value instead of living in module globals.

Usage:
    with mflix_session() as daos:
        movies, total = daos.movies.get_movies(filters={'genre': 'Drama'})
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional
import logging
import sys

from pymongo import MongoClient

from mflix.config import Config, config as default_config
from mflix.dao import CommentsDAO, MoviesDAO, UsersDAO
from mflix.mongodb.client import create_mongodb_client, close_mongodb_client

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DAOHandles:
    """The DAOs for one database namespace."""
    movies: MoviesDAO
    comments: CommentsDAO
    users: UsersDAO


def setup_logging(settings: Optional[Config] = None):
    """Configure root logging from the log level and format settings."""
    settings = settings or default_config
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=settings.log_format,
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def init_daos(client: MongoClient, db_name: str) -> DAOHandles:
    """
    Build the DAOs for a namespace

    Args:
        client: Connected MongoDB client
        db_name: Database (namespace) holding the mflix collections

    Returns:
        DAOHandles bound to ``client[db_name]``
    """
    db = client[db_name]
    handles = DAOHandles(
        movies=MoviesDAO(db),
        comments=CommentsDAO(db),
        users=UsersDAO(db)
    )
    logger.info(f"Established collection handles in namespace {db_name}")
    return handles


@contextmanager
def mflix_session(settings: Optional[Config] = None) -> Iterator[DAOHandles]:
    """
    Connect, yield the DAOs, and close the client on exit
    """
    settings = settings or default_config
    client = create_mongodb_client(settings)
    try:
        yield init_daos(client, settings.mflix_ns)
    finally:
        close_mongodb_client(client)
