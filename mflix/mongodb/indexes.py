"""
MongoDB Index Management

Creates the indexes the DAO queries rely on
"""

from pymongo import ASCENDING, DESCENDING, TEXT
from pymongo.database import Database
from pymongo.errors import OperationFailure
import logging

logger = logging.getLogger(__name__)


class IndexManager:
    """
    Manages MongoDB indexes for the movies, comments and users collections
    """

    def __init__(self, db: Database):
        """
        Initialize index manager

        Args:
            db: MongoDB database instance
        """
        self.db = db
        self.movies = db.movies
        self.comments = db.comments
        self.users = db.users

    def create_all_indexes(self):
        """
        Create all indexes for the mflix collections
        """
        logger.info("Creating indexes for mflix collections...")

        try:
            self.create_movies_indexes()
            self.create_comments_indexes()
            self.create_users_indexes()

            logger.info("All indexes created successfully")

        except Exception as e:
            logger.error(f"Error creating indexes: {e}")
            raise

    def create_movies_indexes(self):
        """
        Create indexes for movies collection
        """
        logger.info("Creating indexes for movies collection...")

        # $text queries fail without a text index
        try:
            self.movies.create_index(
                [
                    ("title", TEXT),
                    ("genres", TEXT),
                    ("cast", TEXT),
                    ("fullplot", TEXT)
                ],
                name="idx_movies_text"
            )
            logger.info("Created text index: idx_movies_text")
        except OperationFailure as e:
            logger.warning(f"Text index creation failed (may already exist): {e}")

        self.movies.create_index([("cast", ASCENDING)], name="idx_cast")
        self.movies.create_index([("genres", ASCENDING)], name="idx_genres")
        self.movies.create_index([("countries", ASCENDING)], name="idx_countries")
        self.movies.create_index(
            [("tomatoes.viewer.numReviews", DESCENDING)],
            name="idx_viewer_num_reviews"
        )

        logger.info("Movies indexes created")

    def create_comments_indexes(self):
        """
        Create indexes for comments collection
        """
        logger.info("Creating indexes for comments collection...")

        # Movie lookup joins on movie_id and sorts newest first
        self.comments.create_index(
            [("movie_id", ASCENDING), ("date", DESCENDING)],
            name="idx_movie_date"
        )
        self.comments.create_index([("email", ASCENDING)], name="idx_email")

        logger.info("Comments indexes created")

    def create_users_indexes(self):
        """
        Create indexes for users collection
        """
        logger.info("Creating indexes for users collection...")

        self.users.create_index(
            [("email", ASCENDING)],
            name="idx_email_unique",
            unique=True
        )

        logger.info("Users indexes created")

    def list_all_indexes(self) -> dict:
        """
        List all indexes for all collections

        Returns:
            Dictionary with collection names and their indexes
        """
        return {
            "movies": list(self.movies.list_indexes()),
            "comments": list(self.comments.list_indexes()),
            "users": list(self.users.list_indexes())
        }


def setup_indexes(db: Database):
    """
    Setup all indexes for the mflix collections

    Args:
        db: MongoDB database instance
    """
    manager = IndexManager(db)
    manager.create_all_indexes()
