"""
MongoDB module for the mflix data-access layer
"""

from .client import create_mongodb_client, close_mongodb_client
from .indexes import IndexManager, setup_indexes

__all__ = ['create_mongodb_client', 'close_mongodb_client', 'IndexManager', 'setup_indexes']
