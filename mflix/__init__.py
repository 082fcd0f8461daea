"""
Data-access layer for the mflix movie catalog.
"""

from .bootstrap import DAOHandles, init_daos, mflix_session, setup_logging

__all__ = ['DAOHandles', 'init_daos', 'mflix_session', 'setup_logging']
