"""
Administrative commands for the mflix database.

    mflix-admin create-indexes
    mflix-admin configuration
    mflix-admin top-commenters --limit 10
"""
import argparse
import logging
import sys

from bson import json_util

from mflix.bootstrap import mflix_session, setup_logging
from mflix.config import config
from mflix.dao.comments import MOST_ACTIVE_COMMENTERS_LIMIT
from mflix.mongodb.indexes import setup_indexes

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='mflix-admin',
        description='Administrative commands for the mflix database'
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    subparsers.add_parser(
        'create-indexes',
        help='Create the indexes the DAO queries rely on'
    )
    subparsers.add_parser(
        'configuration',
        help='Show pool size, write timeout and role of the current client'
    )
    top = subparsers.add_parser(
        'top-commenters',
        help='List the users with the most comments'
    )
    top.add_argument(
        '--limit',
        type=int,
        default=MOST_ACTIVE_COMMENTERS_LIMIT,
        help=f'Number of commenters to list (default: {MOST_ACTIVE_COMMENTERS_LIMIT})'
    )
    return parser


def main(argv=None) -> int:
    """Main entry point for mflix-admin."""
    args = build_parser().parse_args(argv)
    setup_logging(config)

    with mflix_session(config) as daos:
        if args.command == 'create-indexes':
            setup_indexes(daos.movies.db)
            result = {'success': True}
        elif args.command == 'configuration':
            result = daos.movies.get_configuration()
        else:
            result = daos.comments.most_active_commenters(args.limit)

    print(json_util.dumps(result, indent=2))
    return 1 if isinstance(result, dict) and 'error' in result else 0


if __name__ == '__main__':
    sys.exit(main())
