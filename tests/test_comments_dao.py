"""
Comments DAO Tests

Tests for posting, editing and deleting comments and the owner check
"""

import pytest
from datetime import datetime
from bson import ObjectId
from pymongo.errors import PyMongoError

from mflix.dao.comments import CommentsDAO

MOVIE_ID = '573a13eff29313caabdd82f3'
ADA = {'name': 'Ada', 'email': 'ada@x.com'}
POSTED = datetime(2024, 5, 1, 12, 0)
EDITED = datetime(2024, 5, 2, 9, 30)


@pytest.fixture
def dao(fake_db):
    """Create CommentsDAO over the in-memory database"""
    return CommentsDAO(fake_db)


@pytest.fixture
def comment_id(dao):
    """Post a comment and return its id as a string"""
    result = dao.add_comment(MOVIE_ID, ADA, "great film", POSTED)
    return str(result['inserted_id'])


class TestAddComment:
    """Test posting comments"""

    def test_add_comment_stores_fields(self, dao, comment_id):
        stored = dao.get_comment(comment_id)

        assert stored['name'] == 'Ada'
        assert stored['email'] == 'ada@x.com'
        assert stored['movie_id'] == ObjectId(MOVIE_ID)
        assert stored['text'] == 'great film'
        assert stored['date'] == POSTED

    def test_add_comment_acknowledged(self, dao):
        result = dao.add_comment(MOVIE_ID, ADA, "second look", POSTED)

        assert result['acknowledged'] is True
        assert isinstance(result['inserted_id'], ObjectId)

    def test_add_comment_invalid_movie_id(self, dao, fake_db):
        result = dao.add_comment("not-an-id", ADA, "hello", POSTED)

        assert 'error' in result
        assert fake_db['comments'].documents == []

    def test_add_comment_missing_user_email(self, dao):
        result = dao.add_comment(MOVIE_ID, {'name': 'Ada'}, "hello", POSTED)

        assert 'error' in result


class TestUpdateComment:
    """Test editing comments"""

    def test_owner_can_update(self, dao, comment_id):
        result = dao.update_comment(comment_id, 'ada@x.com', "revised", EDITED)

        assert result == {'matched_count': 1, 'modified_count': 1}
        stored = dao.get_comment(comment_id)
        assert stored['text'] == 'revised'
        assert stored['date'] == EDITED

    def test_other_user_cannot_update(self, dao, comment_id):
        result = dao.update_comment(comment_id, 'mallory@x.com', "revised", EDITED)

        assert result == {'matched_count': 0, 'modified_count': 0}
        stored = dao.get_comment(comment_id)
        assert stored['text'] == 'great film'
        assert stored['date'] == POSTED

    def test_unknown_comment_reports_zero(self, dao):
        result = dao.update_comment(str(ObjectId()), 'ada@x.com', "revised", EDITED)

        assert result['matched_count'] == 0

    def test_invalid_comment_id(self, dao):
        result = dao.update_comment("12345", 'ada@x.com', "revised", EDITED)

        assert 'error' in result


class TestDeleteComment:
    """Test deleting comments"""

    def test_owner_can_delete(self, dao, comment_id):
        result = dao.delete_comment(comment_id, 'ada@x.com')

        assert result == {'deleted_count': 1}
        assert dao.get_comment(comment_id) is None

    def test_other_user_cannot_delete(self, dao, comment_id):
        result = dao.delete_comment(comment_id, 'mallory@x.com')

        assert result == {'deleted_count': 0}
        assert dao.get_comment(comment_id)['text'] == 'great film'

    def test_invalid_comment_id(self, dao):
        assert 'error' in dao.delete_comment("zzz", 'ada@x.com')


class TestGetComment:
    """Test single comment lookup"""

    def test_malformed_id_returns_none(self, dao):
        assert dao.get_comment("foobar") is None

    def test_unknown_id_returns_none(self, dao):
        assert dao.get_comment(str(ObjectId())) is None


class TestDriverFailures:
    """Test driver errors become error responses"""

    @pytest.fixture
    def failing_dao(self, mock_db):
        dao = CommentsDAO(mock_db)
        dao.collection.insert_one.side_effect = PyMongoError("write concern error")
        dao.collection.update_one.side_effect = PyMongoError("write concern error")
        dao.collection.delete_one.side_effect = PyMongoError("write concern error")
        return dao

    def test_add_comment(self, failing_dao):
        result = failing_dao.add_comment(MOVIE_ID, ADA, "hi", POSTED)
        assert result == {'error': 'write concern error'}

    def test_update_comment(self, failing_dao):
        result = failing_dao.update_comment(MOVIE_ID, 'ada@x.com', "hi", EDITED)
        assert result == {'error': 'write concern error'}

    def test_delete_comment(self, failing_dao):
        result = failing_dao.delete_comment(MOVIE_ID, 'ada@x.com')
        assert result == {'error': 'write concern error'}


class TestMostActiveCommenters:
    """Test commenter ranking"""

    def test_groups_by_email(self, mock_db):
        dao = CommentsDAO(mock_db)
        ranking = [{'_id': 'roger@x.com', 'count': 277}, {'_id': 'ada@x.com', 'count': 3}]
        dao.collection.aggregate.return_value = iter(ranking)

        result = dao.most_active_commenters()

        assert result == ranking
        pipeline = dao.collection.aggregate.call_args[0][0]
        assert pipeline[0] == {'$group': {'_id': '$email', 'count': {'$sum': 1}}}
        assert pipeline[1] == {'$sort': {'count': -1}}
        assert pipeline[2] == {'$limit': 20}
