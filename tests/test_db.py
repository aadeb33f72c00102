import pytest
from unittest.mock import AsyncMock, patch


class TestInitIndexes:

    @pytest.mark.asyncio
    @patch("app.services.db.users_coll")
    @patch("app.services.db.candidates_coll")
    async def test_creates_lookup_indexes(self, mock_candidates_coll, mock_users_coll):
        from app.services.db import init_indexes

        mock_candidates_coll.create_index = AsyncMock()
        mock_users_coll.create_index = AsyncMock()

        await init_indexes()

        keys = [c.args[0] for c in mock_candidates_coll.create_index.call_args_list]
        assert [("candidate_id", 1)] in keys
        assert [("email", 1)] in keys
        assert [("phone", 1)] in keys
        assert [("fingerprint", 1)] in keys
        mock_users_coll.create_index.assert_called_once_with([("user_id", 1)], unique=True)

    @pytest.mark.asyncio
    @patch("app.services.db.users_coll")
    @patch("app.services.db.candidates_coll")
    async def test_index_failures_are_not_fatal(self, mock_candidates_coll, mock_users_coll):
        from app.services.db import init_indexes

        mock_candidates_coll.create_index = AsyncMock(side_effect=RuntimeError("not authorized"))
        mock_users_coll.create_index = AsyncMock(side_effect=RuntimeError("index already exists"))

        await init_indexes()

        assert mock_candidates_coll.create_index.call_count == 5
