from app.models.models import Identity, Role
from app.services.access import candidate_list_query, candidate_scope_filter, is_admin

ADMIN = Identity(user_id="admin-1", role=Role.SUPER_USER)
RECRUITER = Identity(user_id="rec-1", role=Role.RECRUITER)


class TestCandidateScope:

    def test_admin_is_unscoped(self):
        assert is_admin(ADMIN)
        assert candidate_scope_filter(ADMIN) == {}

    def test_recruiter_sees_own(self):
        assert not is_admin(RECRUITER)
        assert candidate_scope_filter(RECRUITER) == {"recruiter_id": "rec-1"}

    def test_status_all_is_ignored(self):
        assert candidate_list_query(RECRUITER, status="all") == {"recruiter_id": "rec-1"}
        assert candidate_list_query(RECRUITER, status="OFFER") == {"recruiter_id": "rec-1", "status": "OFFER"}

    def test_search_is_escaped(self):
        query = candidate_list_query(ADMIN, search=" c++ ")
        pattern = {"$regex": "c\\+\\+", "$options": "i"}

        assert query["$or"] == [{"name": pattern}, {"email": pattern}, {"position": pattern}]

    def test_blank_search_ignored(self):
        assert candidate_list_query(ADMIN, search="   ") == {}
