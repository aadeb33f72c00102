"""
Role-scoped data access: admins see every candidate, recruiters only their own.
"""
import re
from typing import Any, Dict, Optional

from app.models.models import Identity, Role


def is_admin(identity: Identity) -> bool:
    return identity.role == Role.SUPER_USER


def candidate_scope_filter(identity: Identity) -> Dict[str, Any]:
    if is_admin(identity):
        return {}
    return {"recruiter_id": identity.user_id}


def candidate_list_query(identity: Identity, status: Optional[str] = None, search: Optional[str] = None) -> Dict[str, Any]:
    query = candidate_scope_filter(identity)

    if status and status.lower() != "all":
        query["status"] = status

    if search and search.strip():
        pattern = {"$regex": re.escape(search.strip()), "$options": "i"}
        query["$or"] = [
            {"name": pattern},
            {"email": pattern},
            {"position": pattern},
        ]

    return query
