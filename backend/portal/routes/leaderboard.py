"""
Leaderboard API route - ranked student totals.

Ranks students with at least one submission by:
1. Total score (highest first)
2. Earliest first submission (tiebreaker)
3. Student id (secondary tiebreaker)

Hidden from everyone except the admin until the admin makes it visible.
"""

from fastapi import APIRouter, Depends

from portal.dependencies import get_principal, get_store
from portal.routes.serializers import serialize_student
from portal.services import auth
from portal.services.leaderboard import build
from portal.store import RecordStore

router = APIRouter()


@router.get("/leaderboard")
def get_leaderboard(
    principal: auth.Principal = Depends(get_principal),
    store: RecordStore = Depends(get_store)
):
    """
    Get the ranked leaderboard.

    Answers 403 while the leaderboard is hidden, unless the caller is the admin.
    """
    entries = build(store, caller_is_admin=isinstance(principal, auth.AdminPrincipal))

    leaderboard = []
    for rank, entry in enumerate(entries, 1):
        leaderboard.append({
            "rank": rank,
            "is_top_3": rank <= 3,
            "student": serialize_student(entry.student),
            "total_score": entry.total_score,
            "submission_count": entry.submission_count
        })

    return {"leaderboard": leaderboard}
