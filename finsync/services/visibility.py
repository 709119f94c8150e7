"""
Commitment visibility rules.

Decides which commitments a user gets to see: their own personal ones,
shared ones from groups they have accepted, and their own imported ones.
"""

from typing import List, Optional
import logging

from finsync.models.commitment import Commitment

logger = logging.getLogger(__name__)


def resolve_filters(filters: Optional[dict] = None) -> dict:
    """Apply defaults: personal unless explicitly disabled, the rest opt-in.

    If every flag ends up False the caller still gets their personal
    commitments.
    """
    filters = filters or {}
    resolved = {
        'include_personal': filters.get('include_personal') is not False,
        'include_shared': filters.get('include_shared') is True,
        'include_imported': filters.get('include_imported') is True,
    }
    if not any(resolved.values()):
        resolved['include_personal'] = True
    return resolved


def select_candidate_commitments(store, user_id: int, filters: Optional[dict] = None) -> List[Commitment]:
    """Return the union of the enabled commitment subsets for ``user_id``.

    Args:
        store: RecordStore to read from
        user_id: The viewing user
        filters: Optional mapping with include_personal / include_shared /
            include_imported booleans

    Returns:
        Commitments ordered by creation time, each appearing once.
    """
    flags = resolve_filters(filters)
    selected = {}

    if flags['include_personal']:
        for commitment in store.personal_commitments(user_id):
            selected[commitment.id] = commitment

    if flags['include_shared']:
        group_ids = store.accepted_group_ids(user_id)
        if group_ids:
            for commitment in store.shared_commitments(group_ids):
                selected[commitment.id] = commitment
        else:
            logger.debug("User %s has no accepted groups; no shared commitments", user_id)

    if flags['include_imported']:
        for commitment in store.imported_commitments(user_id):
            selected[commitment.id] = commitment

    return sorted(selected.values(), key=lambda c: (c.created_at is None, c.created_at, c.id))
