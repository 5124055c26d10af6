# matching.py
# Mutual-match resolution. Match records are one-directional; a match is
# mutual only when the other user's records point back.
from typing import Dict, List, Optional

from pymongo.database import Database

from database import find_users_by_ids


def matched_user_ids(records: Optional[List[Dict]]) -> List[str]:
    """Target ids of the given match records, in record order."""
    return [r["user_id"] for r in records or [] if r.get("user_id") is not None]


def is_reciprocal(profile: Dict, user_id: str) -> bool:
    return any(r.get("user_id") == user_id for r in profile.get("matches") or [])


def filter_mutual(user_id: str, profiles: List[Dict]) -> List[Dict]:
    return [p for p in profiles if is_reciprocal(p, user_id)]


def resolve_mutual_matches(db: Database, user_id: str, records: Optional[List[Dict]]) -> List[Dict]:
    """
    Return the profiles of everyone in `records` who has also matched `user_id`.

    All referenced profiles are fetched in one query and then filtered for
    reciprocity. Store errors propagate, so either the whole list is
    resolved or the request fails.
    """
    ids = matched_user_ids(records)
    if not ids:
        return []
    return filter_mutual(user_id, find_users_by_ids(db, ids))


def match_cards(profiles: List[Dict]) -> List[Dict]:
    """Card view of resolved matches: picture, name and alt text."""
    cards = []
    for p in profiles:
        first_name = p.get("first_name") or ""
        cards.append({
            "user_id": p.get("user_id"),
            "first_name": p.get("first_name"),
            "url": p.get("url"),
            "alt": f"{first_name} profile".strip(),
        })
    return cards
