from wctips.config.settings import settings
from wctips.database.store import Store
from wctips.modules.users.schemas import UserSearchResult
from typing import List


def normalize_query(query: str) -> str:
    return (query or "").strip()


def is_searchable(query: str) -> bool:
    return len(normalize_query(query)) >= settings.user_search_min_length


class UserService:
    def __init__(self, store: Store):
        self.store = store

    def search_users(self, query: str) -> List[UserSearchResult]:
        """Case-insensitive substring match on display name"""
        q = normalize_query(query)
        if not is_searchable(q):
            return []
        rows = self.store.select(
            "profiles",
            "id, display_name, avatar_url",
            ilike={"display_name": f"%{q}%"},
            limit=settings.user_search_limit
        )
        return [UserSearchResult(**row) for row in rows]
