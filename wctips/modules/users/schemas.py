from pydantic import BaseModel
from typing import Optional, List


class UserSearchResult(BaseModel):
    id: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None


class UserSearchResponse(BaseModel):
    results: List[UserSearchResult]
