"""
Browse / matching queries over the user directory.

``search`` filters are conjunctive across kinds (name AND skills AND
location AND visibility AND minimum rating) but disjunctive inside the skill filter: a user matches when
their offered OR wanted skills share any id with the selection, so picking
more skills widens the result.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional

from skillswap.config import settings
from skillswap.errors import NotFound
from skillswap.models.skill import Skill
from skillswap.models.user import User
from skillswap.repositories import Store


def _substring(value: Optional[str]) -> Optional[str]:
    """Blank input means no filter; anything else is matched as given."""
    if value is None or not value.strip():
        return None
    return value


@dataclass(frozen=True)
class SearchCriteria:
    name_contains: Optional[str] = None
    skill_ids: FrozenSet[int] = field(default_factory=frozenset)
    location: Optional[str] = None
    is_public: Optional[bool] = None
    min_rating: Optional[float] = None


@dataclass
class SwapMatch:
    """A user who wants something we offer and offers something we want."""
    user: User
    offered_skill: Skill
    wanted_skill: Skill


class SearchService:

    def __init__(self, store: Store, max_page_size: Optional[int] = None):
        self.store = store
        self.max_page_size = max_page_size or settings.SEARCH_MAX_PAGE_SIZE

    async def search(
        self,
        criteria: SearchCriteria,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[User]:
        """Users matching ``criteria`` in directory (id) order."""
        if limit is not None:
            limit = max(0, min(limit, self.max_page_size))
        return await self.store.users.search(
            name_contains=_substring(criteria.name_contains),
            skill_ids=criteria.skill_ids,
            location=_substring(criteria.location),
            is_public=criteria.is_public,
            min_rating=criteria.min_rating,
            limit=limit,
            offset=max(0, offset),
        )

    async def find_matches(self, user_id: int, limit: Optional[int] = None) -> List[SwapMatch]:
        """Mutual matches: for each pairing of our offers and wants, who fits it."""
        user = await self.store.users.get(user_id)
        if user is None:
            raise NotFound("User not found.")
        limit = limit or settings.MATCHES_LIMIT

        candidates = await self.store.users.find_mutual(
            user.id,
            offered_ids=[s.id for s in user.skills_offered],
            wanted_ids=[s.id for s in user.skills_wanted],
        )

        matches: List[SwapMatch] = []
        for candidate in candidates:
            for offered in user.skills_offered:
                if not candidate.wants(offered.id):
                    continue
                for wanted in user.skills_wanted:
                    if candidate.offers(wanted.id):
                        matches.append(SwapMatch(candidate, offered, wanted))
                        if len(matches) >= limit:
                            return matches
        return matches
