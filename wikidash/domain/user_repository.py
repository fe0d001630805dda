import logging

from wikidash.core.cache import TTLCache
from wikidash.domain.classification import parse_timestamp
from wikidash.models.user import WikiUser
from wikidash.services.wikimedia.query_client import WikipediaQueryClient

logger = logging.getLogger(__name__)

USER_CACHE_TTL = 300  # 5 min


class UserRepository:
    """Account metadata, cached per username."""

    def __init__(
        self,
        client: WikipediaQueryClient,
        cache: TTLCache[WikiUser] | None = None,
    ):
        self.client = client
        self.cache: TTLCache[WikiUser] = (
            cache if cache is not None else TTLCache(USER_CACHE_TTL, name="users")
        )

    async def get_user(self, username: str) -> WikiUser:
        """
        Get a user, from cache when fresh.

        Raises:
            EntityNotFound: If the account does not exist
        """
        cached = self.cache.get(username)
        if cached is not None:
            return cached

        info = await self.client.get_user_info(username)
        user = WikiUser(
            username=info.name,
            user_id=info.user_id,
            registration_date=parse_timestamp(info.registration) if info.registration else None,
            edit_count=info.edit_count,
            groups=tuple(info.groups),
        )

        self.cache.set(username, user)
        return user

    async def get_edit_count(self, username: str) -> int:
        user = await self.get_user(username)
        return user.edit_count
