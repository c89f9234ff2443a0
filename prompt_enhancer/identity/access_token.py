"""JwtIdentityResolver — verifies identity-provider access tokens with PyJWT."""
import logging
from typing import Optional

import jwt

from prompt_enhancer.constants import (
    DEFAULT_JWT_AUDIENCE,
    JWT_ALGORITHMS,
    MSG_LOG_TOKEN_REJECTED,
)
from prompt_enhancer.identity.resolver import Identity, IdentityResolver

logger = logging.getLogger(__name__)


class JwtIdentityResolver(IdentityResolver):
    """Accepts HS256 access tokens signed with the provider's secret.

    The token subject becomes the user id. Anything that fails verification
    (bad signature, expired, wrong audience, no subject) resolves to None.
    """

    def __init__(self, secret: str, audience: str = DEFAULT_JWT_AUDIENCE) -> None:
        self._secret = secret
        self._audience = audience

    async def resolve(self, access_token: Optional[str]) -> Optional[Identity]:
        match access_token:
            case None | "":
                return None
            case token:
                pass

        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=list(JWT_ALGORITHMS),
                audience=self._audience,
                options={"require": ["sub", "exp"]},
            )
        except jwt.InvalidTokenError as exc:
            logger.debug(MSG_LOG_TOKEN_REJECTED, exc)
            return None

        match claims.get("sub"):
            case str() as user_id if user_id:
                return Identity(user_id=user_id, email=claims.get("email"))
            case _:
                return None
