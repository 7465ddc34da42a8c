import logging
from typing import NamedTuple

from sqlalchemy.orm import Session

from videohub.auth import jwt_handler
from videohub.core.errors import InternalError
from videohub.repositories import user_repository

logger = logging.getLogger(__name__)

TOKEN_GENERATION_FAILED = 'Something went wrong while generating access and refresh tokens'


class TokenPair(NamedTuple):
    access_token: str
    refresh_token: str


def generate_access_and_refresh_tokens(db: Session, user_id: int) -> TokenPair:
    """Mint a fresh token pair and store the refresh token on the user.

    Any failure is reported as a generic InternalError; the cause is logged.
    """
    try:
        user = user_repository.find_by_id(db, user_id)
        if user is None:
            raise LookupError(f'User {user_id} not found')

        access_token = jwt_handler.create_access_token(user)
        refresh_token = jwt_handler.create_refresh_token(user)

        if not user_repository.update_field(db, user_id, 'refresh_token', refresh_token):
            raise LookupError(f'User {user_id} disappeared before the refresh token was stored')
    except Exception as exc:
        logger.exception('Token generation failed for user %s', user_id)
        raise InternalError(TOKEN_GENERATION_FAILED) from exc

    return TokenPair(access_token=access_token, refresh_token=refresh_token)
