import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from videohub.auth import jwt_handler
from videohub.core.errors import AuthenticationError
from videohub.database import get_db
from videohub.models.user import User
from videohub.repositories import user_repository

ACCESS_TOKEN_COOKIE = 'accessToken'
REFRESH_TOKEN_COOKIE = 'refreshToken'

security = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if not token and credentials is not None:
        token = credentials.credentials
    if not token:
        raise AuthenticationError('Unauthorized request')

    try:
        payload = jwt_handler.decode_access_token(token)
        user_id = int(payload['sub'])
    except (jwt.PyJWTError, KeyError, TypeError, ValueError) as exc:
        raise AuthenticationError('Invalid access token') from exc

    user = user_repository.find_by_id(db, user_id)
    if user is None:
        raise AuthenticationError('Invalid access token')
    return user
