import logging
import shutil
import uuid
from datetime import datetime
from pathlib import Path

import jwt
from fastapi import APIRouter, Body, Depends, File, Form, Request, UploadFile, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session

from videohub.auth import jwt_handler
from videohub.auth.dependencies import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE, get_current_user
from videohub.core import config
from videohub.core.errors import (
    AuthenticationError,
    ConflictError,
    InternalError,
    NotFoundError,
    UploadError,
    ValidationError,
)
from videohub.core.responses import ApiResponse
from videohub.database import get_db
from videohub.models.user import User
from videohub.repositories import user_repository
from videohub.services import token_service
from videohub.services.media_uploader import MediaUploader, get_media_uploader

router = APIRouter(tags=['users'])

logger = logging.getLogger(__name__)


class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    full_name: str = Field(serialization_alias='fullName')
    avatar: str
    cover_image: str = Field(default='', serialization_alias='coverImage')
    created_at: datetime | None = Field(default=None, serialization_alias='createdAt')
    updated_at: datetime | None = Field(default=None, serialization_alias='updatedAt')

    class Config:
        from_attributes = True

    @field_validator('cover_image', mode='before')
    @classmethod
    def default_cover_image(cls, value: str | None) -> str:
        return value or ''


class LoginRequest(BaseModel):
    username: str | None = None
    email: str | None = None
    password: str | None = None

    @field_validator('username', 'email')
    @classmethod
    def normalize_identifier(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip().lower() or None


class RefreshTokenRequest(BaseModel):
    refresh_token: str | None = Field(default=None, alias='refreshToken')

    class Config:
        populate_by_name = True


def cookie_options() -> dict:
    return {'httponly': True, 'secure': config.COOKIE_SECURE}


def set_auth_cookies(response: JSONResponse, tokens: token_service.TokenPair) -> JSONResponse:
    response.set_cookie(ACCESS_TOKEN_COOKIE, tokens.access_token, **cookie_options())
    response.set_cookie(REFRESH_TOKEN_COOKIE, tokens.refresh_token, **cookie_options())
    return response


def clear_auth_cookies(response: JSONResponse) -> JSONResponse:
    response.delete_cookie(ACCESS_TOKEN_COOKIE, **cookie_options())
    response.delete_cookie(REFRESH_TOKEN_COOKIE, **cookie_options())
    return response


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def has_file(upload: UploadFile | None) -> bool:
    return upload is not None and bool(upload.filename)


def stage_upload(upload: UploadFile) -> Path:
    """Copy an uploaded file into the temp directory and return its path."""
    temp_dir = Path(config.TEMP_UPLOAD_DIR)
    temp_dir.mkdir(parents=True, exist_ok=True)

    staged_path = temp_dir / f'{uuid.uuid4().hex}-{Path(upload.filename).name}'
    with staged_path.open('wb') as staged_file:
        shutil.copyfileobj(upload.file, staged_file)
    return staged_path


def get_sanitized_user(db: Session, user_id: int) -> UserResponse | None:
    user = user_repository.find_by_id(db, user_id)
    if user is None:
        return None
    return UserResponse.model_validate(user)


@router.post('/register', status_code=status.HTTP_201_CREATED)
def register_user(
    username: str | None = Form(None),
    email: str | None = Form(None),
    full_name: str | None = Form(None, alias='fullName'),
    password: str | None = Form(None),
    avatar: UploadFile | None = File(None),
    cover_image: UploadFile | None = File(None, alias='coverImage'),
    db: Session = Depends(get_db),
    media_uploader: MediaUploader = Depends(get_media_uploader),
):
    if any(is_blank(field) for field in (username, email, full_name, password)):
        raise ValidationError('All fields are required')

    existing_user = user_repository.find_by_username_or_email(db, username=username, email=email)
    if existing_user:
        raise ConflictError('User with email or username already exists')

    if not has_file(avatar):
        raise ValidationError('Avatar file is required')

    avatar_url = media_uploader.upload(stage_upload(avatar))
    cover_image_url = media_uploader.upload(stage_upload(cover_image)) if has_file(cover_image) else None

    if not avatar_url:
        raise UploadError('Avatar file upload failed')

    user = user_repository.create_user(
        db,
        username=username.lower(),
        email=email,
        full_name=full_name,
        password=password,
        avatar=avatar_url,
        cover_image=cover_image_url or '',
    )

    created_user = get_sanitized_user(db, user.id)
    if created_user is None:
        raise InternalError('Something went wrong while registering the user')

    logger.info('Registered user %s', user.id)
    return ApiResponse(
        status.HTTP_201_CREATED,
        created_user,
        'User registered successfully',
    ).to_response()


@router.post('/login')
def login_user(data: LoginRequest, db: Session = Depends(get_db)):
    if not (data.username or data.email):
        raise ValidationError('Username or email is required')

    user = user_repository.find_by_username_or_email(db, username=data.username, email=data.email)
    if user is None:
        raise NotFoundError('User does not exist')

    if not user.is_password_correct(data.password):
        raise AuthenticationError('Invalid user credentials')

    tokens = token_service.generate_access_and_refresh_tokens(db, user.id)
    logged_in_user = get_sanitized_user(db, user.id)

    logger.info('User %s logged in', user.id)
    response = ApiResponse(
        status.HTTP_200_OK,
        {
            'user': logged_in_user,
            'accessToken': tokens.access_token,
            'refreshToken': tokens.refresh_token,
        },
        'User logged in successfully',
    ).to_response()
    return set_auth_cookies(response, tokens)


@router.post('/logout')
def logout_user(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user_repository.update_field(db, current_user.id, 'refresh_token', None)

    response = ApiResponse(status.HTTP_200_OK, {}, 'User logged out successfully').to_response()
    return clear_auth_cookies(response)


@router.post('/refresh-token')
def refresh_access_token(
    request: Request,
    data: RefreshTokenRequest | None = Body(default=None),
    db: Session = Depends(get_db),
):
    incoming_refresh_token = request.cookies.get(REFRESH_TOKEN_COOKIE)
    if not incoming_refresh_token and data is not None:
        incoming_refresh_token = data.refresh_token
    if not incoming_refresh_token:
        raise AuthenticationError('Unauthorized request')

    try:
        payload = jwt_handler.decode_refresh_token(incoming_refresh_token)
        user_id = int(payload['sub'])
    except (jwt.PyJWTError, KeyError, TypeError, ValueError) as exc:
        raise AuthenticationError('Invalid refresh token') from exc

    user = user_repository.find_by_id(db, user_id)
    if user is None:
        raise AuthenticationError('Invalid refresh token')

    if incoming_refresh_token != user.refresh_token:
        raise AuthenticationError('Refresh token is expired or used')

    tokens = token_service.generate_access_and_refresh_tokens(db, user.id)

    response = ApiResponse(
        status.HTTP_200_OK,
        {'accessToken': tokens.access_token, 'refreshToken': tokens.refresh_token},
        'Access token refreshed',
    ).to_response()
    return set_auth_cookies(response, tokens)


@router.get('/current-user')
def get_current_user_profile(current_user: User = Depends(get_current_user)):
    return ApiResponse(
        status.HTTP_200_OK,
        UserResponse.model_validate(current_user),
        'Current user fetched successfully',
    ).to_response()
