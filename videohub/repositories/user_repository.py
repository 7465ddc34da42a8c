"""Persistence operations for user records."""

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from videohub.auth import passwords
from videohub.core.errors import ConflictError
from videohub.models.user import User

# Fields that may be written through ``update_field``. These writes skip the
# model validators, so only token rotation state belongs here.
PARTIAL_UPDATE_FIELDS = frozenset({'refresh_token'})


def find_by_id(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def find_by_username_or_email(
    db: Session,
    username: str | None = None,
    email: str | None = None,
) -> User | None:
    conditions = []
    if username:
        conditions.append(User.username == username.strip().lower())
    if email:
        conditions.append(User.email == email.strip().lower())
    if not conditions:
        return None
    return db.query(User).filter(or_(*conditions)).first()


def create_user(
    db: Session,
    *,
    username: str,
    email: str,
    full_name: str,
    password: str,
    avatar: str,
    cover_image: str = '',
) -> User:
    user = User(
        username=username,
        email=email,
        full_name=full_name,
        password=passwords.hash_password(password),
        avatar=avatar,
        cover_image=cover_image or '',
    )
    try:
        db.add(user)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError('User with email or username already exists') from exc
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(user)
    return user


def update_field(db: Session, user_id: int, field: str, value) -> int:
    """Write a single column for one user without running model validators.

    Database constraints still apply. Returns the number of rows updated.
    """
    if field not in PARTIAL_UPDATE_FIELDS:
        raise ValueError(f'{field} cannot be updated through a partial update')

    try:
        updated = (
            db.query(User)
            .filter(User.id == user_id)
            .update({getattr(User, field): value}, synchronize_session='fetch')
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return updated
