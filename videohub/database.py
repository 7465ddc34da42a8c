from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from videohub.core import config


connect_args = {"check_same_thread": False} if config.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(config.DATABASE_URL, connect_args=connect_args)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_user_schema_checked = False


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ensure_user_schema() -> None:
    global _user_schema_checked

    if _user_schema_checked:
        return

    with _schema_lock:
        if _user_schema_checked:
            return

        inspector = inspect(engine)

        if 'users' not in inspector.get_table_names():
            _user_schema_checked = True
            return

        existing_columns = {column['name'] for column in inspector.get_columns('users')}
        migration_steps = [
            ('cover_image', "ALTER TABLE users ADD COLUMN cover_image VARCHAR DEFAULT ''"),
            ('refresh_token', 'ALTER TABLE users ADD COLUMN refresh_token VARCHAR'),
            ('updated_at', 'ALTER TABLE users ADD COLUMN updated_at TIMESTAMP'),
        ]

        with engine.begin() as connection:
            for column_name, statement in migration_steps:
                if column_name not in existing_columns:
                    connection.execute(text(statement))
            if 'full_name' in existing_columns:
                connection.execute(
                    text('CREATE INDEX IF NOT EXISTS ix_users_full_name ON users(full_name)')
                )

        _user_schema_checked = True
