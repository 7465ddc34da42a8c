import os
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')
os.environ.setdefault('PUBLIC_DIR', tempfile.mkdtemp(prefix='videohub-public-'))

from videohub.core import config  # noqa: E402
from videohub.database import Base, get_db  # noqa: E402
from videohub.main import create_app  # noqa: E402
from videohub.models.user import User  # noqa: E402


class FakeUploader:
    """Stands in for the media host; returns a URL per staged file."""

    def __init__(self) -> None:
        self.uploaded: list[str] = []
        self.failing_names: set[str] = set()

    def upload(self, local_path):
        if not local_path:
            return None
        path = Path(local_path)
        original_name = path.name.split('-', 1)[-1]
        path.unlink(missing_ok=True)
        self.uploaded.append(original_name)
        if original_name in self.failing_names:
            return None
        return f'https://media.example.com/{original_name}'


@pytest.fixture(autouse=True)
def temp_upload_dir(tmp_path, monkeypatch: pytest.MonkeyPatch):
    upload_dir = tmp_path / 'temp'
    monkeypatch.setattr(config, 'TEMP_UPLOAD_DIR', str(upload_dir))
    return upload_dir


@pytest.fixture
def user_db():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine, tables=[User.__table__])

    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine, tables=[User.__table__])


@pytest.fixture
def uploader() -> FakeUploader:
    return FakeUploader()


@pytest.fixture
def client(user_db, uploader):
    app = create_app(media_uploader=uploader)

    def override_get_db():
        yield user_db

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)
