import hashlib

import pytest
import requests

from videohub.services.media_uploader import CloudinaryUploader


class _FakeResponse:
    def __init__(self, payload: dict, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f'{self.status_code} error')

    def json(self) -> dict:
        return self._payload


class _FakeSession:
    def __init__(self, response=None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[dict] = []

    def post(self, url, data=None, files=None, timeout=None):
        self.calls.append({'url': url, 'data': data, 'filename': files['file'][0], 'timeout': timeout})
        if self.error is not None:
            raise self.error
        return self.response


def _uploader(session) -> CloudinaryUploader:
    return CloudinaryUploader('demo', 'key', 'secret', timeout=5, session=session)


@pytest.fixture
def staged_file(tmp_path):
    path = tmp_path / 'avatar.png'
    path.write_bytes(b'png-bytes')
    return path


def test_sign_matches_cloudinary_scheme() -> None:
    uploader = _uploader(_FakeSession())

    expected = hashlib.sha1(b'timestamp=1700000000secret').hexdigest()
    assert uploader.sign({'timestamp': 1700000000}) == expected


def test_sign_matches_documented_cloudinary_example() -> None:
    uploader = CloudinaryUploader('demo', 'key', 'abcd', session=_FakeSession())
    params = {
        'timestamp': 1315060510,
        'public_id': 'sample_image',
        'eager': 'w_400,h_300,c_pad|w_260,h_200,c_crop',
    }

    assert uploader.sign(params) == 'bfd09f95f331f558cbd1320e67aa8d488770583e'


def test_upload_returns_secure_url_and_removes_file(staged_file) -> None:
    session = _FakeSession(_FakeResponse({'secure_url': 'https://res.example.com/a.png', 'url': 'http://x'}))

    url = _uploader(session).upload(staged_file)

    assert url == 'https://res.example.com/a.png'
    assert not staged_file.exists()
    assert session.calls[0]['url'] == 'https://api.cloudinary.com/v1_1/demo/auto/upload'
    assert session.calls[0]['data']['api_key'] == 'key'
    assert session.calls[0]['filename'] == 'avatar.png'
    assert session.calls[0]['timeout'] == 5


def test_upload_returns_none_on_http_error(staged_file) -> None:
    session = _FakeSession(_FakeResponse({}, status_code=500))

    assert _uploader(session).upload(staged_file) is None
    assert not staged_file.exists()


def test_upload_returns_none_on_connection_error(staged_file) -> None:
    session = _FakeSession(error=requests.ConnectionError('unreachable'))

    assert _uploader(session).upload(staged_file) is None
    assert not staged_file.exists()


def test_upload_without_credentials_returns_none(staged_file) -> None:
    session = _FakeSession()
    uploader = CloudinaryUploader('', '', '', session=session)

    assert uploader.upload(staged_file) is None
    assert session.calls == []
    assert not staged_file.exists()


def test_upload_without_path_returns_none() -> None:
    assert _uploader(_FakeSession()).upload(None) is None


def test_upload_of_missing_file_returns_none(tmp_path) -> None:
    assert _uploader(_FakeSession()).upload(tmp_path / 'missing.png') is None
