"""Shared pytest fixtures for all tests."""

import asyncio
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

import httpx
import pytest
from prompt_toolkit.clipboard import InMemoryClipboard

from sharebox.config import Config
from sharebox.manager import FileCollectionManager

TEST_TOKEN = 'test-token'
BASE_URL = 'http://test'

_FILENAME_RE = re.compile(rb'filename="([^"]+)"')
_FILE_PATH_RE = re.compile(r'^/api/files/files/([^/]+)$')
_TOGGLE_PATH_RE = re.compile(r'^/api/files/files/([^/]+)/toggle-privacy$')
_SHARE_PATH_RE = re.compile(r'^/api/files/share/([^/]+)$')


class FakeFileService:
    """
    In-memory stand-in for the remote file service.

    Mirrors the HTTP contract: bearer auth, toggle semantics, share ids that
    exist only while a file is public, 404 for unknown ids.
    """

    def __init__(self, token: str = TEST_TOKEN):
        self.token = token
        self.files: dict[str, dict] = {}
        self.contents: dict[str, bytes] = {}
        self.requests: list[httpx.Request] = []
        self.overrides: dict[tuple[str, str], tuple[int, Any]] = {}
        self.gate: Optional[asyncio.Event] = None
        self.gated_methods = {'POST', 'PATCH', 'DELETE'}

    def add_file(self, filename: str, is_public: bool = False, content: bytes = b'content') -> dict:
        file_id = uuid.uuid4().hex[:24]
        record = {
            '_id': file_id,
            'filename': filename,
            'fileURl': f'https://storage.test/{file_id}/{filename}',
            'isPublic': is_public,
            'createdAt': datetime.now(timezone.utc).isoformat(),
        }
        if is_public:
            record['shareId'] = uuid.uuid4().hex
        self.files[file_id] = record
        self.contents[file_id] = content
        return record

    def override(self, method: str, path: str, status: int, body: Any = None) -> None:
        """Answer ``method path`` with a fixed response instead of the fake logic."""
        self.overrides[(method, path)] = (status, body)

    def count(self, method: str, path_prefix: str = '') -> int:
        return sum(
            1 for r in self.requests
            if r.method == method and r.url.path.startswith(path_prefix)
        )

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.gate is not None and request.method in self.gated_methods:
            await self.gate.wait()
        return self.respond(request)

    def respond(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        method = request.method

        if (method, path) in self.overrides:
            status, body = self.overrides[(method, path)]
            if body is None:
                return httpx.Response(status, content=b"")
            return httpx.Response(status, json=body)

        share = _SHARE_PATH_RE.match(path)
        if share and method == 'GET':
            for file_id, record in self.files.items():
                if record.get('shareId') == share.group(1) and record['isPublic']:
                    return httpx.Response(200, content=self.contents[file_id])
            return httpx.Response(404, json={'message': 'File not found or not public'})

        if request.headers.get('Authorization') != f'Bearer {self.token}':
            return httpx.Response(401, json={'message': 'Invalid or expired token'})

        if path == '/api/files/files' and method == 'GET':
            return httpx.Response(200, json=list(self.files.values()))

        if path == '/api/files/upload' and method == 'POST':
            match = _FILENAME_RE.search(request.content)
            if match is None:
                return httpx.Response(400, json={'message': 'No file uploaded'})
            record = self.add_file(match.group(1).decode())
            return httpx.Response(201, json={'message': 'File uploaded', 'file': record})

        toggle = _TOGGLE_PATH_RE.match(path)
        if toggle and method == 'PATCH':
            record = self.files.get(toggle.group(1))
            if record is None:
                return httpx.Response(404, json={'message': 'File not found'})
            record['isPublic'] = not record['isPublic']
            if record['isPublic']:
                record['shareId'] = uuid.uuid4().hex
                return httpx.Response(200, json={'message': 'File is now public'})
            record.pop('shareId', None)
            return httpx.Response(200, json={'message': 'File is now private'})

        file_path = _FILE_PATH_RE.match(path)
        if file_path and method == 'DELETE':
            if self.files.pop(file_path.group(1), None) is None:
                return httpx.Response(404, json={'message': 'File not found'})
            return httpx.Response(200, json={'message': 'File deleted'})

        return httpx.Response(404, json={'message': 'Route not found'})


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to temporary .sharebox directory
    """
    config_dir = tmp_path / '.sharebox'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary config instance pointing at the fake service.

    Returns:
        Config instance with temp config file
    """
    config = Config(temp_config_dir / 'config.json')
    config.data['base_url'] = BASE_URL
    return config


@pytest.fixture
def fake_service():
    """In-memory file service."""
    return FakeFileService()


def attach(manager: FileCollectionManager, service: FakeFileService) -> FileCollectionManager:
    """Route the manager's HTTP session to the fake service."""
    manager.client.session = httpx.AsyncClient(
        transport=httpx.MockTransport(service.handler),
        base_url=BASE_URL,
    )
    return manager


@pytest.fixture
def clipboard():
    return InMemoryClipboard()


@pytest.fixture
def manager(temp_config, fake_service, clipboard):
    """Authenticated manager wired to the fake service."""
    temp_config.set_token(TEST_TOKEN)
    return attach(FileCollectionManager(temp_config, clipboard=clipboard), fake_service)


@pytest.fixture
def signed_out_manager(temp_config, fake_service, clipboard):
    """Manager without a stored credential."""
    return attach(FileCollectionManager(temp_config, clipboard=clipboard), fake_service)


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a sample file for testing uploads.

    Returns:
        Path to report.pdf
    """
    file_path = tmp_path / 'report.pdf'
    file_path.write_bytes(b'%PDF-1.4 sample content for testing')
    return file_path
