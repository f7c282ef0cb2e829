"""Unit tests for FileServiceClient."""

import httpx
import pytest

from sharebox.schemas import FileRecord, MessageResponse
from sharebox.session import Session, SessionGuard
from sharebox.transport import FileServiceClient
from sharebox.types import INVALID_RESPONSE, NETWORK, TIMEOUT, OutcomeKind

FILE_JSON = {
    '_id': '64f1a2b3c4d5e6f7a8b9c0d1',
    'filename': 'report.pdf',
    'fileURl': 'https://storage.test/report.pdf',
    'isPublic': True,
    'shareId': 'share123',
    'createdAt': '2024-01-01T00:00:00Z',
}


@pytest.fixture
def guard(temp_config):
    """Guard with a stored token."""
    temp_config.set_token('tok_abc')
    return SessionGuard(Session(temp_config))


def make_client(temp_config, guard, handler) -> FileServiceClient:
    client = FileServiceClient(temp_config, guard)
    client.session = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url='http://test')
    return client


@pytest.mark.asyncio
async def test_list_files_success(temp_config, guard):
    """Test listing parses records and sends the bearer token."""
    seen = {}

    def handler(request):
        seen['auth'] = request.headers.get('Authorization')
        seen['request_id'] = request.headers.get('X-Request-ID')
        return httpx.Response(200, json=[FILE_JSON])

    client = make_client(temp_config, guard, handler)
    outcome = await client.list_files()

    assert outcome.ok
    assert seen['auth'] == 'Bearer tok_abc'
    assert seen['request_id']
    record = outcome.data[0]
    assert isinstance(record, FileRecord)
    assert record.id == '64f1a2b3c4d5e6f7a8b9c0d1'
    assert record.file_url == 'https://storage.test/report.pdf'
    assert record.share_id == 'share123'


@pytest.mark.asyncio
async def test_list_files_unexpected_body(temp_config, guard):
    """Test a malformed listing is reported, not raised."""
    client = make_client(temp_config, guard, lambda request: httpx.Response(200, json={'files': 'nope'}))

    outcome = await client.list_files()

    assert not outcome.ok
    assert outcome.status == INVALID_RESPONSE
    assert outcome.kind is OutcomeKind.NETWORK_FAILURE


@pytest.mark.asyncio
async def test_upload_sends_multipart(temp_config, guard):
    """Test upload posts the file as multipart field 'file'."""
    seen = {}

    def handler(request):
        seen['path'] = request.url.path
        seen['method'] = request.method
        seen['body'] = request.content
        return httpx.Response(201, json={'message': 'File uploaded'})

    client = make_client(temp_config, guard, handler)
    outcome = await client.upload_file(b'hello', 'notes.txt')

    assert outcome.ok
    assert isinstance(outcome.data, MessageResponse)
    assert outcome.message == 'File uploaded'
    assert seen['method'] == 'POST'
    assert seen['path'] == '/api/files/upload'
    assert b'name="file"' in seen['body']
    assert b'filename="notes.txt"' in seen['body']


@pytest.mark.asyncio
async def test_toggle_privacy_request(temp_config, guard):
    """Test toggle uses PATCH on the toggle endpoint without a target."""
    seen = {}

    def handler(request):
        seen['method'] = request.method
        seen['path'] = request.url.path
        seen['body'] = request.content
        return httpx.Response(200, json={'message': 'File is now public'})

    client = make_client(temp_config, guard, handler)
    outcome = await client.toggle_privacy('abc')

    assert outcome.ok
    assert outcome.message == 'File is now public'
    assert seen == {'method': 'PATCH', 'path': '/api/files/files/abc/toggle-privacy', 'body': b''}


@pytest.mark.asyncio
async def test_delete_file_not_found(temp_config, guard):
    """Test delete failure carries the server message."""
    client = make_client(
        temp_config, guard,
        lambda request: httpx.Response(404, json={'message': 'File not found'})
    )

    outcome = await client.delete_file('missing')

    assert not outcome.ok
    assert outcome.status == 404
    assert outcome.message == 'File not found'
    assert outcome.kind is OutcomeKind.REMOTE_REJECTED


@pytest.mark.asyncio
async def test_error_detail_fallback(temp_config, guard):
    """Test 'detail' is used when there is no 'message' field."""
    client = make_client(
        temp_config, guard,
        lambda request: httpx.Response(403, json={'detail': 'Not your file'})
    )

    outcome = await client.toggle_privacy('abc')

    assert outcome.message == 'Not your file'


@pytest.mark.asyncio
async def test_error_without_body_uses_status_text(temp_config, guard):
    """Test a bare status code maps to a generic message."""
    client = make_client(temp_config, guard, lambda request: httpx.Response(503, text='oops'))

    outcome = await client.delete_file('abc')

    assert outcome.message == 'Service unavailable'


@pytest.mark.asyncio
async def test_no_retry_on_server_error(temp_config, guard):
    """Test requests are attempted exactly once."""
    call_count = 0

    def handler(request):
        nonlocal call_count
        call_count += 1
        return httpx.Response(500, json={'message': 'Server error'})

    client = make_client(temp_config, guard, handler)
    outcome = await client.list_files()

    assert not outcome.ok
    assert call_count == 1


@pytest.mark.asyncio
async def test_connection_error_handling(temp_config, guard):
    """Test connection errors become network outcomes."""
    def failing_handler(request):
        raise httpx.ConnectError("Connection refused")

    client = make_client(temp_config, guard, failing_handler)
    outcome = await client.list_files()

    assert outcome.status == NETWORK
    assert 'Cannot connect to file service' in outcome.message
    assert outcome.kind is OutcomeKind.NETWORK_FAILURE


@pytest.mark.asyncio
async def test_timeout_handling(temp_config, guard):
    """Test timeouts become timeout outcomes."""
    def slow_handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    client = make_client(temp_config, guard, slow_handler)
    outcome = await client.toggle_privacy('abc')

    assert outcome.status == TIMEOUT
    assert outcome.kind is OutcomeKind.NETWORK_FAILURE


@pytest.mark.asyncio
async def test_401_invalidates_session(temp_config, guard):
    """Test an unauthorized response clears the stored token."""
    fired = []
    guard.on_invalidated(fired.append)
    client = make_client(
        temp_config, guard,
        lambda request: httpx.Response(401, json={'message': 'Invalid token'})
    )

    outcome = await client.list_files()

    assert outcome.kind is OutcomeKind.UNAUTHENTICATED
    assert not guard.authenticated
    assert temp_config.get_token() is None
    assert len(fired) == 1


@pytest.mark.asyncio
async def test_not_logged_in_makes_no_request(temp_config):
    """Test calls without a token never reach the network."""
    call_count = 0

    def handler(request):
        nonlocal call_count
        call_count += 1
        return httpx.Response(200, json=[])

    client = make_client(temp_config, SessionGuard(Session(temp_config)), handler)
    outcome = await client.list_files()

    assert outcome.kind is OutcomeKind.UNAUTHENTICATED
    assert 'Not logged in' in outcome.message
    assert call_count == 0


@pytest.mark.asyncio
async def test_fetch_shared_is_unauthenticated(temp_config, guard):
    """Test share links are fetched without credentials and a 404 keeps the session."""
    seen = {}

    def handler(request):
        seen['auth'] = request.headers.get('Authorization')
        if request.url.path == '/api/files/share/good':
            return httpx.Response(200, content=b'data')
        return httpx.Response(404, json={'message': 'File not found or not public'})

    client = make_client(temp_config, guard, handler)

    outcome = await client.fetch_shared('good')
    assert outcome.ok
    assert outcome.data == b'data'
    assert seen['auth'] is None

    missing = await client.fetch_shared('gone')
    assert missing.status == 404
    assert guard.authenticated


def test_upload_timeout_grows_with_size(temp_config, guard):
    """Test upload timeout is the configured base plus 0.1s per MB."""
    client = FileServiceClient(temp_config, guard)

    assert client._calculate_upload_timeout(0) == temp_config.get_timeout()
    assert client._calculate_upload_timeout(10 * 1024 * 1024) == pytest.approx(temp_config.get_timeout() + 1.0)


@pytest.mark.asyncio
async def test_close_session(temp_config, guard):
    """Test closing HTTP session."""
    client = FileServiceClient(temp_config, guard)
    await client.close()
    assert client.session.is_closed


@pytest.mark.asyncio
async def test_401_for_replaced_token_keeps_session(temp_config, guard):
    """Test a rejection of an old token does not end a newer session."""
    def handler(request):
        guard.authenticate('tok_new')
        return httpx.Response(401, json={'message': 'Invalid token'})

    client = make_client(temp_config, guard, handler)
    outcome = await client.toggle_privacy('abc')

    assert outcome.kind is OutcomeKind.UNAUTHENTICATED
    assert guard.authenticated
    assert temp_config.get_token() == 'tok_new'
