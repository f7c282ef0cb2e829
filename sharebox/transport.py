"""HTTP client for the remote file service."""

import mimetypes
import uuid
from typing import Optional

import httpx
from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from common.logging_config import get_logger
from sharebox.config import Config
from sharebox.exceptions import NotAuthenticatedError
from sharebox.schemas import FileRecord, MessageResponse
from sharebox.session import SessionGuard
from sharebox.types import INVALID_RESPONSE, NETWORK, TIMEOUT, Outcome

logger = get_logger(__name__)

FILES_ENDPOINT = '/api/files/files'
UPLOAD_ENDPOINT = '/api/files/upload'
SHARE_ENDPOINT = '/api/files/share'

_file_list_adapter = TypeAdapter(list[FileRecord])

STATUS_MESSAGES = {
    400: 'Bad request',
    401: 'Not authenticated',
    403: 'Access forbidden',
    404: 'Not found',
    413: 'File too large',
    500: 'Server error',
    502: 'Bad gateway',
    503: 'Service unavailable',
}


class FileServiceClient:
    """
    Async HTTP client for the file service.

    Every public method returns an Outcome; transport errors and non-2xx
    responses are converted here and never raised to the caller. A 401 on
    any authenticated call invalidates the session through the guard.
    """

    def __init__(self, config: Config, guard: SessionGuard):
        """
        Initialize the file service client.

        Args:
            config: Configuration instance (base URL, timeout)
            guard: Session guard holding the bearer credential
        """
        self.config = config
        self.guard = guard
        self.session = httpx.AsyncClient(
            base_url=config.get_base_url(),
            timeout=config.get_timeout()
        )
        logger.info(f"Initialized FileServiceClient [base_url={config.get_base_url()}]")

    def _calculate_upload_timeout(self, file_size: int) -> float:
        """
        Calculate timeout for upload based on file size.

        Args:
            file_size: File size in bytes

        Returns:
            Timeout in seconds (configured base + 0.1s per MB)
        """
        size_mb = file_size / (1024 * 1024)
        return self.config.get_timeout() + size_mb * 0.1

    def _format_error(self, response: httpx.Response) -> str:
        """
        Extract a user-facing message from an error response.

        The service answers with ``{"message": ...}``; ``detail`` is accepted
        as well, and bare status codes fall back to a generic description.
        """
        try:
            error_data = response.json()
        except ValueError:
            error_data = None

        if isinstance(error_data, dict):
            for key in ('message', 'detail', 'error'):
                value = error_data.get(key)
                if isinstance(value, str) and value:
                    return value

        return STATUS_MESSAGES.get(response.status_code, f"Request failed with status {response.status_code}")

    def _auth_headers(self, token: str) -> dict:
        return {'Authorization': f'Bearer {token}'}

    async def _request(
        self,
        method: str,
        endpoint: str,
        authenticated: bool = True,
        **kwargs
    ) -> Outcome:
        """
        Send a single request and normalize the result.

        Args:
            method: HTTP method
            endpoint: API path relative to the base URL
            authenticated: Whether to send the bearer token
            **kwargs: Additional arguments passed to httpx

        Returns:
            Outcome with the raw httpx.Response as data on success
        """
        headers = kwargs.pop('headers', {})
        token = None
        if authenticated:
            try:
                token = self.guard.require_session()
            except NotAuthenticatedError as e:
                return Outcome.failure(401, str(e))
            headers.update(self._auth_headers(token))

        request_id = str(uuid.uuid4())
        headers['X-Request-ID'] = request_id

        logger.debug(f"Making request: {method} {endpoint} [request_id={request_id}]")

        try:
            response = await self.session.request(method, endpoint, headers=headers, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"Request timed out: {method} {endpoint} error={type(e).__name__} [request_id={request_id}]")
            return Outcome.failure(TIMEOUT, "Request timed out. Server may be overloaded.")
        except (httpx.HTTPError, OSError) as e:
            logger.error(f"Network error: {method} {endpoint} error={e} [request_id={request_id}]")
            return Outcome.failure(NETWORK, f"Cannot connect to file service: {e}")

        logger.debug(
            f"Response received: {method} {endpoint} status={response.status_code} [request_id={request_id}]"
        )

        if response.is_success:
            return Outcome.success(response, status=response.status_code)

        message = self._format_error(response)
        logger.warning(
            f"Request rejected: {method} {endpoint} status={response.status_code} "
            f"message={message!r} [request_id={request_id}]"
        )
        if response.status_code == 401 and authenticated:
            self.guard.invalidate(f"{method} {endpoint} returned 401", token=token)
        return Outcome.failure(response.status_code, message)

    def _acknowledge(self, outcome: Outcome) -> Outcome:
        """Turn a successful response into an Outcome carrying MessageResponse."""
        if not outcome.ok:
            return outcome
        response: httpx.Response = outcome.data
        try:
            body = MessageResponse.model_validate(response.json())
        except (ValueError, PydanticValidationError):
            body = MessageResponse()
        return Outcome.success(body, status=outcome.status, message=body.message or "")

    async def list_files(self) -> Outcome:
        """
        Fetch the authenticated user's files.

        Returns:
            Outcome whose data is a list of FileRecord in server order
        """
        outcome = await self._request('GET', FILES_ENDPOINT)
        if not outcome.ok:
            return outcome

        try:
            files = _file_list_adapter.validate_python(outcome.data.json())
        except (ValueError, PydanticValidationError) as e:
            logger.error(f"Unexpected list response: {e}")
            return Outcome.failure(INVALID_RESPONSE, "File service returned an unexpected file list")

        logger.info(f"Listed {len(files)} file(s)")
        return Outcome.success(files, status=outcome.status)

    async def upload_file(self, content: bytes, filename: str) -> Outcome:
        """
        Upload a file as multipart form data.

        The response is only an acknowledgement; callers refresh the list to
        see the new record.

        Args:
            content: File bytes
            filename: Name sent with the multipart part
        """
        content_type = mimetypes.guess_type(filename)[0] or 'application/octet-stream'
        logger.info(f"Uploading {filename} ({len(content)} bytes)")
        outcome = await self._request(
            'POST',
            UPLOAD_ENDPOINT,
            files={'file': (filename, content, content_type)},
            timeout=self._calculate_upload_timeout(len(content)),
        )
        return self._acknowledge(outcome)

    async def toggle_privacy(self, file_id: str) -> Outcome:
        """
        Flip a file between private and public.

        The server toggles whatever state it currently holds, so two calls in
        a row cancel each other out. Callers wanting a specific state must
        compare against a fresh record first.
        """
        logger.info(f"Toggling privacy for file {file_id}")
        outcome = await self._request('PATCH', f'{FILES_ENDPOINT}/{file_id}/toggle-privacy')
        return self._acknowledge(outcome)

    async def delete_file(self, file_id: str) -> Outcome:
        """Permanently delete a file and its stored content."""
        logger.info(f"Deleting file {file_id}")
        outcome = await self._request('DELETE', f'{FILES_ENDPOINT}/{file_id}')
        return self._acknowledge(outcome)

    async def fetch_shared(self, share_id: str) -> Outcome:
        """
        Fetch a public file through its share link, without credentials.

        Returns:
            Outcome whose data is the file content as bytes
        """
        outcome = await self._request('GET', f'{SHARE_ENDPOINT}/{share_id}', authenticated=False)
        if not outcome.ok:
            return outcome
        return Outcome.success(outcome.data.content, status=outcome.status)

    async def close(self) -> None:
        """Close the HTTP session."""
        await self.session.aclose()


def share_path(share_id: Optional[str]) -> Optional[str]:
    """Path component of the public share endpoint for a share id."""
    if not share_id:
        return None
    return f'{SHARE_ENDPOINT}/{share_id}'
