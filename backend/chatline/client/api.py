"""
REST client for the chat service.

Sends use a longer timeout when they carry a video or a large image, since
base64 media can take minutes to upload on a slow link.
"""

import logging
from typing import Any, Optional

import httpx

from chatline.application.dto.message import MessageDTO
from chatline.application.dto.user import RosterEntryDTO
from chatline.client.errors import (
    MediaFormatRejectedError,
    MediaTooLargeError,
    NetworkError,
    RequestRejectedError,
    RequestTimeoutError,
    SendNetworkError,
    SendRejectedError,
    SendTimeoutError,
)
from chatline.config.settings import Config

logger = logging.getLogger(__name__)


def _error_detail(response: httpx.Response) -> str:
    error_detail = response.text
    try:
        error_data = response.json()
        error_detail = error_data.get("error") or error_data.get("detail") or error_detail
    except (ValueError, AttributeError):
        pass
    return str(error_detail)


class ChatApiClient:
    def __init__(
        self,
        token: str,
        base_url: str = Config.CLIENT_BASE_URL,
        request_timeout: float = Config.CLIENT_REQUEST_TIMEOUT,
        media_timeout: float = Config.CLIENT_MEDIA_TIMEOUT,
        large_media_chars: int = Config.CLIENT_LARGE_MEDIA_CHARS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._request_timeout = request_timeout
        self._media_timeout = media_timeout
        self._large_media_chars = large_media_chars
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {token}"},
            timeout=request_timeout,
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def send_timeout(self, image: Optional[str] = None, video: Optional[str] = None) -> float:
        if video or (image and len(image) > self._large_media_chars):
            return self._media_timeout
        return self._request_timeout

    async def list_users(self) -> list[RosterEntryDTO]:
        data = await self._request("GET", "/users", timeout=self._request_timeout)
        return [RosterEntryDTO.model_validate(item) for item in data]

    async def get_messages(
        self, peer_id: str, limit: Optional[int] = None
    ) -> list[MessageDTO]:
        params = {"limit": limit} if limit else None
        data = await self._request(
            "GET", f"/messages/{peer_id}", timeout=self._request_timeout, params=params
        )
        return [MessageDTO.model_validate(item) for item in data]

    async def send_message(
        self,
        peer_id: str,
        text: Optional[str] = None,
        image: Optional[str] = None,
        video: Optional[str] = None,
    ) -> MessageDTO:
        """
        Raises:
            SendTimeoutError: No answer in time; outcome unknown
            SendNetworkError: Request failed in transit
            MediaTooLargeError: 413
            MediaFormatRejectedError: 415
            SendRejectedError: Any other error status
        """
        payload = {"text": text, "image": image, "video": video}
        data = await self._request(
            "POST",
            f"/messages/send/{peer_id}",
            timeout=self.send_timeout(image, video),
            json=payload,
            sending=True,
        )
        return MessageDTO.model_validate(data)

    async def _request(
        self, method: str, url: str, timeout: float, sending: bool = False, **kwargs: Any
    ) -> Any:
        try:
            response = await self._client.request(method, url, timeout=timeout, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning(f"[ChatApiClient] {method} {url} timed out after {timeout}s")
            raise (SendTimeoutError if sending else RequestTimeoutError)(str(e)) from e
        except httpx.TransportError as e:
            logger.warning(f"[ChatApiClient] {method} {url} failed: {e}")
            raise (SendNetworkError if sending else NetworkError)(str(e)) from e

        if response.status_code >= 400:
            detail = _error_detail(response)
            if not sending:
                raise RequestRejectedError(response.status_code, detail)
            if response.status_code == 413:
                raise MediaTooLargeError(response.status_code, detail)
            if response.status_code == 415:
                raise MediaFormatRejectedError(response.status_code, detail)
            raise SendRejectedError(response.status_code, detail)

        return response.json()
