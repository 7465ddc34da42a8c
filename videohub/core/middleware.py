from fastapi import status
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from videohub.core.errors import error_envelope

LIMITED_CONTENT_TYPES = frozenset({'application/json', 'application/x-www-form-urlencoded'})


class BodySizeLimitMiddleware:
    """Reject JSON and URL-encoded bodies larger than ``max_body_size`` bytes.

    A declared Content-Length over the limit is rejected before reading.
    Otherwise the body is read up to the limit and replayed to the app, so
    chunked requests are held to the same cap. Multipart uploads are not
    limited here.
    """

    def __init__(self, app: ASGIApp, max_body_size: int, content_types=LIMITED_CONTENT_TYPES) -> None:
        self.app = app
        self.max_body_size = max_body_size
        self.content_types = frozenset(content_types)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope['type'] != 'http':
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        content_type = headers.get('content-type', '').split(';', 1)[0].strip().lower()
        if content_type not in self.content_types:
            await self.app(scope, receive, send)
            return

        content_length = headers.get('content-length', '')
        if content_length.isdigit() and int(content_length) > self.max_body_size:
            await self.reject(scope, receive, send)
            return

        chunks: list[bytes] = []
        received = 0
        more_body = True
        while more_body:
            message = await receive()
            if message['type'] == 'http.disconnect':
                return
            chunk = message.get('body', b'')
            received += len(chunk)
            if received > self.max_body_size:
                await self.reject(scope, receive, send)
                return
            chunks.append(chunk)
            more_body = message.get('more_body', False)

        body = b''.join(chunks)
        body_sent = False

        async def replay_receive() -> Message:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {'type': 'http.request', 'body': body, 'more_body': False}
            return await receive()

        await self.app(scope, replay_receive, send)

    async def reject(self, scope: Scope, receive: Receive, send: Send) -> None:
        response = error_envelope(
            status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            f'Request body exceeds {self.max_body_size} bytes',
        )
        await response(scope, receive, send)
