"""Sentry context middleware to capture request context in error reports."""

import sentry_sdk
from starlette.types import ASGIApp, Receive, Scope, Send

from shopledger.core.logging import get_request_id


class SentryContextMiddleware:
    """
    Inject structured context into Sentry error reports.

    Captures:
    - request_id: set by RequestIDMiddleware, which runs first
    - shopkeeper_id: authenticated shopkeeper (if any)
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = get_request_id()
        session = scope.get("session", {})
        shopkeeper_id = session.get("user_id")

        sentry_sdk.set_tag("request_id", request_id)
        if shopkeeper_id:
            sentry_sdk.set_user({"id": shopkeeper_id})
            sentry_sdk.set_tag("shopkeeper_id", shopkeeper_id)

        sentry_sdk.set_context(
            "request",
            {
                "method": scope.get("method"),
                "path": scope.get("path"),
                "request_id": request_id,
            },
        )

        await self.app(scope, receive, send)
