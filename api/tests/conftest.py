"""
Pytest configuration and fixtures for the Backoffice API.

This module provides:
- Test settings with an isolated environment
- Application and client fixtures (anonymous and authenticated)
- Factories for bare RequestContext objects used by unit tests
"""

from typing import Any, Callable, Dict, Optional

import pytest
from backoffice.bootstrap import BackofficeServices
from backoffice.context import RequestContext
from backoffice.core.config import Settings
from backoffice.core.security import AuthLevel
from backoffice.main import create_app
from backoffice.models.intent import ActionIntent, FlashKind, FlashMessage
from backoffice.services.composer import ResponseComposer
from backoffice.services.handlers import BaseHandler, ajax_action, object_action, view
from backoffice.session.store import Session
from fastapi import FastAPI
from fastapi.testclient import TestClient

TEST_API_KEY = "test-admin-key-0123456789abcdef"
AJAX_HEADERS = {"X-Requested-With": "XMLHttpRequest"}


class WidgetHandler(BaseHandler):
    """Handler registered by tests to exercise forwarding and object actions."""

    component = "widget"
    name = "default"

    def __init__(self, composer: ResponseComposer):
        super().__init__()
        self.composer = composer

    @ajax_action("rename")
    def rename(self, ctx: RequestContext) -> Dict[str, Any]:
        return {"success": 1, "name": ctx.param("name", "")}

    @view("list")
    def list_view(self, params, ctx: RequestContext) -> str:
        return f"<ul class='widgets' data-page='{params.get('page', 1)}'></ul>"

    @object_action("delete")
    def delete(self, object_id: str, ctx: RequestContext):
        intent = ActionIntent(
            return_url="/",
            content_template_id="widget:default:list",
            passthrough_vars={"deletedId": object_id},
            flashes=(
                FlashMessage(
                    FlashKind.SUCCESS,
                    "backoffice.core.notice.saved",
                    {"%name%": f"Widget {object_id}"},
                ),
            ),
        )
        return self.composer.compose(intent, ctx)


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings with isolated test environment.

    - Plain HTTP cookies so the test client sends them back
    - A known admin API key
    - HTTP instrumentation off (metrics registry is process-global)
    """
    return Settings(
        DEBUG=True,
        ENVIRONMENT="testing",
        COOKIE_SECURE=False,
        ADMIN_API_KEY=TEST_API_KEY,
        ENABLE_HTTP_METRICS=False,
    )


@pytest.fixture
def app(test_settings: Settings) -> FastAPI:
    application = create_app(test_settings)
    services = application.state.services
    services.registry.register(WidgetHandler(services.composer))
    return application


@pytest.fixture
def services(app: FastAPI) -> BackofficeServices:
    return app.state.services


@pytest.fixture
def test_client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def authenticated_client(test_client: TestClient) -> TestClient:
    """Test client whose session went through the login flow."""
    response = test_client.post(
        "/login", data={"api_key": TEST_API_KEY}, follow_redirects=False
    )
    assert response.status_code == 301
    # Drain the login flash so tests start with an empty queue
    test_client.get("/")
    return test_client


@pytest.fixture
def make_context() -> Callable[..., RequestContext]:
    """Factory for RequestContext objects that bypass HTTP entirely."""

    def _make(
        session: Optional[Session] = None,
        *,
        ajax: bool = False,
        auth_level: AuthLevel = AuthLevel.FULLY,
        headers: Optional[Dict[str, str]] = None,
        **kwargs: Any,
    ) -> RequestContext:
        all_headers = dict(headers or {})
        if ajax:
            all_headers.update(AJAX_HEADERS)
        return RequestContext(
            session or Session("test-session"),
            headers=all_headers,
            auth_level=auth_level,
            **kwargs,
        )

    return _make
