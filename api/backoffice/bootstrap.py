"""Service construction and wiring.

All collaborators are created once per application and handed to each
other explicitly; nothing is looked up from a global container.
"""

import logging
from dataclasses import dataclass

from fastapi import FastAPI

from backoffice.core.config import Settings
from backoffice.core.security import AuthGate
from backoffice.handlers.core import CoreHandler
from backoffice.services.composer import ResponseComposer
from backoffice.services.dispatcher import ActionDispatcher
from backoffice.services.events import CoreEvents, EventBus, ListenerPriority
from backoffice.services.handlers import HandlerRegistry
from backoffice.services.localization import Translator
from backoffice.services.menu import MenuItem, MenuRegistry
from backoffice.services.routing import RouteResolver
from backoffice.services.templating import TemplateRenderer
from backoffice.session.store import SessionStore

logger = logging.getLogger(__name__)


@dataclass
class BackofficeServices:
    settings: Settings
    session_store: SessionStore
    auth_gate: AuthGate
    translator: Translator
    renderer: TemplateRenderer
    router: RouteResolver
    menu: MenuRegistry
    event_bus: EventBus
    registry: HandlerRegistry
    dispatcher: ActionDispatcher
    composer: ResponseComposer


def build_services(app: FastAPI, settings: Settings) -> BackofficeServices:
    """Create and wire every service for ``app``.

    Routes must already be included so the index URL can be resolved.
    """
    translator = Translator(
        settings.TRANSLATIONS_DIR_PATH,
        locale=settings.LOCALE,
        fallback_locale=settings.FALLBACK_LOCALE,
    )
    renderer = TemplateRenderer(settings.TEMPLATE_DIR_PATH, translator=translator)
    router = RouteResolver(app)
    auth_gate = AuthGate(settings)

    menu = MenuRegistry()
    menu.add(
        MenuItem(
            route_name=settings.INDEX_ROUTE_NAME,
            label=translator.translate("backoffice.core.dashboard"),
            uri=router.url_for(settings.INDEX_ROUTE_NAME),
        )
    )

    event_bus = EventBus()
    event_bus.subscribe(
        CoreEvents.GLOBAL_SEARCH, menu.on_global_search, priority=ListenerPriority.LOW
    )

    registry = HandlerRegistry()
    registry.register(CoreHandler(renderer))

    services = BackofficeServices(
        settings=settings,
        session_store=SessionStore(max_age=settings.SESSION_MAX_AGE),
        auth_gate=auth_gate,
        translator=translator,
        renderer=renderer,
        router=router,
        menu=menu,
        event_bus=event_bus,
        registry=registry,
        dispatcher=ActionDispatcher(registry, auth_gate, event_bus, renderer),
        composer=ResponseComposer(settings, registry, renderer, translator, router, menu),
    )
    logger.info(f"Backoffice services initialized with {len(registry)} handlers")
    return services
