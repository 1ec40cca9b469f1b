from src.event_handler.application.handlers.configuration_handler import ConfigurationEventHandler
from src.event_handler.application.handlers.project_handler import ProjectEventHandler
from src.event_handler.application.handlers.system_handler import SystemEventHandler
from src.event_handler.infrastructure.routing.router import EventRouter
from src.setup.api_config import ApiSettings


def configure_router(settings: ApiSettings) -> EventRouter:
    """Build the process-wide router with the bundled domain handlers."""
    router = EventRouter()
    delay_scale = settings.SIMULATED_DELAY_SCALE
    router.register("project.*", ProjectEventHandler(delay_scale=delay_scale))
    router.register("configuration.*", ConfigurationEventHandler(delay_scale=delay_scale))
    router.register("system.*", SystemEventHandler(delay_scale=delay_scale))
    return router
