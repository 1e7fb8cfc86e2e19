# services/navigation.py
# Turns a RedirectDestination into a URL for the configured surfaces

from typing import Dict, Optional
from urllib.parse import urlencode

from core.logging_config import logger
from models.access import RedirectDestination
from models.enums import RedirectKind


MODULE_DISPLAY_NAMES = {
    "scheduler": "Lesson Scheduler",
    "lunch-menu": "Lunch Menu",
}


def module_display_name(module_name: str) -> str:
    return MODULE_DISPLAY_NAMES.get(module_name, module_name)


def destination_url(
    destination: RedirectDestination,
    hub_url: str,
    setup_url: str,
    module_hosts: Dict[str, str],
) -> Optional[str]:
    """
    Returns None when the destination names a module with no configured host;
    the caller decides what to show in that case.
    """
    hub = hub_url.rstrip("/")

    if destination.kind == RedirectKind.school_setup:
        return setup_url

    if destination.kind == RedirectKind.school_selection:
        return hub

    if destination.kind == RedirectKind.module_selection:
        return f"{hub}?{urlencode({'school': destination.organization_id})}"

    host = module_hosts.get(destination.target)
    if not host:
        logger.warning(f"Unknown module: {destination.target}")
        return None
    return f"{host.rstrip('/')}?{urlencode({'school': destination.organization_id})}"
