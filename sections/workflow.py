import enum
import logging
from dataclasses import dataclass
from typing import Optional

from .results import Failure, Theme, WorkflowResult
from .section_publisher import publish_section
from .theme_resolver import resolve_main_theme

logger = logging.getLogger(__name__)

NO_THEME_MESSAGE = "No active theme found. Please ensure your theme is active and has the role 'main'."


class WorkflowState(enum.Enum):
    START = "start"
    RESOLVING_THEME = "resolving_theme"
    NO_THEME = "no_theme"
    PUBLISHING = "publishing"
    PUBLISH_FAILED = "publish_failed"
    PUBLISHED = "published"


@dataclass
class WorkflowRun:
    state: WorkflowState
    result: WorkflowResult
    theme: Optional[Theme] = None


def _transition(admin, state):
    logger.debug("[Section] %s -> %s", admin.shop, state.name)
    return state


def add_section(admin, now_ms=None) -> WorkflowRun:
    """
    Resolve the store's live theme, then publish the section onto it.
    Nothing is written unless a main theme was found.
    """
    _transition(admin, WorkflowState.START)

    _transition(admin, WorkflowState.RESOLVING_THEME)
    theme = resolve_main_theme(admin)
    if theme is None:
        state = _transition(admin, WorkflowState.NO_THEME)
        return WorkflowRun(state=state, result=Failure(error=NO_THEME_MESSAGE))

    _transition(admin, WorkflowState.PUBLISHING)
    result = publish_section(admin, theme.id, now_ms=now_ms)

    if isinstance(result, Failure):
        state = _transition(admin, WorkflowState.PUBLISH_FAILED)
    else:
        state = _transition(admin, WorkflowState.PUBLISHED)
    return WorkflowRun(state=state, result=result, theme=theme)
