"""Host workflow navigation."""

from typing import Optional, Protocol

from csv_importer.config.settings import DEFAULT_BATCH_REVIEW_URL_TEMPLATE
from csv_importer.models import NavigationAction


def build_batch_review_url(batch_id: str, template: str = DEFAULT_BATCH_REVIEW_URL_TEMPLATE) -> str:
    return template.format(batch_id=batch_id)


class WorkflowNavigator(Protocol):
    def finish(self) -> None:
        ...

    def redirect(self, url: str) -> None:
        """Replace the current browsing context with ``url``."""
        ...


class RecordingNavigator:
    """Keeps the last requested navigation for the host to act on."""

    def __init__(self) -> None:
        self.last_action: Optional[NavigationAction] = None

    def finish(self) -> None:
        self.last_action = NavigationAction(kind="finish")

    def redirect(self, url: str) -> None:
        self.last_action = NavigationAction(kind="redirect", url=url)
