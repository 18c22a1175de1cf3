"""
Print fulfilment (placeholder until a print partner is wired in)
"""

from dataclasses import dataclass
from typing import Optional
import logging
import uuid

from storybook.core.config import settings

logger = logging.getLogger(__name__)


@dataclass
class PrintJobHandle:
    print_url: str
    message: str


class PrintService:
    """Builds order links on the print partner's site. No job is submitted."""

    STORY = "story"
    SCRAPBOOK = "scrapbook"

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")

    def submit_for_print(self, kind: str, record_id: uuid.UUID) -> PrintJobHandle:
        if kind == self.STORY:
            handle = PrintJobHandle(
                print_url=f"{self.base_url}/order?story={record_id}",
                message="Demo: Real printing integration coming soon!",
            )
        elif kind == self.SCRAPBOOK:
            handle = PrintJobHandle(
                print_url=f"{self.base_url}/scrapbook?id={record_id}",
                message="Demo: Scrapbook printing integration coming soon!",
            )
        else:
            raise ValueError(f"Unknown print kind: {kind}")
        logger.info(f"Print link issued: kind={kind} id={record_id}")
        return handle


_print_service: Optional[PrintService] = None


def get_print_service() -> PrintService:
    global _print_service
    if _print_service is None:
        _print_service = PrintService(settings.PRINT_BASE_URL)
    return _print_service
