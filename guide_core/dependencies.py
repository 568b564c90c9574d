"""
Service wiring

Provides the application-wide GuideService. Consumers that can take the
service by constructor should do so; this accessor exists for the
application's composition root.
"""
import logging

from guide_core.services.guide_service import GuideService


logger = logging.getLogger(__name__)

# Global service instance
_guide_service: GuideService | None = None


def get_guide_service() -> GuideService:
    """
    Get or create the global guide service.

    Returns:
        The global GuideService instance
    """
    global _guide_service
    if _guide_service is None:
        _guide_service = GuideService()
        logger.debug("Created guide service")
    return _guide_service


def reset_guide_service() -> None:
    """
    Reset the guide service (mainly for testing).

    WARNING: Only use this in test environments!
    """
    global _guide_service
    _guide_service = None
