import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class JeopardyAppConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "jeopardy_app"

    def ready(self):
        """Log the board dimensions and provider in use once Django has started."""
        from django.conf import settings

        logger.info(
            f"Jeopardy board: {settings.JEOPARDY_CATEGORY_COUNT} categories x "
            f"{settings.JEOPARDY_QUESTION_COUNT} questions from {settings.JEOPARDY_PROVIDER_BASE_URL}"
        )
