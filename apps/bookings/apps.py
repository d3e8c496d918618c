from django.apps import AppConfig


class BookingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.bookings"

    def ready(self) -> None:
        # Fail at startup rather than on the first request if BOOKING_ENGINE is malformed
        from .application.config import EngineConfig

        EngineConfig.from_settings()
