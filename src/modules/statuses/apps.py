from django.apps import AppConfig


class StatusesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.statuses"
    label = "statuses"

    def ready(self) -> None:
        from modules.statuses import checks  # noqa: F401
