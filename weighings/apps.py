from django.apps import AppConfig


class WeighingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "weighings"
    label = "weighings"
    verbose_name = "Pesajes"
