from django.urls import path

from .views import weighing_backup_view, weighing_dashboard_view

app_name = "weighings"

urlpatterns = [
    path("", weighing_dashboard_view, name="dashboard"),
    path("respaldo/", weighing_backup_view, name="backup"),
]
