from django.urls import path

from .views import weighing_report_pdf_view, weighing_report_xlsx_view

app_name = "reports"

urlpatterns = [
    path("pesajes.pdf", weighing_report_pdf_view, name="weighings-pdf"),
    path("pesajes.xlsx", weighing_report_xlsx_view, name="weighings-xlsx"),
]
