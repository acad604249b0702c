"""
URL configuration for the anncor project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.0/topics/http/urls/
"""
from django.contrib import admin
from django.urls import include, path
from django.views.generic import RedirectView

admin.site.site_header = "Administracion de ANNCOR"
admin.site.site_title = "Administracion de ANNCOR"
admin.site.index_title = "Panel de administracion"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', RedirectView.as_view(pattern_name='weighings:dashboard', permanent=False)),
    path('pesajes/', include('weighings.urls', namespace='weighings')),
    path('reportes/', include('reports.urls', namespace='reports')),
]
