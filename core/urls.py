# core/urls.py
from django.urls import path
from . import views

app_name = 'core'

urlpatterns = [
    path('dashboard/stats/', views.dashboard_stats_view, name='dashboard_stats'),
    path('settings/backup/', views.download_backup, name='download_backup'),
    path('settings/system-info/', views.system_info, name='system_info'),
]
