from django.urls import path
from . import views

app_name = 'analytics'

urlpatterns = [
    # GET /api/analytics/?timeRange=7days
    path('', views.scan_report, name='scan-report'),
]
