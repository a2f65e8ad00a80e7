from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView
from rnseanomaly.common import health

urlpatterns = [
    path('admin/', admin.site.urls),
    # Kubernetes health check endpoints
    path('healthz', health.healthz, name='healthz'),
    path('health', health.healthz, name='health'),
    path('readiness', health.readiness, name='readiness'),
    path('ready', health.readiness, name='ready'),
    path('startup', health.startup, name='startup'),
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('', include('rnseanomaly.accounts.urls')),
    path('', include('rnseanomaly.analyses.urls')),
]
