# awards_project/urls.py
from django.contrib import admin
from django.urls import path, include

from rest_framework_simplejwt.views import (
    TokenObtainPairView,
    TokenRefreshView,
)

urlpatterns = [
    path('admin/', admin.site.urls),

    path('accounts/', include('accounts.urls')),

    # --- Admin dashboard ---
    path('awards/', include('awards.urls')),
    path('organisations/', include('organisations.urls')),
    path('', include('core.urls')),

    # --- Public flows ---
    path('entries/', include('entries.urls')),
    path('vote/', include('voting.urls')),

    # Token endpoints for API clients
    path('api/token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('api/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
]
