"""
URL Configuration for the Planner Assistant
"""
from django.contrib import admin
from django.urls import path, include
from django.conf import settings

urlpatterns = [
    path('admin/', admin.site.urls),

    # API endpoints
    path('api/chat/', include('apps.assistant.urls')),
    path('api/planners/', include('apps.planners.urls')),
]

# Debug toolbar (only in development)
if settings.DEBUG:
    try:
        import debug_toolbar
        urlpatterns = [
            path('__debug__/', include(debug_toolbar.urls)),
        ] + urlpatterns
    except ImportError:
        pass  # debug_toolbar not installed
