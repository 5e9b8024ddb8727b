from django.contrib import admin
from django.urls import include, path
from django.conf import settings
from django.conf.urls.static import static

workspace_patterns = [
    path("customers/", include("customers.urls")),
    path("invoicing/", include("invoicing.urls")),
    path("budget/", include("budget.urls")),
    path("finance/", include("finance.urls")),
    path("flow/", include("flow.urls")),
    path("food/", include("food.urls")),
    path("dashboard/", include("dashboard.urls")),
]

urlpatterns = [
    # Operations endpoints (no auth required)
    path("_health/", include("ops.urls")),

    # Admin and API
    path("admin/", admin.site.urls),
    path("api/", include("accounts.urls")),
    path("api/workspaces/<int:workspace_id>/", include(workspace_patterns)),
    path("api-auth/", include("rest_framework.urls")),
]

# Serve media files in development
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
