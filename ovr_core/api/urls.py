# ovr_core/api/urls.py
from __future__ import annotations

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from ovr_core.audit.api.views import AuditLogViewSet
from ovr_core.categories.api.views import CategoryViewSet
from ovr_core.facilities.api.views import FacilityViewSet
from ovr_core.iam.api.auth import LoginView, LogoutView, RefreshView, RegisterView
from ovr_core.iam.api.me import MeView
from ovr_core.iam.api.registrations import RegistrationViewSet
from ovr_core.iam.api.users import UserViewSet
from ovr_core.incidents.api.views import IncidentViewSet, PublicIncidentSubmitView

router = DefaultRouter()

# Reference data (public reads)
router.register(r"facilities", FacilityViewSet, basename="facilities")
router.register(r"categories", CategoryViewSet, basename="categories")

# ✅ Incidents (+ comments, closure workflow)
router.register(r"incidents", IncidentViewSet, basename="incidents")

# ✅ Administration
router.register(r"users", UserViewSet, basename="users")
router.register(r"admin/registrations", RegistrationViewSet, basename="registrations")
router.register(r"audit-logs", AuditLogViewSet, basename="audit-logs")

urlpatterns = [
    # 🔐 Auth
    path("auth/register/", RegisterView.as_view(), name="register"),
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/refresh/", RefreshView.as_view(), name="refresh"),
    path("auth/logout/", LogoutView.as_view(), name="logout"),
    path("auth/user/", MeView.as_view(), name="auth-user"),

    # Must precede the router, whose detail route would read "public" as a pk.
    path("incidents/public/", PublicIncidentSubmitView.as_view(), name="incidents-public"),

    path("", include(router.urls)),
]
