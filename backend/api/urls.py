from django.urls import path

from api.views import health, login, roles, whoami

urlpatterns = [
    path("health/", health, name="health"),
    path("auth/login/", login, name="login"),
    path("auth/roles/", roles, name="roles"),
    path("auth/whoami/", whoami, name="whoami"),
]
