from django.urls import include, path

urlpatterns = [
    path("api/v1/", include("api.urls")),
    path("api/v1/sourcing/", include("sourcing.urls")),
    path("api/v1/marketplace/", include("marketplace.urls")),
    path("api/v1/partner/", include("partner.urls")),
]
