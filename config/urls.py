# backend/config/urls.py
from django.contrib import admin
from django.http import HttpResponse
from django.urls import include, path

urlpatterns = [
    path("", lambda r: HttpResponse("API is running")),
    path("admin/", admin.site.urls),

    path("api/auth/", include("accounts.urls", namespace="accounts")),
    path("api/menu/", include("navigation.urls", namespace="navigation")),
    path("api/pages/", include("content.urls", namespace="content")),
    path("api/public/", include("content.public_urls", namespace="public")),
]
