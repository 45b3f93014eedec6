# backend/content/public_urls.py
from django.urls import path

from .views import PublicPageDetailView, PublicPageListView

app_name = "public"

urlpatterns = [
    path("pages", PublicPageListView.as_view(), name="page_list"),
    path("pages/<path:slug>", PublicPageDetailView.as_view(), name="page_detail"),
]
