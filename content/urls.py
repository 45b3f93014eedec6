# backend/content/urls.py
from django.urls import path

from .views import (
    PageCreateView,
    PageDeleteView,
    PageDetailView,
    PageListView,
    PageStatusView,
    PageTemplateChunkView,
    PageTemplateDetailView,
    PageTemplateUpdateView,
    PageUpdateView,
)

app_name = "content"

urlpatterns = [
    path("create", PageCreateView.as_view(), name="page_create"),
    path("all-pages", PageListView.as_view(), name="page_list"),
    path("<int:pk>", PageDetailView.as_view(), name="page_detail"),
    path("update/<int:pk>", PageUpdateView.as_view(), name="page_update"),
    path("update-status/<int:pk>", PageStatusView.as_view(), name="page_status"),
    path("update-template/<int:pk>", PageTemplateUpdateView.as_view(), name="page_template_update"),
    path("update-template/<int:pk>/chunk", PageTemplateChunkView.as_view(), name="page_template_chunk"),
    path("template/<int:pk>/<str:language>", PageTemplateDetailView.as_view(), name="page_template"),
    path("delete/<int:pk>", PageDeleteView.as_view(), name="page_delete"),
]
