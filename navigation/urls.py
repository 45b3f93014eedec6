# backend/navigation/urls.py
from django.urls import path

from .views import (
    MenuAdminListView,
    MenuCreateView,
    MenuDeleteView,
    MenuDetailView,
    MenuReorderView,
    MenuUpdateView,
    PublicMenuListView,
    PublicMenuTreeView,
)

app_name = "navigation"

urlpatterns = [
    # Public
    path("public/get-menu-items", PublicMenuListView.as_view(), name="public_menu_list"),
    path("public/tree", PublicMenuTreeView.as_view(), name="public_menu_tree"),

    # Admin
    path("create", MenuCreateView.as_view(), name="menu_create"),
    path("get-all-menu-items", MenuAdminListView.as_view(), name="menu_list"),
    path("update-menu-order", MenuReorderView.as_view(), name="menu_reorder"),
    path("update/<int:pk>", MenuUpdateView.as_view(), name="menu_update"),
    path("delete-menu-item/<int:pk>", MenuDeleteView.as_view(), name="menu_delete"),
    path("<int:pk>", MenuDetailView.as_view(), name="menu_detail"),
]
