# backend/navigation/views.py
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsCMSAdmin
from content.repositories import DjangoPageRepository

from .models import MenuItem
from .rendering import render_public_tree
from .repositories import DjangoMenuRepository
from .serializers import MenuItemInputSerializer, MenuItemSerializer, MenuOrderSerializer
from .services import get_menu_service


class PublicMenuListView(APIView):
    """
    Flat list of active menu items, sorted by order.

    Frontend usage:
      GET /api/menu/public/get-menu-items
    """

    permission_classes = [AllowAny]

    def get(self, request):
        items = MenuItem.objects.filter(is_active=True).order_by("order", "id")
        return Response(
            {"success": True, "data": MenuItemSerializer(items, many=True).data}
        )


class PublicMenuTreeView(APIView):
    """
    Active menu items as a nested tree; each node carries an href that points
    at its page only when that page is published.

      GET /api/menu/public/tree
    """

    permission_classes = [AllowAny]

    def get(self, request):
        tree = render_public_tree(DjangoMenuRepository(), DjangoPageRepository())
        return Response({"success": True, "data": tree})


class MenuAdminListView(APIView):
    """
    GET /api/menu/get-all-menu-items[?isActive=true|false]
    """

    permission_classes = [IsCMSAdmin]

    def get(self, request):
        items = MenuItem.objects.order_by("order", "id")
        is_active = request.query_params.get("isActive")
        if is_active is not None:
            items = items.filter(is_active=is_active.lower() == "true")
        return Response(
            {"success": True, "data": MenuItemSerializer(items, many=True).data}
        )


class MenuDetailView(APIView):
    permission_classes = [IsCMSAdmin]

    def get(self, request, pk: int):
        item = get_menu_service().get(pk)
        return Response({"success": True, "menu": MenuItemSerializer(item).data})


class MenuCreateView(APIView):
    permission_classes = [IsCMSAdmin]

    def post(self, request):
        serializer = MenuItemInputSerializer(data=request.data, context={"creating": True})
        serializer.is_valid(raise_exception=True)
        item = get_menu_service().create(serializer.validated_data)
        return Response(
            {
                "success": True,
                "message": "Menu item created successfully!",
                "menu": MenuItemSerializer(item).data,
            },
            status=status.HTTP_201_CREATED,
        )


class MenuUpdateView(APIView):
    permission_classes = [IsCMSAdmin]

    def patch(self, request, pk: int):
        serializer = MenuItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = get_menu_service().update(pk, serializer.validated_data)
        return Response(
            {
                "success": True,
                "message": "Menu item updated successfully!",
                "menu": MenuItemSerializer(item).data,
            }
        )


class MenuDeleteView(APIView):
    permission_classes = [IsCMSAdmin]

    def delete(self, request, pk: int):
        children = get_menu_service().delete(pk)
        if not children:
            message = "Menu item deleted successfully and no children to update!"
        else:
            message = "Menu item deleted successfully, and children updated accordingly!"
        return Response({"success": True, "message": message})


class MenuReorderView(APIView):
    permission_classes = [IsCMSAdmin]

    def patch(self, request):
        serializer = MenuOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        get_menu_service().reorder(serializer.validated_data["ids"])
        return Response({"success": True, "message": "Menu order updated successfully!"})
