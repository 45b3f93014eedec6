# backend/navigation/serializers.py
from rest_framework import serializers

from .models import MenuItem


class MenuItemSerializer(serializers.ModelSerializer):
    titleEn = serializers.CharField(source="title_en")
    titleBn = serializers.CharField(source="title_bn")
    parentId = serializers.IntegerField(source="parent_id", allow_null=True)
    isExternalLink = serializers.BooleanField(source="is_external_link")
    isActive = serializers.BooleanField(source="is_active")
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")

    class Meta:
        model = MenuItem
        fields = [
            "id",
            "titleEn",
            "titleBn",
            "slug",
            "parentId",
            "isExternalLink",
            "url",
            "order",
            "isActive",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields


class LocalizedTitleSerializer(serializers.Serializer):
    en = serializers.CharField(max_length=200, required=False, allow_blank=True)
    bn = serializers.CharField(max_length=200, required=False, allow_blank=True)


class MenuItemInputSerializer(serializers.Serializer):
    """
    Body of POST /menu/create and PATCH /menu/update/<id>.

    Titles come either flat (titleEn / titleBn) or nested
    (title: {en, bn}); the admin panel has used both. validated_data is
    keyed by MenuTreeService field names.
    """

    title = LocalizedTitleSerializer(required=False)
    titleEn = serializers.CharField(max_length=200, required=False, allow_blank=True)
    titleBn = serializers.CharField(max_length=200, required=False, allow_blank=True)
    parentId = serializers.IntegerField(required=False, allow_null=True)
    isExternalLink = serializers.BooleanField(required=False)
    url = serializers.CharField(max_length=512, required=False, allow_blank=True, allow_null=True)
    order = serializers.IntegerField(required=False, min_value=0, max_value=999999)
    isActive = serializers.BooleanField(required=False)

    def validate(self, attrs):
        data = {}
        nested = attrs.get("title") or {}
        for locale, field_name in (("en", "title_en"), ("bn", "title_bn")):
            flat = attrs.get(f"title{locale.capitalize()}")
            if flat is not None:
                data[field_name] = flat
            elif locale in nested:
                data[field_name] = nested[locale]

        for source, target in (
            ("parentId", "parent_id"),
            ("isExternalLink", "is_external_link"),
            ("url", "url"),
            ("order", "order"),
            ("isActive", "is_active"),
        ):
            if source in attrs:
                data[target] = attrs[source]

        if self.context.get("creating"):
            missing = [name for name in ("title_en", "title_bn") if name not in data]
            if missing:
                raise serializers.ValidationError(
                    {name: ["This field is required."] for name in missing}
                )
        return data


class MenuOrderSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)

    def to_internal_value(self, data):
        # Also accept a bare JSON list, or {"items": [{"id": 3}, ...]}.
        if isinstance(data, list):
            data = {"ids": data}
        elif isinstance(data, dict) and "ids" not in data and "items" in data:
            items = data.get("items") or []
            data = {
                "ids": [item.get("id") if isinstance(item, dict) else item for item in items]
            }
        return super().to_internal_value(data)
