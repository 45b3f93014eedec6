# backend/content/serializers.py
from rest_framework import serializers

from navigation.slugs import normalize_slug

from .models import LANGUAGES, Layout, Page, page_slug_validator


class LayoutSerializer(serializers.ModelSerializer):
    isActive = serializers.BooleanField(source="is_active", read_only=True)

    class Meta:
        model = Layout
        fields = ["id", "name", "identifier", "content", "isActive"]


class TemplateField(serializers.Field):
    """Both locales are always present; a missing one is null, not omitted."""

    def __init__(self, **kwargs):
        kwargs["source"] = "*"
        kwargs["read_only"] = True
        super().__init__(**kwargs)

    def to_representation(self, page):
        return {language: page.template_for(language) for language in LANGUAGES}


class PublicPageSerializer(serializers.ModelSerializer):
    """GET /api/public/pages/<slug>"""

    titleEn = serializers.CharField(source="title_en")
    titleBn = serializers.CharField(source="title_bn")
    slug = serializers.SerializerMethodField()
    layout = LayoutSerializer(allow_null=True)
    template = TemplateField()

    class Meta:
        model = Page
        fields = ["id", "name", "titleEn", "titleBn", "slug", "layout", "template"]

    def get_slug(self, obj):
        return normalize_slug(obj.slug)


class PublicPageListSerializer(PublicPageSerializer):
    layout = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta(PublicPageSerializer.Meta):
        fields = ["name", "titleEn", "titleBn", "slug", "layout", "template"]


class PageSerializer(serializers.ModelSerializer):
    """Admin view of a page, including metadata."""

    titleEn = serializers.CharField(source="title_en")
    titleBn = serializers.CharField(source="title_bn")
    layout = LayoutSerializer(allow_null=True)
    template = TemplateField()
    isActive = serializers.BooleanField(source="is_active")
    metadata = serializers.SerializerMethodField()

    class Meta:
        model = Page
        fields = [
            "id",
            "name",
            "titleEn",
            "titleBn",
            "slug",
            "layout",
            "template",
            "status",
            "isActive",
            "metadata",
        ]

    def get_metadata(self, obj):
        return {
            "createdBy": obj.created_by_id,
            "lastModifiedBy": obj.last_modified_by_id,
            "createdAt": obj.created_at,
            "updatedAt": obj.updated_at,
        }


class PageInputSerializer(serializers.Serializer):
    """Body of POST /pages/create and PUT /pages/update/<id>."""

    name = serializers.CharField(min_length=2, max_length=100, required=False)
    titleEn = serializers.CharField(min_length=2, max_length=100, required=False)
    titleBn = serializers.CharField(min_length=2, max_length=100, required=False)
    slug = serializers.CharField(max_length=300, required=False)
    layout = serializers.IntegerField(required=False)
    layoutId = serializers.IntegerField(required=False)
    status = serializers.ChoiceField(choices=Page.Status.choices, required=False)
    isActive = serializers.BooleanField(required=False)

    def validate_slug(self, value):
        slug = value.strip().lower()
        page_slug_validator(slug)
        return slug

    def validate(self, attrs):
        if self.context.get("creating"):
            missing = [name for name in ("name", "slug") if name not in attrs]
            if "layout" not in attrs and "layoutId" not in attrs:
                missing.append("layout")
            if missing:
                raise serializers.ValidationError(
                    {name: ["This field is required."] for name in missing}
                )

        data = {}
        for source, target in (
            ("name", "name"),
            ("titleEn", "title_en"),
            ("titleBn", "title_bn"),
            ("slug", "slug"),
            ("status", "status"),
            ("isActive", "is_active"),
        ):
            if source in attrs:
                data[target] = attrs[source]
        layout = attrs.get("layout", attrs.get("layoutId"))
        if layout is not None:
            data["layout_id"] = layout
        return data


class PageStatusSerializer(serializers.Serializer):
    status = serializers.CharField()

    def validate_status(self, value):
        status = value.strip().lower()
        if status not in Page.Status.values:
            raise serializers.ValidationError("Invalid status value")
        return status


class TemplateSerializer(serializers.Serializer):
    template = serializers.DictField()
    language = serializers.ChoiceField(choices=LANGUAGES)

    def validate_template(self, value):
        if not value.get("html"):
            raise serializers.ValidationError("Template content is required")
        return value


class TemplateChunkSerializer(serializers.Serializer):
    chunk = serializers.CharField(trim_whitespace=False, allow_blank=True)
    index = serializers.IntegerField(min_value=0)
    total = serializers.IntegerField(min_value=1)
    language = serializers.ChoiceField(choices=LANGUAGES)
    uploadId = serializers.CharField(max_length=64, required=False)

    def validate(self, attrs):
        if attrs["index"] >= attrs["total"]:
            raise serializers.ValidationError({"index": ["Chunk index out of range."]})
        return attrs
