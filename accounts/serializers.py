# backend/accounts/serializers.py
from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

User = get_user_model()


# SimpleJWT login via email
class EmailTokenObtainPairSerializer(TokenObtainPairSerializer):
    username_field = User.EMAIL_FIELD
    default_error_messages = {
        "no_active_account": "Unable to log in with that email and password.",
    }

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token["access_level"] = user.access_level
        return token


class UserSerializer(serializers.ModelSerializer):
    access_level = serializers.CharField(read_only=True)
    access_level_label = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "first_name",
            "last_name",
            "access_level",        # e.g. "admin"
            "access_level_label",  # e.g. "Administrator"
        ]

    def get_access_level_label(self, obj):
        return obj.get_access_level_display()
