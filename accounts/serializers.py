from rest_framework import serializers

from .models import CustomUser


class PrincipalSerializer(serializers.ModelSerializer):
    """The signed-in user as the rest of the API sees them."""
    full_name = serializers.SerializerMethodField()
    role = serializers.SerializerMethodField()
    campus_name = serializers.CharField(source="campus.name", default=None, read_only=True)
    client_name = serializers.CharField(source="client.name", default=None, read_only=True)

    class Meta:
        model = CustomUser
        fields = [
            "id", "username", "full_name", "email", "role",
            "campus_id", "campus_name", "client_id", "client_name",
        ]

    def get_full_name(self, obj):
        return obj.full_name or obj.username

    def get_role(self, obj):
        return "owner" if obj.is_superuser else obj.role
