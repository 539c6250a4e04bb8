from rest_framework import serializers

from .models import Campus


class CampusSerializer(serializers.ModelSerializer):
    # uniqueness is checked case-insensitively in the view (409, not 400)
    name = serializers.CharField(max_length=200)
    client_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = Campus
        fields = ["id", "name", "city", "location", "client_count", "created_at"]
        read_only_fields = ["id", "created_at"]
