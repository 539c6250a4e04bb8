import logging

from django.db.models import Count, ProtectedError
from rest_framework import mixins, status, viewsets
from rest_framework.response import Response

from accounts.permissions import IsOwner

from .exceptions import ConflictError
from .models import Campus
from .serializers import CampusSerializer

logger = logging.getLogger(__name__)


class CampusViewSet(mixins.ListModelMixin,
                    mixins.CreateModelMixin,
                    mixins.DestroyModelMixin,
                    viewsets.GenericViewSet):
    """
    /api/campuses        GET (everyone signed in), POST (owner)
    /api/campuses/<id>   DELETE (owner; refused while clients remain)
    """
    serializer_class = CampusSerializer
    permission_classes = [IsOwner]
    pagination_class = None
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        return Campus.objects.annotate(client_count=Count("clients")).order_by("name")

    def create(self, request, *args, **kwargs):
        name = str(request.data.get("name", "")).strip()
        if name and Campus.objects.filter(name__iexact=name).exists():
            raise ConflictError("A campus with this name already exists.")
        return super().create(request, *args, **kwargs)

    def perform_create(self, serializer):
        campus = serializer.save()
        logger.info("Campus %s created (id=%s)", campus.name, campus.pk)

    def destroy(self, request, *args, **kwargs):
        campus = self.get_object()
        try:
            campus.delete()
        except ProtectedError:
            raise ConflictError(
                "Campus still has clients; move or delete them first.",
                client_count=campus.clients.count(),
            )
        logger.info("Campus %s deleted (id=%s)", campus.name, kwargs.get("pk"))
        return Response({"message": "Campus deleted"}, status=status.HTTP_200_OK)
