import logging

from rest_framework.authtoken.models import Token
from rest_framework.authtoken.views import ObtainAuthToken
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import PrincipalSerializer

logger = logging.getLogger(__name__)


class TokenLoginView(ObtainAuthToken):
    """POST {username, password} → {token, user}."""

    def post(self, request, *args, **kwargs):
        serializer = self.serializer_class(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user"]
        token, _ = Token.objects.get_or_create(user=user)
        logger.info("Token issued for %s (%s)", user.username, user.role)
        return Response({"token": token.key, "user": PrincipalSerializer(user).data})


class MeView(APIView):
    def get(self, request):
        return Response(PrincipalSerializer(request.user).data)
