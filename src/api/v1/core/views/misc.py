from drf_spectacular.utils import extend_schema
from rest_framework import generics, serializers
from rest_framework.response import Response


class HealthSerializer(serializers.Serializer):
    status = serializers.CharField()


@extend_schema(
    tags=["System / Health"],
    summary="Health check",
    description="Lightweight service health endpoint for readiness and uptime checks.",
)
class HealthAPIView(generics.RetrieveAPIView):
    permission_classes = []
    serializer_class = HealthSerializer

    def retrieve(self, request, *args, **kwargs):
        return Response(data={"status": "ok"}, status=200)
