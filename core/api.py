from django.contrib.auth import get_user_model
from rest_framework import mixins, serializers, status, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .roles import IsRoleAdmin, Role, get_role, set_role


class UserRoleSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(source="get_full_name", read_only=True)
    role = serializers.SerializerMethodField()

    class Meta:
        model = get_user_model()
        fields = ["id", "username", "full_name", "email", "is_active", "role"]
        read_only_fields = fields

    def get_role(self, user):
        role = get_role(user)
        return role.value if role else None


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Current user with the role flags the UI switches on."""
    data = UserRoleSerializer(request.user).data
    role = data["role"]
    data.update(
        {
            "is_admin": role == Role.ADMIN,
            "is_dispatcher": role == Role.DISPATCHER,
            "is_technician": role == Role.TECHNICIAN,
            "is_readonly": role == Role.READONLY,
        }
    )
    return Response(data)


class UserRoleViewSet(
    mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet
):
    """Admin-only user list; ``POST {"role": ...}`` to ``role/`` changes one."""

    queryset = get_user_model().objects.order_by("username").prefetch_related("groups")
    serializer_class = UserRoleSerializer
    permission_classes = [IsRoleAdmin]

    @action(detail=True, methods=["post"])
    def role(self, request, pk=None):
        user = self.get_object()
        success, msg = set_role(user, request.data.get("role", ""))
        if not success:
            return Response({"detail": msg}, status=status.HTTP_400_BAD_REQUEST)
        return Response(self.get_serializer(user).data)
