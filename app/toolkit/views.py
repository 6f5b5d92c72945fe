"""
DRF views for the global marketplace settings.

Endpoints:
    GET   /api/v1/settings/ - Current settings (created with defaults on first read)
    PATCH /api/v1/settings/ - Update fees, tax rate or shipping options

Security:
    - All endpoints require an admin user (IsAdminUser)
"""

from __future__ import annotations

from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView

from toolkit.serializers import MarketplaceSettingsSerializer, UpdateSettingsSerializer
from toolkit.services import SettingsService


class MarketplaceSettingsView(APIView):
    """
    GET   /api/v1/settings/
    PATCH /api/v1/settings/

    Request body (PATCH):
        {"tax_rate": "7.50", "shipping_options": [{"name": "Express", "price": "2500.00"}]}
    """

    permission_classes = [IsAdminUser]

    def get(self, request):
        return Response(MarketplaceSettingsSerializer(SettingsService.get_settings()).data)

    def patch(self, request):
        serializer = UpdateSettingsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        settings_row = SettingsService.update_settings(
            serializer.validated_data,
            admin_id=str(request.user.pk),
        )
        return Response(MarketplaceSettingsSerializer(settings_row).data)
