from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from .analytics import AnalyticsQueries
from .serializers import (
    TimeRangeQuerySerializer,
    ScanReportSerializer,
)


@extend_schema(
    parameters=[
        OpenApiParameter(
            'timeRange',
            OpenApiTypes.STR,
            description="Window: '7days', '30days', '90days' or 'year'",
            default='30days',
        ),
        OpenApiParameter('time_range', OpenApiTypes.STR, description='Alias of timeRange'),
    ],
    responses={200: ScanReportSerializer},
    description="Get scan analytics for the current user's cards within a time window.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def scan_report(request):
    """Get the current user's scan report - thin HTTP handler."""
    query_serializer = TimeRangeQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)

    report = AnalyticsQueries.scan_report(
        owner_id=request.user.id,
        time_range=query_serializer.validated_data['window'],
    )

    return Response(ScanReportSerializer(report).data)
