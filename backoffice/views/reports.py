"""
Report views: revenue report, revenue export and occupancy report.
"""

import logging

from django.core.exceptions import ValidationError
from django.http import HttpResponse

from backoffice.models import Retreat
from backoffice.services import (
    RevenueReportService, RevenueExportService, OccupancyReportService, get_revenue_report,
)
from .mixins import ApiView

logger = logging.getLogger(__name__)


class ReportParamsMixin:
    """Read the period / retreat type / include query params."""

    def get_report_params(self):
        period = self.request.GET.get('period') or '12m'
        retreat_type = (self.request.GET.get('retreatType') or 'ALL').upper()
        valid_types = ['ALL'] + [code for code, _ in Retreat.TYPE_CHOICES]
        if retreat_type not in valid_types:
            raise ValidationError(f"Invalid retreat type. Use one of: {', '.join(valid_types)}")
        include = [
            part.strip()
            for part in (self.request.GET.get('include') or 'metrics').split(',')
            if part.strip()
        ]
        return period, retreat_type, include


class RevenueReportView(ReportParamsMixin, ApiView):
    """
    API: Revenue report (cached per company/period/type/include).

    GET ?period=3m|6m|12m&retreatType=ALL|<TYPE>&include=metrics,trends,costs,forecasts
    """

    error_message = 'Failed to fetch revenue data'

    def get(self, request, *args, **kwargs):
        period, retreat_type, include = self.get_report_params()
        report = get_revenue_report(self.get_company(), period=period, retreat_type=retreat_type, include=include)
        return self.json_response(report)


class RevenueExportView(ReportParamsMixin, ApiView):
    """
    API: Download the revenue report.

    POST ?format=csv|excel|pdf&period=&retreatType=
    """

    error_message = 'Failed to export revenue report'

    def post(self, request, *args, **kwargs):
        export_format = (request.GET.get('format') or 'csv').lower()
        if export_format not in RevenueExportService.FORMATS:
            return self.error_response(
                f"Invalid format. Supported formats: {', '.join(RevenueExportService.supported_formats())}"
            )

        period, retreat_type, _ = self.get_report_params()
        company = self.get_company()
        report = RevenueReportService(company, period=period, retreat_type=retreat_type).build_report(
            include=RevenueReportService.SECTIONS
        )

        content, content_type, filename = RevenueExportService(
            report, company_name=company.name
        ).export(export_format)

        response = HttpResponse(content, content_type=content_type)
        response['Content-Disposition'] = f'attachment; filename="{filename}"'
        response['Cache-Control'] = 'no-cache, no-store, must-revalidate'
        response['Pragma'] = 'no-cache'
        response['Expires'] = '0'
        return response


class OccupancyReportView(ApiView):
    """
    API: Occupancy report.

    GET ?period=<days, default 30>&facilityId=
    """

    error_message = 'Failed to fetch occupancy data'

    def get(self, request, *args, **kwargs):
        raw_period = request.GET.get('period') or '30'
        try:
            days = int(raw_period)
        except ValueError:
            return self.error_response('Period must be a number of days')
        if days < 1 or days > 366:
            return self.error_response('Period must be between 1 and 366 days')

        facility_id = request.GET.get('facilityId') or None
        if facility_id is not None:
            facility_id = self.parse_int(facility_id, None)
            if facility_id is None:
                return self.error_response('Facility ID must be a number')

        report = OccupancyReportService(self.get_company(), days=days, facility_id=facility_id).build_report()
        return self.json_response(report)
