"""
View mixins: CompanyMixin, ApiMixin and the ApiView base class.
"""

import json
import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.paginator import Paginator
from django.http import JsonResponse, Http404
from django.shortcuts import get_object_or_404
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt
from django.views.generic import View

from backoffice.models import Company

logger = logging.getLogger(__name__)


class CompanyMixin:
    """
    Mixin to get the company (tenant) from URL kwargs.

    Every API URL carries ``company_code``; unknown or inactive companies are 404.
    """

    def get_company(self):
        """Get company by code from URL."""
        if not hasattr(self, '_company'):
            self._company = get_object_or_404(
                Company.objects.filter(is_active=True),
                code=self.kwargs.get('company_code')
            )
        return self._company


class ApiMixin(CompanyMixin):
    """
    Base mixin for JSON API views.

    Wraps dispatch so that:
        - ValidationError  -> 400 {'success': False, 'error': ...}
        - Http404          -> 404 {'success': False, 'error': ...}
        - anything else    -> logged, 500 {'success': False, 'error', 'message'}
    """

    error_message = 'Internal server error'

    def dispatch(self, request, *args, **kwargs):
        try:
            return super().dispatch(request, *args, **kwargs)
        except ValidationError as e:
            return self.error_response(self.validation_message(e))
        except Http404 as e:
            return self.error_response(str(e) or 'Not found', 404)
        except Exception as e:
            logger.exception("%s failed", self.__class__.__name__)
            return JsonResponse(
                {'success': False, 'error': self.error_message, 'message': str(e)},
                status=500
            )

    @staticmethod
    def validation_message(error):
        return '; '.join(error.messages)

    def json_response(self, data, status=200):
        """Return JSON response."""
        return JsonResponse(data, status=status)

    def error_response(self, message, status=400):
        """Return error JSON response."""
        return JsonResponse({'success': False, 'error': message}, status=status)

    def success_response(self, data=None, message=None, status=200):
        """Return success JSON response."""
        response = {'success': True}
        if message:
            response['message'] = message
        if data is not None:
            response['data'] = data
        return JsonResponse(response, status=status)

    def parse_json_body(self):
        """Decode the request body as a JSON object or raise ValidationError."""
        try:
            data = json.loads(self.request.body or b'{}')
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise ValidationError('Invalid JSON')
        if not isinstance(data, dict):
            raise ValidationError('Invalid JSON')
        return data

    def parse_decimal(self, value, default=Decimal('0.00')):
        """Safely parse decimal from string."""
        if value is None or value == '':
            return default
        try:
            return Decimal(str(value))
        except (InvalidOperation, ValueError):
            return default

    def parse_date(self, value):
        """Parse date from string (YYYY-MM-DD)."""
        if not value:
            return None
        try:
            return datetime.strptime(value[:10], '%Y-%m-%d').date()
        except ValueError:
            return None

    def parse_int(self, value, default):
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def paginate(self, queryset):
        """
        Paginate by ``page``/``limit`` query params.

        Returns:
            (page items, pagination dict)
        """
        page = max(self.parse_int(self.request.GET.get('page'), 1), 1)
        limit = self.parse_int(self.request.GET.get('limit'), settings.BACKOFFICE['DEFAULT_PAGE_SIZE'])
        limit = min(max(limit, 1), 100)

        paginator = Paginator(queryset, limit)
        page_obj = paginator.get_page(page)
        return list(page_obj.object_list), {
            'page': page_obj.number,
            'limit': limit,
            'total': paginator.count,
            'pages': paginator.num_pages if paginator.count else 0,
        }


@method_decorator(csrf_exempt, name='dispatch')
class ApiView(ApiMixin, View):
    """Company-scoped JSON API view."""
