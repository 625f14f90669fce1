"""
Root URL configuration.

The admin lives under /admin/; every API route is company-scoped under
/api/<company_code>/ (see backoffice.urls). Unmatched URLs and errors raised
outside the API views answer with the same JSON error body as the API.
"""

from django.contrib import admin
from django.http import JsonResponse
from django.urls import path, include

admin.site.site_header = "Back Office Admin"
admin.site.site_title = "Back Office"
admin.site.index_title = "Company data"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('backoffice.urls')),
]


def json_not_found(request, exception=None):
    return JsonResponse({'success': False, 'error': 'Not found'}, status=404)


def json_server_error(request):
    return JsonResponse({'success': False, 'error': 'Internal server error'}, status=500)


handler404 = json_not_found
handler500 = json_server_error
