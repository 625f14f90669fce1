"""
URL configuration package.

Combines the URL patterns of every area into a single urlpatterns list.
All routes live under api/<company_code>/; app_name is 'backoffice'.
"""

from .core import urlpatterns as core_urls
from .retreats import urlpatterns as retreat_urls
from .reports import urlpatterns as report_urls
from .finance import urlpatterns as finance_urls
from .delivery import urlpatterns as delivery_urls
from .hr import urlpatterns as hr_urls

app_name = 'backoffice'

urlpatterns = (
    core_urls
    + retreat_urls
    + report_urls
    + finance_urls
    + delivery_urls
    + hr_urls
)
