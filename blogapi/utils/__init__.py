# blogapi/utils/__init__.py
"""
Helpers shared across the API packages: time handling, pagination and the response envelope.
"""

from .datetime_utils import DateTimeUtils
from .pagination import Pagination, parse_pagination_args, paginate
from .responses import api_response, error_response

__all__ = [
    'DateTimeUtils',
    'Pagination', 'parse_pagination_args', 'paginate',
    'api_response', 'error_response',
]
