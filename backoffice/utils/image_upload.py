"""
Image upload helpers: validation and base64 data-URI conversion.
"""

from __future__ import annotations

import base64
import logging
from io import BytesIO
from typing import Any, Dict, Optional, Tuple

from django.conf import settings
from PIL import Image

logger = logging.getLogger(__name__)


def get_max_upload_size() -> int:
    return settings.BACKOFFICE['MAX_UPLOAD_SIZE']


def validate_image_file(uploaded_file) -> Tuple[bool, Optional[str]]:
    """Return (valid, error) for an uploaded file."""
    content_type = getattr(uploaded_file, 'content_type', '') or ''
    if not content_type.startswith('image/'):
        return False, 'File must be an image'

    max_size = get_max_upload_size()
    if uploaded_file.size > max_size:
        return False, f"Image must be less than {max_size // (1024 * 1024)}MB"

    return True, None


def file_to_base64(data: bytes, content_type: str) -> str:
    """Encode raw bytes as a ``data:<type>;base64,...`` URI."""
    encoded = base64.b64encode(data).decode('ascii')
    return f"data:{content_type};base64,{encoded}"


def get_image_dimensions(data: bytes) -> Optional[Dict[str, int]]:
    """Width/height of the image, or None when Pillow cannot decode it."""
    try:
        with Image.open(BytesIO(data)) as img:
            width, height = img.size
    except OSError:
        logger.debug("Uploaded file could not be decoded as an image")
        return None
    return {'width': width, 'height': height}


def handle_image_upload(uploaded_file) -> Dict[str, Any]:
    """
    Validate and convert an uploaded image.

    Returns:
        {'success': True, 'data': <data URI>, 'dimensions': {...} or None}
        or {'success': False, 'error': <message>}
    """
    valid, error = validate_image_file(uploaded_file)
    if not valid:
        return {'success': False, 'error': error}

    data = uploaded_file.read()
    return {
        'success': True,
        'data': file_to_base64(data, uploaded_file.content_type),
        'dimensions': get_image_dimensions(data),
        'size': len(data),
    }
