import base64
from io import BytesIO

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image

from backoffice.utils.image_upload import (
    validate_image_file, file_to_base64, get_image_dimensions, handle_image_upload,
)

UPLOAD_URL = '/api/acme/upload/'


def png_bytes(width=3, height=2):
    buffer = BytesIO()
    Image.new('RGB', (width, height), color=(30, 58, 95)).save(buffer, format='PNG')
    return buffer.getvalue()


def test_file_to_base64():
    assert file_to_base64(b'abc', 'image/gif') == 'data:image/gif;base64,YWJj'


def test_validate_rejects_non_images():
    upload = SimpleUploadedFile('notes.txt', b'hello', content_type='text/plain')

    assert validate_image_file(upload) == (False, 'File must be an image')


def test_validate_rejects_large_images():
    upload = SimpleUploadedFile('big.png', b'0' * (5 * 1024 * 1024 + 1), content_type='image/png')

    assert validate_image_file(upload) == (False, 'Image must be less than 5MB')


def test_validate_accepts_exactly_the_limit():
    upload = SimpleUploadedFile('edge.png', b'0' * (5 * 1024 * 1024), content_type='image/png')

    assert validate_image_file(upload) == (True, None)


def test_dimensions_of_undecodable_image():
    assert get_image_dimensions(b'not really a png') is None


def test_handle_image_upload():
    data = png_bytes(4, 5)
    result = handle_image_upload(SimpleUploadedFile('logo.png', data, content_type='image/png'))

    assert result['success'] is True
    assert result['dimensions'] == {'width': 4, 'height': 5}
    assert result['size'] == len(data)
    assert base64.b64decode(result['data'].split(',', 1)[1]) == data


# =============================================================================
# API
# =============================================================================

@pytest.mark.django_db
def test_upload_endpoint(client, company):
    upload = SimpleUploadedFile('logo.png', png_bytes(), content_type='image/png')

    response = client.post(UPLOAD_URL, {'file': upload})
    body = response.json()

    assert response.status_code == 200
    assert body['success'] is True
    assert body['data'].startswith('data:image/png;base64,')
    assert body['dimensions'] == {'width': 3, 'height': 2}


@pytest.mark.django_db
def test_upload_endpoint_requires_file(client, company):
    response = client.post(UPLOAD_URL, {})

    assert response.status_code == 400
    assert response.json()['error'] == 'No file provided'


@pytest.mark.django_db
def test_upload_endpoint_rejects_non_image(client, company):
    upload = SimpleUploadedFile('report.pdf', b'%PDF-1.4', content_type='application/pdf')

    response = client.post(UPLOAD_URL, {'file': upload})

    assert response.status_code == 400
    assert response.json() == {'success': False, 'error': 'File must be an image'}


@pytest.mark.django_db
def test_upload_endpoint_respects_configured_limit(client, company, settings):
    settings.BACKOFFICE = dict(settings.BACKOFFICE, MAX_UPLOAD_SIZE=1024 * 1024)
    upload = SimpleUploadedFile('big.png', b'0' * (1024 * 1024 + 10), content_type='image/png')

    response = client.post(UPLOAD_URL, {'file': upload})

    assert response.status_code == 400
    assert response.json()['error'] == 'Image must be less than 1MB'
