"""
Upload views: image upload to base64 data URI.
"""

from backoffice.utils.image_upload import handle_image_upload
from .mixins import ApiView


class ImageUploadView(ApiView):
    """API: Validate an uploaded image (multipart ``file``) and return it as a data URI."""

    error_message = 'Failed to upload image'

    def post(self, request, *args, **kwargs):
        self.get_company()
        uploaded = request.FILES.get('file')
        if uploaded is None:
            return self.error_response('No file provided')

        result = handle_image_upload(uploaded)
        if not result['success']:
            return self.error_response(result['error'])
        return self.json_response(result)
