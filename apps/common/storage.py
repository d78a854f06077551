"""
Image Store adapter.

Profiles only keep the resulting URL and storage path of a photo; bytes
live in Django's configured file storage.
"""

import logging

from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.utils.text import get_valid_filename

logger = logging.getLogger(__name__)


class ImageStore:

    def __init__(self, storage=None):
        self.storage = storage or default_storage

    def save(self, profile_id, content, filename):
        """
        Persist raw bytes or an uploaded file for a profile.

        Returns:
            tuple: (storage path, public URL)
        """
        if isinstance(content, bytes):
            content = ContentFile(content)
        name = f'profiles/{profile_id}/images/{get_valid_filename(filename)}'
        path = self.storage.save(name, content)
        return path, self.storage.url(path)

    def delete(self, path):
        if not path:
            return
        if self.storage.exists(path):
            self.storage.delete(path)
        else:
            logger.warning('Image file already gone: %s', path)
