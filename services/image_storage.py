#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Image storage collaborator.

Services only need ``upload(folder, file) -> public URL`` and
``delete(url)``. LocalImageStorage keeps files under UPLOAD_FOLDER and serves
them from UPLOAD_URL_PREFIX (see app.py); an object-store adapter can replace
it through ``app.extensions['image_storage']``.
"""
import os
import time
import logging

from werkzeug.utils import secure_filename

from services.exceptions import ValidationError

logger = logging.getLogger(__name__)


class ImageStorage:

    def upload(self, folder, file):
        raise NotImplementedError

    def delete(self, url):
        raise NotImplementedError


class LocalImageStorage(ImageStorage):

    def __init__(self, root, url_prefix='/uploads', allowed_extensions=None):
        self.root = root
        self.url_prefix = url_prefix.rstrip('/')
        self.allowed_extensions = set(allowed_extensions or {'png', 'jpg', 'jpeg', 'gif'})

    def allowed_file(self, filename):
        return '.' in filename and filename.rsplit('.', 1)[1].lower() in self.allowed_extensions

    def upload(self, folder, file):
        """Save a werkzeug FileStorage and return its public URL"""
        if not file or not file.filename:
            raise ValidationError('No image file provided', errors=[{'field': 'image', 'message': 'No image file provided'}])
        if not self.allowed_file(file.filename):
            raise ValidationError(
                'Unsupported image type',
                errors=[{'field': 'image', 'message': f'Allowed types: {", ".join(sorted(self.allowed_extensions))}'}]
            )

        safe_folder = secure_filename(folder) or 'misc'
        target_dir = os.path.join(self.root, safe_folder)
        os.makedirs(target_dir, exist_ok=True)

        filename = f"{int(time.time() * 1000)}_{secure_filename(file.filename)}"
        file.save(os.path.join(target_dir, filename))
        logger.info(f'Stored image {safe_folder}/{filename}')
        return f'{self.url_prefix}/{safe_folder}/{filename}'

    def delete(self, url):
        """Remove a file previously returned by upload(); other URLs are ignored"""
        if not url or not url.startswith(self.url_prefix + '/'):
            return False
        relative = url[len(self.url_prefix) + 1:]
        path = os.path.normpath(os.path.join(self.root, relative))
        if not path.startswith(os.path.normpath(self.root) + os.sep):
            return False
        if os.path.exists(path):
            os.remove(path)
            logger.info(f'Deleted image {relative}')
            return True
        return False
