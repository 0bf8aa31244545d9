#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
User Service
Registration, credential checks, self-service profile management and the
admin user management operations.
"""
import logging

from werkzeug.security import check_password_hash, generate_password_hash

from models.user import DEFAULT_PROFILE_PIC
from services.exceptions import (
    AppError, AuthenticationError, ConflictError, ForbiddenError, NotFoundError, ValidationError,
)
from services.transformers import user_to_dict
from utils.validators import (
    validate_admin_user_update, validate_password_change, validate_profile_update,
    validate_registration,
)

module_logger = logging.getLogger(__name__)

EMAIL_IN_USE = 'Email is already in use'


class UserService:

    def __init__(self, repositories, config, image_storage=None, logger=None):
        self.users = repositories.users
        self.config = config
        self.image_storage = image_storage
        self.logger = logger or module_logger

    @property
    def min_password_length(self):
        return self.config.get('PASSWORD_MIN_LENGTH', 6)

    def get_user_row(self, user_id):
        user = self.users.get(user_id)
        if user is None:
            raise NotFoundError('User not found')
        return user

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------
    def register(self, data, role='user'):
        errors = validate_registration(data, self.min_password_length)
        if errors:
            raise ValidationError('Validation failed', errors)

        email = data['email'].strip().lower()
        if self.users.email_taken(email):
            raise ConflictError('User with this email already exists')

        row = self.users.add({
            'name': data['name'].strip(),
            'email': email,
            'password_hash': generate_password_hash(data['password']),
            'role': role,
        })
        self.logger.info(f'User registered: {email} ({role})')
        return row

    def authenticate(self, email, password):
        """Returns the user row or raises AuthenticationError"""
        if not isinstance(email, str) or not isinstance(password, str):
            raise AuthenticationError('Invalid credentials')
        email = email.strip()
        if not email or not password:
            raise ValidationError('Email and password are required', [
                {'field': 'email' if not email else 'password', 'message': 'Email and password are required'}
            ])
        user = self.users.get_by_email(email)
        if user is None or not check_password_hash(user['password_hash'], password):
            self.logger.warning(f'Failed login attempt for: {email}')
            raise AuthenticationError('Invalid credentials')
        return user

    # ------------------------------------------------------------------
    # Own profile
    # ------------------------------------------------------------------
    def get_profile(self, user_id):
        return user_to_dict(self.get_user_row(user_id))

    def _check_email(self, data, user_id):
        email = data.get('email')
        if email and self.users.email_taken(email, exclude_user_id=user_id):
            raise ConflictError(EMAIL_IN_USE)
        return email.strip().lower() if email else email

    def _profile_fields(self, data, user_id):
        fields = {}
        if 'name' in data:
            fields['name'] = data['name'].strip()
        if data.get('email'):
            fields['email'] = self._check_email(data, user_id)
        if data.get('profilePic'):
            fields['profile_pic'] = data['profilePic']
        return fields

    def _replace_picture(self, user, file):
        """Upload a new picture; failures are logged and the old picture kept"""
        if self.image_storage is None:
            self.logger.warning('Profile picture upload skipped: no image storage configured')
            return None
        try:
            url = self.image_storage.upload(f"profiles/{user['id']}", file)
        except (AppError, OSError) as e:
            self.logger.warning(f"Profile picture upload failed for {user['id']}: {e}")
            return None
        previous = user.get('profile_pic')
        if previous and previous != DEFAULT_PROFILE_PIC:
            self.image_storage.delete(previous)
        return url

    def update_profile(self, user_id, data, file=None):
        errors = validate_profile_update(data)
        if errors:
            raise ValidationError('Validation failed', errors)

        user = self.get_user_row(user_id)
        fields = self._profile_fields(data, user_id)
        if file is not None and getattr(file, 'filename', None):
            url = self._replace_picture(user, file)
            if url:
                fields['profile_pic'] = url

        row = self.users.update(user_id, fields)
        self.logger.info(f"Profile updated: {row['email']}")
        return user_to_dict(row)

    def change_password(self, user_id, data):
        errors = validate_password_change(data, self.min_password_length)
        if errors:
            raise ValidationError('Validation failed', errors)

        user = self.get_user_row(user_id)
        if not check_password_hash(user['password_hash'], data['currentPassword']):
            raise ValidationError('Current password is incorrect', [
                {'field': 'currentPassword', 'message': 'Current password is incorrect'}
            ])

        self.users.update(user_id, {'password_hash': generate_password_hash(data['newPassword'])})
        self.logger.info(f"Password changed: {user['email']}")

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------
    def list_users(self, search=None, role=None):
        return [user_to_dict(row) for row in self.users.list(search=search or None, role=role or None)]

    def get_user(self, user_id):
        return user_to_dict(self.get_user_row(user_id))

    def update_user(self, user_id, data, actor_id=None):
        errors = validate_admin_user_update(data)
        if errors:
            raise ValidationError('Validation failed', errors)

        self.get_user_row(user_id)
        fields = self._profile_fields(data, user_id)
        if data.get('role'):
            fields['role'] = data['role']

        row = self.users.update(user_id, fields)
        self.logger.info(f"User {row['email']} updated by {actor_id} ({', '.join(sorted(fields)) or 'no fields'})")
        return user_to_dict(row)

    def delete_user(self, user_id, actor_id=None):
        user = self.get_user_row(user_id)
        if user['role'] == 'admin':
            raise ForbiddenError('Cannot delete admin users')
        self.users.delete(user_id)
        self.logger.info(f"User {user['email']} deleted by {actor_id}")
