"""Request payload helpers shared by the API blueprints"""
from flask import request

from services.exceptions import ValidationError


def request_payload():
    """JSON body when sent as JSON, otherwise the form fields (multipart uploads)"""
    if not request.is_json:
        return request.form.to_dict()
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError('Request body must be a JSON object', [
            {'field': 'body', 'message': 'Request body must be a JSON object'}
        ])
    return payload


def request_files(field):
    """Non-empty uploaded files under a multipart field"""
    return [f for f in request.files.getlist(field) if f and f.filename]
