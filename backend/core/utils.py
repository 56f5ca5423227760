"""Shared helpers for audit logging and API error responses"""
import logging

from django.db import IntegrityError, transaction
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler, set_rollback

from .models import AuditLog

logger = logging.getLogger('backend.core')


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def create_audit_log(request=None, action=None, model_name=None, object_id=None,
                     changes=None, user=None, object_name=None, object_reference=None):
    """
    Create an audit log entry

    Args:
        request: Django request object (for user and IP) - optional if user is provided
        action: Action type (create, update, delete, inventory_transaction, etc.)
        model_name: Name of the model being acted upon
        object_id: ID of the object (as string)
        changes: Dictionary of changes made
        user: Optional user override (defaults to request.user if request provided)
        object_name: Human-readable name of the object (e.g., product name, asset tag)
        object_reference: Reference identifier (e.g., SKU, employee ID)

    Must be called outside of an atomic block: a failed insert is logged and
    swallowed so the main operation is never affected.
    """
    if not action or not model_name or object_id is None:
        logger.warning(
            f"Audit log creation skipped: missing required fields "
            f"(action={action}, model_name={model_name}, object_id={object_id})"
        )
        return None

    audit_user = user
    if audit_user is None and request is not None:
        audit_user = getattr(request, 'user', None)

    try:
        return AuditLog.objects.create(
            user=audit_user if audit_user and audit_user.is_authenticated else None,
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            object_name=object_name,
            object_reference=object_reference,
            changes=changes or {},
            ip_address=get_client_ip(request) if request else None,
        )
    except Exception as e:
        logger.error(f"Failed to create audit log: {str(e)}")
        return None


def serializer_changes(validated_data):
    """JSON-safe copy of validated serializer data for audit logging"""
    changes = {}
    for key, value in validated_data.items():
        if hasattr(value, 'pk'):
            changes[key] = value.pk
        elif value is None or isinstance(value, (bool, int, str)):
            changes[key] = value
        else:
            changes[key] = str(value)
    return changes


def has_unique_error(errors):
    """True when serializer errors contain a uniqueness violation"""
    if isinstance(errors, dict):
        return any(has_unique_error(value) for value in errors.values())
    if isinstance(errors, list):
        return any(has_unique_error(value) for value in errors)
    return getattr(errors, 'code', None) == 'unique'


def error_response(message, status_code, **extra):
    """Domain error body used by every app: {'error': message, ...}"""
    body = {'error': message}
    body.update(extra)
    return Response(body, status=status_code)


def validation_error_response(serializer, conflict_message, log=None):
    """
    Turn a failed serializer into a response: uniqueness violations become
    409 Conflict, all other field errors stay 400 with DRF's error dict.
    """
    log = log or logger
    if has_unique_error(serializer.errors):
        log.warning(f"Conflict: {conflict_message} ({serializer.errors})")
        return error_response(conflict_message, status.HTTP_409_CONFLICT, details=serializer.errors)
    log.warning(f"Validation failed: {serializer.errors}")
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


def save_or_conflict(serializer, conflict_message, log=None, **save_kwargs):
    """
    Save a validated serializer. Returns (instance, None) on success or
    (None, response) when the database rejects the row on a unique constraint.
    """
    log = log or logger
    try:
        with transaction.atomic():
            return serializer.save(**save_kwargs), None
    except IntegrityError as e:
        log.error(f"IntegrityError saving {serializer.__class__.__name__}: {e}", exc_info=True)
        return None, error_response(conflict_message, status.HTTP_409_CONFLICT)


def api_exception_handler(exc, context):
    """
    DRF exception handler: framework exceptions keep DRF's responses, anything
    else is logged with its traceback on the app's logger and returned as a
    JSON 500.
    """
    response = drf_exception_handler(exc, context)
    if response is not None:
        return response

    view = context.get('view')
    module = type(view).__module__ if view is not None else ''
    app_logger = logging.getLogger(module.rsplit('.', 1)[0]) if module.startswith('backend.') else logger
    view_name = type(view).__name__ if view is not None else 'unknown view'
    app_logger.error(f"Unexpected error in {view_name}: {str(exc)}", exc_info=exc)
    set_rollback()
    return error_response('An unexpected error occurred', status.HTTP_500_INTERNAL_SERVER_ERROR)
