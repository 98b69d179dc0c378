"""
JSON endpoints for the fighter mutation gateway.

A mutation is a POST of the operation's parameters as a JSON object:

    POST /api/fighters/<fighter_id>/mutations/update_fighter_xp/
    {"xp_to_add": 3}

The response body is always a serialized MutationResult. The HTTP status
reflects the error kind so that proxies and logs see failures, but clients
should read ``success`` and ``error_kind`` from the body.
"""

import json
import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from gangroster.core import gateway
from gangroster.core.context import MutationContext
from gangroster.core.errors import ErrorKind
from gangroster.core.results import MutationResult

logger = logging.getLogger(__name__)

STATUS_FOR_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.PRECONDITION_FAILED: 409,
    ErrorKind.STORE_ERROR: 500,
}


def result_response(result: MutationResult) -> JsonResponse:
    status = 200 if result.success else STATUS_FOR_KIND.get(result.error_kind, 500)
    return JsonResponse(result.to_dict(), status=status)


def _unauthenticated() -> JsonResponse:
    return JsonResponse(
        {
            "success": False,
            "error": "Authentication required",
            "error_kind": "unauthenticated",
        },
        status=401,
    )


@csrf_exempt
@require_POST
def fighter_mutation(request, fighter_id, operation):
    if not request.user.is_authenticated:
        return _unauthenticated()

    try:
        payload = json.loads(request.body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning(f"Invalid JSON body for {operation} on fighter {fighter_id}")
        return result_response(
            MutationResult.failure("Invalid JSON payload", ErrorKind.VALIDATION)
        )

    ctx = MutationContext.from_request(request)
    result = gateway.run_operation(ctx, operation, fighter_id, payload)
    return result_response(result)


@require_GET
def fighter_view(request, fighter_id):
    if not request.user.is_authenticated:
        return _unauthenticated()

    ctx = MutationContext.from_request(request)
    return result_response(gateway.get_fighter_view(ctx, str(fighter_id)))
