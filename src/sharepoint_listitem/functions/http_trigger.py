"""HTTP trigger blueprint — health check and list item creation endpoints."""

import json
import logging

import azure.functions as func

from sharepoint_listitem import __version__
from sharepoint_listitem.config import load_config
from sharepoint_listitem.listitem.content_types import ContentTypeUnmatchedError
from sharepoint_listitem.listitem.reconciler import CreationFailedError
from sharepoint_listitem.listitem.request import AddItemRequest, RequestValidationError
from sharepoint_listitem.orchestration.adder import list_item_adder_from_config
from sharepoint_listitem.sharepoint.client import SharePointApiError, SharePointAuthError

logger = logging.getLogger(__name__)

bp = func.Blueprint()


def _json_response(body: object, status_code: int) -> func.HttpResponse:
    return func.HttpResponse(json.dumps(body), status_code=status_code, mimetype="application/json")


def _error(message: str, status_code: int, **extra: object) -> func.HttpResponse:
    return _json_response({"status": "error", "message": message, **extra}, status_code)


@bp.route(route="health", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """Health check endpoint. Returns service status and version."""
    logger.info("[health_check] health check requested")

    try:
        return _json_response({"status": "ok", "version": __version__}, 200)

    except Exception:
        logger.error("[health_check] health check failed", exc_info=True)
        return _error("Internal server error", 500)


@bp.route(route="listitems", methods=["POST"], auth_level=func.AuthLevel.FUNCTION)
def add_list_item(req: func.HttpRequest) -> func.HttpResponse:
    """Create a list item from a JSON body.

    The body carries ``webUrl``, ``listId`` or ``listTitle``, optional
    ``contentType`` and ``folder``, and any other keys as item field values.
    Responds with the created item, or an empty object when the API
    returned nothing to show.
    """
    logger.info("[add_list_item] add list item requested")

    try:
        options = req.get_json()
    except ValueError:
        return _error("Request body must be a JSON object", 400)
    if not isinstance(options, dict):
        return _error("Request body must be a JSON object", 400)

    try:
        request = AddItemRequest.from_options(options)
        adder = list_item_adder_from_config(load_config())
        record = adder.add_item(request)
        return _json_response(record or {}, 200)

    except RequestValidationError as exc:
        return _error(str(exc), 400)
    except ContentTypeUnmatchedError as exc:
        return _error(str(exc), 400)
    except CreationFailedError as exc:
        logger.warning("[add_list_item] item creation failed; errors:%s", exc.field_errors)
        return _error(str(exc), 500, fieldErrors=exc.field_errors)
    except SharePointAuthError:
        logger.error("[add_list_item] authentication failed", exc_info=True)
        return _error("Authentication failed", 401)
    except SharePointApiError as exc:
        logger.error(
            "[add_list_item] SharePoint request failed; status:%d;message:%s",
            exc.status_code,
            exc.message,
        )
        return _error(exc.message, 502, statusCode=exc.status_code)
    except Exception:
        logger.error("[add_list_item] add list item failed", exc_info=True)
        return _error("Internal server error", 500)
