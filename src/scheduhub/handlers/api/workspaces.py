import json
from aws_lambda_powertools import Logger
from aws_lambda_powertools.event_handler import APIGatewayRestResolver, Response, content_types
from aws_lambda_powertools.event_handler.api_gateway import CORSConfig
from aws_lambda_powertools.event_handler.exceptions import (
    BadRequestError,
    NotFoundError,
    ServiceError,
    UnauthorizedError,
)
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError
from typing import Any, Dict

from scheduhub.models.errors import (
    DocumentStoreError,
    EmployeeAlreadyAddedError,
    EntitlementLimitError,
    WorkspaceNotFoundError,
)
from scheduhub.models.workspace import WORKSPACE_NAME_MAX_LENGTH, Employee, Workspace
from scheduhub.services.workspace_service import WorkspaceService
from scheduhub.utils.auth import extract_user_id_from_event

# Initialize the logger
logger = Logger()

# Configure CORS
cors_config = CORSConfig(
    allow_origin="*",  # In production, specify your actual domain
)

# Initialize the APIGatewayRestResolver
app = APIGatewayRestResolver(cors=cors_config)


@app.exception_handler(EntitlementLimitError)
def handle_entitlement_limit(exc: EntitlementLimitError) -> Response:
    decision = exc.decision
    return Response(
        status_code=403,
        content_type=content_types.APPLICATION_JSON,
        body=json.dumps({
            "error": "Entitlement limit reached",
            "reason": decision.reason.value,
            "limit": decision.limit,
            "current_count": decision.current_count,
            "upgrade_required": True,
        }),
    )


@app.exception_handler(DocumentStoreError)
def handle_document_store_error(exc: DocumentStoreError) -> Response:
    logger.error(f"Document store error: {str(exc)}")
    return Response(
        status_code=500,
        content_type=content_types.APPLICATION_JSON,
        body=json.dumps({"message": "Failed to access workspace data"}),
    )


def _require_user_id() -> str:
    user_id = extract_user_id_from_event(app.current_event.raw_event)
    if not user_id:
        logger.error("No user_id found in JWT token")
        raise UnauthorizedError("Authentication required")
    return user_id


def _json_object_body() -> Dict[str, Any]:
    try:
        body = app.current_event.json_body
    except (TypeError, ValueError) as exc:
        logger.error(f"Validation error: {str(exc)}")
        raise BadRequestError(f"Invalid request: {str(exc)}")
    if not isinstance(body, dict):
        raise BadRequestError("Invalid request: body must be a JSON object")
    return body


def _visible_workspace(service: WorkspaceService, workspace_id: str, user_id: str) -> Workspace:
    workspace = service.get_workspace(workspace_id)
    if workspace is None or (workspace.owner_id != user_id and user_id not in workspace.member_ids):
        raise NotFoundError(f"Workspace {workspace_id} not found")
    return workspace


@app.get("/workspaces")
def list_workspaces() -> Dict[str, Any]:
    user_id = _require_user_id()
    workspaces = WorkspaceService().list_workspaces_for_account(user_id)
    return {"workspaces": [workspace.model_dump(mode="json") for workspace in workspaces]}


@app.post("/workspaces")
def create_workspace() -> Dict[str, Any]:
    """
    Create a workspace owned by the caller.
    Expected body: {"name": "Front desk"}
    """
    user_id = _require_user_id()
    body = _json_object_body()

    name = body.get("name")
    if name is not None and not isinstance(name, str):
        raise BadRequestError("Invalid request: name must be a string")
    name = (name or "").strip()
    if not name:
        raise BadRequestError("Missing required field: name")
    if len(name) > WORKSPACE_NAME_MAX_LENGTH:
        raise BadRequestError(f"Invalid request: name is longer than {WORKSPACE_NAME_MAX_LENGTH} characters")

    workspace = WorkspaceService().create_workspace(user_id, name)
    return {"success": True, "workspace": workspace.model_dump(mode="json")}


@app.get("/workspaces/<workspace_id>")
def get_workspace(workspace_id: str) -> Dict[str, Any]:
    user_id = _require_user_id()
    workspace = _visible_workspace(WorkspaceService(), workspace_id, user_id)
    return {"workspace": workspace.model_dump(mode="json")}


@app.post("/workspaces/<workspace_id>/employees")
def add_employee(workspace_id: str) -> Dict[str, Any]:
    """
    Add an employee to a workspace the caller owns.
    Expected body: Employee fields, at least {"user_id": "..."}
    """
    user_id = _require_user_id()
    body = _json_object_body()

    try:
        employee = Employee(**body)
    except (ValidationError, TypeError) as exc:
        logger.error(f"Validation error: {str(exc)}")
        raise BadRequestError(f"Invalid request: {str(exc)}")

    service = WorkspaceService()
    workspace = _visible_workspace(service, workspace_id, user_id)
    if workspace.owner_id != user_id:
        raise ServiceError(403, "Only the workspace owner can add employees")

    try:
        updated = service.add_employee(workspace_id, employee)
    except WorkspaceNotFoundError:
        raise NotFoundError(f"Workspace {workspace_id} not found")
    except EmployeeAlreadyAddedError as exc:
        raise BadRequestError(str(exc))

    return {"success": True, "workspace": updated.model_dump(mode="json")}


@app.delete("/workspaces/<workspace_id>/employees/<employee_id>")
def remove_employee(workspace_id: str, employee_id: str) -> Dict[str, Any]:
    user_id = _require_user_id()

    service = WorkspaceService()
    workspace = _visible_workspace(service, workspace_id, user_id)
    if workspace.owner_id != user_id:
        raise ServiceError(403, "Only the workspace owner can remove employees")

    try:
        updated = service.remove_employee(workspace_id, employee_id)
    except WorkspaceNotFoundError:
        raise NotFoundError(f"Workspace {workspace_id} not found")

    return {"success": True, "workspace": updated.model_dump(mode="json")}


def handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Lambda function handler.
    """
    return app.resolve(event, context)
