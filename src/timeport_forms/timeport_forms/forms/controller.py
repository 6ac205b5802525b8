from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DomainError, NotFoundError, SchemaIntegrityError
from ..container import Container

logger = logging.getLogger(__name__)


def _error(message: str, status: int, **extra):
    return jsonify({"error": message, **extra}), status


def _domain_error_response(e: DomainError):
    if isinstance(e, SchemaIntegrityError):
        return _error(str(e), 422, errors=list(e.errors))
    if isinstance(e, AuthorizationError):
        return _error(str(e), 403)
    if isinstance(e, NotFoundError):
        return _error(str(e), 404)
    return _error(str(e), 400)


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise DomainError("Request body must be a JSON object")
    return data


def _parse_bool(value) -> bool:
    return str(value or "").strip().lower() in {"1", "true", "yes", "on"}


def register(app: Flask, container: Container) -> None:
    service = container.form_template_service

    def current_role() -> Role:
        return Role(session.get("role"))

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return _error("Login required", 401)
            try:
                Role(session.get("role"))
            except ValueError:
                return _error("Unknown role", 403)
            return view(*args, **kwargs)

        return wrapper

    def handles_domain_errors(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except DomainError as e:
                return _domain_error_response(e)
            except Exception:
                logger.exception("Unhandled error in %s", request.path)
                return _error("Internal server error", 500)

        return wrapper

    @app.route("/api/forms", methods=["GET"], endpoint="list_forms")
    @login_required
    @handles_domain_errors
    def list_forms():
        templates = service.list_templates(
            kind=request.args.get("kind") or None,
            active_only=_parse_bool(request.args.get("active")),
        )
        return jsonify({"templates": [t.to_dict() for t in templates]})

    @app.route("/api/forms", methods=["POST"], endpoint="create_form")
    @login_required
    @handles_domain_errors
    def create_form():
        data = _json_body()
        template_id = service.create_template(
            current_role=current_role(),
            name=data.get("name", ""),
            kind=data.get("kind", ""),
            category=data.get("category"),
            description=data.get("description"),
            use_defaults=bool(data.get("use_defaults", True)),
        )
        return jsonify(service.get_template(template_id=template_id).to_dict()), 201

    @app.route("/api/forms/<int:template_id>", methods=["GET"], endpoint="get_form")
    @login_required
    @handles_domain_errors
    def get_form(template_id: int):
        return jsonify(service.get_template(template_id=template_id).to_dict())

    @app.route("/api/forms/<int:template_id>", methods=["DELETE"], endpoint="delete_form")
    @login_required
    @handles_domain_errors
    def delete_form(template_id: int):
        service.delete(current_role=current_role(), template_id=template_id)
        return "", 204

    @app.route("/api/forms/<int:template_id>/active", methods=["PUT"], endpoint="set_form_active")
    @login_required
    @handles_domain_errors
    def set_form_active(template_id: int):
        data = _json_body()
        service.set_active(
            current_role=current_role(),
            template_id=template_id,
            is_active=bool(data.get("is_active")),
        )
        return jsonify(service.get_template(template_id=template_id).to_dict())

    @app.route("/api/forms/<int:template_id>/fields", methods=["PUT"], endpoint="save_form_fields")
    @login_required
    @handles_domain_errors
    def save_form_fields(template_id: int):
        data = _json_body()
        published = service.save_fields(
            current_role=current_role(),
            template_id=template_id,
            fields=data.get("fields"),
        )
        return jsonify({"fields": [f.to_dict() for f in published]})

    @app.route("/api/forms/builder/check", methods=["POST"], endpoint="check_form_fields")
    @login_required
    @handles_domain_errors
    def check_form_fields():
        data = _json_body()
        errors = service.check_integrity(fields=data.get("fields") or [])
        return jsonify({"publishable": not errors, "errors": errors})

    @app.route("/api/forms/builder/<operation>", methods=["POST"], endpoint="apply_builder_operation")
    @login_required
    @handles_domain_errors
    def apply_builder_operation(operation: str):
        data = _json_body()
        fields, created = service.apply(
            current_role=current_role(),
            fields=data.get("fields") or [],
            operation=operation,
            args=data.get("args") or {},
        )
        body = {"fields": [f.to_dict() for f in fields]}
        if created is not None:
            body["field"] = created.to_dict()
        return jsonify(body)

    @app.route("/api/forms/<int:template_id>/evaluate", methods=["POST"], endpoint="evaluate_form")
    @login_required
    @handles_domain_errors
    def evaluate_form(template_id: int):
        data = _json_body()
        values = data.get("values") or {}
        if not isinstance(values, dict):
            raise DomainError("values must be a JSON object")
        result = service.evaluate_submission(template_id=template_id, values=values)
        template = service.get_template(template_id=template_id)
        return jsonify({**result.to_dict(), "payload": result.payload(template.fields)})
