"""Flask integration for declaring request parameters inside views.

Example:
    ```python
    from flask import Flask, jsonify
    from dataknobs_param.flask_ext import ParamExtension, get_processor, request_params

    app = Flask(__name__)
    app.config["PARAM_FAILURE_MODE"] = "raise"
    ParamExtension(app)

    @app.route("/search")
    def search():
        params = get_processor()
        params.param("q", str, required=True, blank=False)
        params.param("limit", int, default=20, max=100)
        return jsonify(request_params())
    ```

A failed declaration in exception mode raises ``ParameterHalt``, which the
extension renders as a 400 response. With ``PARAM_PROPAGATE_ERRORS`` set (or
``raise_=True`` on a declaration) ``InvalidParameterError`` reaches the app's
own error handlers instead.
"""

from __future__ import annotations

import logging
from typing import Any

from flask import Flask, Response, current_app, g, request

from .exceptions import ParameterHalt
from .processor import ParamProcessor
from .settings import ParamSettings

logger = logging.getLogger(__name__)

EXTENSION_KEY = "dataknobs_param"
JSON_MIMETYPE = "application/json"


class ParamExtension:
    """Registers parameter settings and the 400 error handler on an app."""

    def __init__(self, app: Flask | None = None, settings: ParamSettings | None = None):
        self.settings = settings
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """Attach the extension to an app.

        Settings passed to the constructor win; otherwise they are read from
        ``PARAM_FAILURE_MODE`` and ``PARAM_PROPAGATE_ERRORS`` in ``app.config``.
        """
        settings = self.settings or ParamSettings.from_dict({
            "failure_mode": app.config.get("PARAM_FAILURE_MODE", "raise"),
            "propagate_errors": app.config.get("PARAM_PROPAGATE_ERRORS", False),
        })
        app.extensions[EXTENSION_KEY] = settings
        app.register_error_handler(ParameterHalt, render_halt)
        logger.info(f"Param extension initialized: {settings.to_dict()}")


def render_halt(error: ParameterHalt) -> Response:
    """Render a ``ParameterHalt`` as a 400 response."""
    mimetype = JSON_MIMETYPE if error.is_json else "text/plain"
    return Response(error.body, status=error.status_code, mimetype=mimetype)


def wants_json() -> bool:
    """Whether the current request negotiates a JSON response."""
    return request.is_json or request.accept_mimetypes.best == JSON_MIMETYPE


def request_params() -> dict[str, Any]:
    """Mutable parameter mapping for the current request.

    Built once per request from the query string, the form body and a JSON
    object body; later sources override earlier ones.
    """
    if "dataknobs_params" not in g:
        # Repeated keys keep their last value
        params: dict[str, Any] = {key: values[-1] for key, values in request.args.lists()}
        params.update({key: values[-1] for key, values in request.form.lists()})
        body = request.get_json(silent=True)
        if isinstance(body, dict):
            params.update(body)
        g.dataknobs_params = params
    return g.dataknobs_params


def get_processor() -> ParamProcessor:
    """Processor over ``request_params()`` for the current request."""
    if "dataknobs_param_processor" not in g:
        settings = current_app.extensions.get(EXTENSION_KEY) or ParamSettings()
        g.dataknobs_param_processor = ParamProcessor(
            request_params(),
            settings,
            wants_json=wants_json,
        )
    return g.dataknobs_param_processor
