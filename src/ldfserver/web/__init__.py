import importlib.metadata
import logging
from typing import Any, Optional

import yaml
from flask import Flask
from werkzeug.exceptions import HTTPException

from ldfserver.context import ServerContext
from ldfserver.utils import envsubst
from ldfserver.web.blueprints import fragments_blueprint
from ldfserver.web.flask_problem import problem_detail_response

__version__ = importlib.metadata.version('ldf-server')

logger = logging.getLogger(__name__)


def load_config(config_file: str) -> dict[str, Any]:
    with open(config_file, 'r') as stream:
        return envsubst(yaml.safe_load(stream) or {})


def create_app(config_file: Optional[str] = None, config: Optional[dict[str, Any]] = None) -> Flask:
    """Create the Flask application from a YAML `config_file`, or from an
    already loaded `config` dictionary.

    All data sources are opened here, before the application is returned;
    closing them is left to the caller, through the registry of the
    `CONTEXT` stored in the application config."""
    if config is None:
        config = load_config(config_file)

    app = Flask(__name__)
    app.config['CONTEXT'] = ServerContext.from_config(config)
    app.register_blueprint(fragments_blueprint)
    app.register_error_handler(HTTPException, problem_detail_response)

    return app
