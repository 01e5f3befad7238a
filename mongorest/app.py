"""
The HTTP API: a Flask application that exposes a CollectionGateway.

All routes are mounted under `/api/collections`; the collection name is always a path segment:

| Route                               | Operation      |
|-------------------------------------|----------------|
| `POST   /<collection>/create`       | create         |
| `POST   /<collection>/create-many`  | insert_many    |
| `GET    /<collection>?id=<id>`      | fetch_by_id    |
| `GET    /<collection>?limit=<n>`    | fetch_many     |
| `POST   /<collection>/find?limit=n` | fetch_many     |
| `PUT    /<collection>/update`       | update_many    |
| `POST   /<collection>/delete`       | delete_many    |
| `DELETE /<collection>/<id>`         | delete_by_id   |
| `POST   /<collection>/count`        | count          |

Run it with `python -m mongorest`; see GatewaySettingsDict.from_env() for the environment variables.
"""

import atexit
import logging
import os
from logging import getLogger

from flask import Flask, Blueprint, Response, request
from pymongo.database import Database

from . import codec
from .crud import CollectionCrudViewMixin, CRUD_METHOD
from .exc import MalformedInput
from .gateway import CollectionGateway
from .store import StoreSession
from .util import GatewaySettingsDict

from typing import Any, Optional

logger = getLogger(__name__)

API_ROOT_PATH = '/api/collections'


class FlaskCollectionsView(CollectionCrudViewMixin):
    """ Collections CRUD view bound to the current Flask request """

    def __init__(self, gateway: CollectionGateway):
        self.gateway = gateway

    def _get_gateway(self) -> CollectionGateway:
        return self.gateway

    def _get_request_body(self) -> bytes:
        return request.get_data()


def json_response(status: int, payload: Any) -> Response:
    """ Render a payload with the Codec """
    return Response(codec.encode(payload), status=status, mimetype='application/json')


def create_blueprint(gateway: CollectionGateway) -> Blueprint:
    """ Make a blueprint with all the collection routes """
    bp = Blueprint('collections', __name__, url_prefix=API_ROOT_PATH)

    def run(crud_method: CRUD_METHOD, collection_name: str, *args) -> Response:
        status, payload = FlaskCollectionsView(gateway).dispatch(crud_method, collection_name, *args)
        try:
            return json_response(status, payload)
        except MalformedInput as e:
            # A stored value that has no JSON representation
            logger.warning('%s on %r: the response could not be encoded: %s', crud_method.name, collection_name, e)
            return json_response(500, {'message': 'Response encoding failed.', 'error': str(e.__cause__ or e)})

    @bp.route('/<collection_name>/create', methods=['POST'])
    def create(collection_name):
        return run(CRUD_METHOD.CREATE, collection_name)

    @bp.route('/<collection_name>/create-many', methods=['POST'])
    def create_many(collection_name):
        return run(CRUD_METHOD.CREATE_MANY, collection_name)

    @bp.route('/<collection_name>', methods=['GET'])
    def get(collection_name):
        id = request.args.get('id')
        if id is not None:
            return run(CRUD_METHOD.GET, collection_name, id)
        return run(CRUD_METHOD.LIST, collection_name, request.args.get('limit'))

    @bp.route('/<collection_name>/find', methods=['POST'])
    def find(collection_name):
        return run(CRUD_METHOD.FIND, collection_name, request.args.get('limit'))

    @bp.route('/<collection_name>/update', methods=['PUT'])
    def update(collection_name):
        return run(CRUD_METHOD.UPDATE, collection_name)

    @bp.route('/<collection_name>/delete', methods=['POST'])
    def delete(collection_name):
        return run(CRUD_METHOD.DELETE, collection_name)

    @bp.route('/<collection_name>/<id>', methods=['DELETE'])
    def delete_by_id(collection_name, id):
        return run(CRUD_METHOD.DELETE_BY_ID, collection_name, id)

    @bp.route('/<collection_name>/count', methods=['POST'])
    def count(collection_name):
        return run(CRUD_METHOD.COUNT, collection_name)

    return bp


def create_app(settings: Optional[GatewaySettingsDict] = None, database: Optional[Database] = None) -> Flask:
    """ Make the Flask application

    :param settings: Settings; loaded from the environment by default
    :param database: The database to use. When not given, a StoreSession is opened with `settings`,
        and is closed when the interpreter exits.
    """
    if settings is None:
        settings = GatewaySettingsDict.from_env()

    if database is None:
        store = StoreSession.from_settings(settings)
        atexit.register(store.close)
        database = store.database

    app = Flask(__name__)
    app.config['MONGOREST_SETTINGS'] = settings
    app.register_blueprint(create_blueprint(CollectionGateway(database, settings)))
    return app


def main():
    """ Run the HTTP server """
    logging.basicConfig(level=os.environ.get('LOG_LEVEL', 'INFO').upper(),
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    settings = GatewaySettingsDict.from_env()
    app = create_app(settings)

    logger.info('App running on port %s', settings['app_port'])
    app.run(host=settings['app_host'], port=settings['app_port'])
