from enum import Enum

from .. import codec
from ..exc import BaseMongoRestException, InvalidArgument, StorageFailure
from ..gateway import CollectionGateway, NOT_FOUND

from typing import Any, Optional, Tuple


class CRUD_METHOD(Enum):
    """ CRUD method """
    CREATE = 'CREATE'
    CREATE_MANY = 'CREATE_MANY'
    GET = 'GET'
    LIST = 'LIST'
    FIND = 'FIND'
    UPDATE = 'UPDATE'
    DELETE = 'DELETE'
    DELETE_BY_ID = 'DELETE_BY_ID'
    COUNT = 'COUNT'


class CollectionCrudViewMixin:
    """ A mixin class for implementations of collection CRUD views.

        It turns requests into CollectionGateway calls, and gateway results into (status, payload) pairs.
        It knows nothing about the web framework: a subclass provides the request body, and renders the payload.

        This class is supposed to be re-initialized for every request.

        To implement a CRUD view:
        1. Implement `_get_gateway()` and `_get_request_body()`
        2. Call `dispatch()` from your routes
        3. Encode the payload with `codec.encode()`

        For an example, see [mongorest/app.py](mongorest/app.py)
    """

    # region Abstract Methods

    def _get_gateway(self) -> CollectionGateway:
        """ (Abstract method) Get the gateway to run operations with """
        raise NotImplementedError('_get_gateway() not implemented on {}'
                                  .format(type(self)))

    def _get_request_body(self) -> bytes:
        """ (Abstract method) Get the raw body of the current request """
        raise NotImplementedError('_get_request_body() not implemented on {}'
                                  .format(type(self)))

    # endregion

    def dispatch(self, crud_method: CRUD_METHOD, collection_name: str, *args) -> Tuple[int, Any]:
        """ Run a CRUD method, handle errors

            :return: (HTTP status, payload)
        """
        method = getattr(self, '_method_' + crud_method.value.lower())

        try:
            return method(collection_name, *args)
        except StorageFailure as e:
            return e.http_status, {'message': e.message, 'error': e.error}
        except BaseMongoRestException as e:
            return e.http_status, {'message': e.message}

    # ###
    # CRUD methods' implementations

    def _method_create(self, collection_name: str) -> Tuple[int, Any]:
        """ (CRUD method) Insert a document

                POST /<collection>/create
                {'name': 'Hakon'}
        """
        document = codec.decode(self._get_request_body())
        outcome = self._get_gateway().create(collection_name, document)
        return 200, outcome.as_dict()

    def _method_create_many(self, collection_name: str) -> Tuple[int, Any]:
        """ (CRUD method) Insert a list of documents

                POST /<collection>/create-many
                [{'name': 'Hakon'}, {'name': 'Kevin'}]
        """
        documents = codec.decode_many(self._get_request_body())
        outcome = self._get_gateway().insert_many(collection_name, documents)
        return 200, outcome.as_dict()

    def _method_get(self, collection_name: str, id: str) -> Tuple[int, Any]:
        """ (CRUD method) Fetch a single document by id

                GET /<collection>?id=1
        """
        document = self._get_gateway().fetch_by_id(collection_name, id)
        if document is NOT_FOUND:
            return 404, {'message': 'Document not found.'}
        return 200, document

    def _method_list(self, collection_name: str, limit: Optional[str] = None) -> Tuple[int, Any]:
        """ (CRUD method) Fetch documents, no filter

                GET /<collection>?limit=10
        """
        documents = self._get_gateway().fetch_many(collection_name, {}, self._parse_limit(limit))
        return 200, documents

    def _method_find(self, collection_name: str, limit: Optional[str] = None) -> Tuple[int, Any]:
        """ (CRUD method) Fetch documents with a filter

                POST /<collection>/find?limit=10
                {'age': {'$gte': 18}}
        """
        criteria = self._get_optional_filter()
        documents = self._get_gateway().fetch_many(collection_name, criteria, self._parse_limit(limit))
        return 200, documents

    def _method_update(self, collection_name: str) -> Tuple[int, Any]:
        """ (CRUD method) Update fields of the matching documents

                PUT /<collection>/update
                {'filter': {'_id': '1'}, 'update': {'name': 'Hakon'}}

            Responds with 404 when nothing was modified
        """
        criteria, update = codec.decode_update_request(self._get_request_body())
        outcome = self._get_gateway().update_many(collection_name, criteria, update)
        return (404 if outcome.not_found else 200), outcome.as_dict()

    def _method_delete(self, collection_name: str) -> Tuple[int, Any]:
        """ (CRUD method) Delete the matching documents

                POST /<collection>/delete
                {'status': 'archived'}

            Zero deleted documents is not an error
        """
        criteria = self._get_optional_filter()
        outcome = self._get_gateway().delete_many(collection_name, criteria)
        return 200, outcome.as_dict()

    def _method_delete_by_id(self, collection_name: str, id: str) -> Tuple[int, Any]:
        """ (CRUD method) Delete a single document by id

                DELETE /<collection>/1

            Responds with 404 when there was no such document
        """
        outcome = self._get_gateway().delete_by_id(collection_name, id)
        return (404 if outcome.not_found else 200), outcome.as_dict()

    def _method_count(self, collection_name: str) -> Tuple[int, Any]:
        """ (CRUD method) Count the matching documents

                POST /<collection>/count
                {'age': {'$gte': 18}}
        """
        criteria = self._get_optional_filter()
        return 200, self._get_gateway().count(collection_name, criteria)

    # region Helpers

    def _get_optional_filter(self) -> dict:
        """ Decode the filter from the request body. No body means "everything" """
        body = self._get_request_body()
        if not body or not body.strip():
            return {}
        return codec.decode(body)

    @staticmethod
    def _parse_limit(limit: Optional[str]) -> Optional[int]:
        """ Parse the `limit` query string argument """
        if limit is None or limit == '':
            return None
        try:
            return int(limit)
        except ValueError:
            raise InvalidArgument('Limit must be an integer, got {!r}'.format(limit))

    # endregion
