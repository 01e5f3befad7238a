"""
MongoRest lets you work with any collection of a MongoDB database using JSON documents.
The `CollectionGateway` is the surface for all operations: you name the collection on every call.

```python
from mongorest import CollectionGateway, StoreSession, NOT_FOUND

with StoreSession('mongodb://localhost:27017', 'MongoRest') as store:
    gateway = CollectionGateway(store.database)

    gateway.create('items', {'_id': '1', 'name': 'a'})
    gateway.fetch_by_id('items', '1')  # -> {'_id': '1', 'name': 'a'}
    gateway.update_many('items', {'_id': '1'}, {'name': 'b'})  # -> UpdateOutcome(matched=1, modified=1)
    gateway.fetch_many('items', {'name': 'b'}, limit=10)  # -> [{'_id': '1', 'name': 'b'}]
    gateway.delete_many('items', {})  # -> DeleteOutcome(deleted=1)
```

Every filter goes through [Filter Operation](#filter-operation) normalization first.
"""

from contextlib import contextmanager
from logging import getLogger

from bson.errors import BSONError
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError, BulkWriteError, InvalidName

from . import exc
from .document import validate_document
from .handlers import MongoFilter, MongoUpdate, MongoLimit, MongoId
from .util import Reusable, GatewaySettingsDict

from typing import Iterable, List, Mapping, Optional, Union

logger = getLogger(__name__)


class _NOT_FOUND_TYPE:
    """ A falsy marker: the document was not found """
    def __repr__(self):
        return 'NOT_FOUND'
    def __bool__(self):
        return False


NOT_FOUND = _NOT_FOUND_TYPE()  # returned by fetch_by_id() when there's no such document


# region Outcomes

class InsertOutcome:
    """ The outcome of create() and insert_many() """

    def __init__(self, message: str, inserted_ids: list):
        self.message = message
        self.inserted_ids = inserted_ids

    @property
    def inserted_count(self) -> int:
        return len(self.inserted_ids)

    def as_dict(self) -> dict:
        return {'message': self.message}

    def __repr__(self):
        return '{}(inserted={})'.format(self.__class__.__name__, self.inserted_count)


class UpdateOutcome:
    """ The outcome of update_many() """

    def __init__(self, message: str, matched_count: int, modified_count: int):
        self.message = message
        self.matched_count = matched_count
        self.modified_count = modified_count

    @property
    def not_found(self) -> bool:
        """ Nothing was modified """
        return self.modified_count == 0

    def as_dict(self) -> dict:
        return {'message': self.message,
                'matchedCount': self.matched_count,
                'modifiedCount': self.modified_count}

    def __repr__(self):
        return '{}(matched={}, modified={})'.format(self.__class__.__name__, self.matched_count, self.modified_count)


class DeleteOutcome:
    """ The outcome of delete_many() and delete_by_id() """

    def __init__(self, message: str, deleted_count: int):
        self.message = message
        self.deleted_count = deleted_count

    @property
    def not_found(self) -> bool:
        """ Nothing was deleted """
        return self.deleted_count == 0

    def as_dict(self) -> dict:
        return {'message': self.message,
                'deletedCount': self.deleted_count}

    def __repr__(self):
        return '{}(deleted={})'.format(self.__class__.__name__, self.deleted_count)

# endregion


class CollectionGateway:
    """ Create, read, update, delete, and count documents in any collection

        The gateway keeps no state between calls besides its configuration,
        so one object can serve all requests; keep it at the application level.

        Every method:
        * validates the collection name; a blank one raises InvalidArgument before the store is touched
        * makes exactly one round-trip to the store
        * wraps any driver error into StorageFailure; nothing is retried
    """

    # The classes to use for handlers
    # You can override them, if necessary
    _FILTER_CLS = MongoFilter
    _UPDATE_CLS = MongoUpdate
    _LIMIT_CLS = MongoLimit
    _ID_CLS = MongoId

    def __init__(self, database: Database, settings: Optional[GatewaySettingsDict] = None):
        """ Init the gateway

        :param database: The database to work with. Its owner is responsible for closing it.
        :param settings: Settings for handlers. Only `default_limit`, `max_limit`, `id_mode` are used here.
        """
        self.database = database
        self.settings = settings if settings is not None else GatewaySettingsDict()

        # Configured handlers. Reusable() copies them on every use
        self.handler_filter = Reusable(self._FILTER_CLS())  # type: MongoFilter
        self.handler_update = Reusable(self._UPDATE_CLS())  # type: MongoUpdate
        self.handler_limit = Reusable(self._LIMIT_CLS(**self.settings.handler_settings('default_limit', 'max_limit')))  # type: MongoLimit
        self.handler_id = Reusable(self._ID_CLS(**self.settings.handler_settings('id_mode')))  # type: MongoId

    # region Operations

    def create(self, collection_name: str, document: Mapping) -> InsertOutcome:
        """ Insert one document

            :raises InvalidArgument: blank collection name
            :raises MalformedInput: the document has values of unsupported types
            :raises StorageFailure: e.g. a duplicate key
        """
        collection = self._collection(collection_name)
        document = self._prepare_document(document)

        with self._storage_operation('Insertion failed.', 'create', collection_name):
            result = collection.insert_one(document)

        return InsertOutcome('Document created successfully.', [result.inserted_id])

    def insert_many(self, collection_name: str, documents: Iterable[Mapping]) -> InsertOutcome:
        """ Insert a batch of documents

            The batch is inserted in order, and is not atomic:
            when the store fails half-way, the documents inserted so far remain,
            and their count is available in StorageFailure.details

            :raises InvalidArgument: blank collection name, empty batch
            :raises MalformedInput: a document has values of unsupported types
            :raises StorageFailure
        """
        collection = self._collection(collection_name)
        if isinstance(documents, Mapping):
            raise exc.InvalidArgument('Documents must be a list')
        documents = [self._prepare_document(d) for d in documents]
        if not documents:
            raise exc.InvalidArgument('At least one document is required.')

        with self._storage_operation('Insertion failed.', 'insert_many', collection_name):
            result = collection.insert_many(documents, ordered=True)

        return InsertOutcome('{} documents created successfully.'.format(len(result.inserted_ids)),
                             list(result.inserted_ids))

    def fetch_by_id(self, collection_name: str, id: str) -> Union[dict, _NOT_FOUND_TYPE]:
        """ Get one document by its id

            :return: the document, or NOT_FOUND
            :raises InvalidArgument: blank collection name, invalid id
            :raises StorageFailure
        """
        collection = self._collection(collection_name)
        criteria = self.handler_id.input(id).compile_statement()

        with self._storage_operation('Query failed.', 'fetch_by_id', collection_name):
            document = collection.find_one(criteria)

        return NOT_FOUND if document is None else document

    def fetch_many(self, collection_name: str, criteria: Optional[Mapping] = None, limit: Optional[int] = None) -> List[dict]:
        """ Find documents

            No sorting is applied: the order is whatever the store gives.

            :param criteria: Filter. An empty one matches all documents
            :param limit: The maximum number of documents to return; `None` for the default
            :raises InvalidArgument: blank collection name, invalid filter, invalid limit
            :raises StorageFailure
        """
        collection = self._collection(collection_name)
        conditions = self.handler_filter.input(criteria).compile_statement()
        limit = self.handler_limit.input(limit).compile_statement()

        with self._storage_operation('Query failed.', 'fetch_many', collection_name):
            return list(collection.find(conditions).limit(limit))

    def update_many(self, collection_name: str, criteria: Optional[Mapping], update: Mapping) -> UpdateOutcome:
        """ Update the fields of all matching documents

            Only the provided fields are assigned; documents are never replaced.

            :param criteria: Filter. An empty one matches all documents
            :param update: Fields to set
            :raises InvalidArgument: blank collection name, invalid filter, invalid update
            :raises StorageFailure
        """
        collection = self._collection(collection_name)
        conditions = self.handler_filter.input(criteria).compile_statement()
        modification = self.handler_update.input(update).compile_statement()

        with self._storage_operation('Update failed.', 'update_many', collection_name):
            result = collection.update_many(conditions, modification)

        message = 'Documents updated successfully.' if result.modified_count else 'No documents were modified.'
        return UpdateOutcome(message, result.matched_count, result.modified_count)

    def delete_many(self, collection_name: str, criteria: Optional[Mapping] = None) -> DeleteOutcome:
        """ Delete all matching documents

            :param criteria: Filter. An empty one matches all documents!
            :raises InvalidArgument: blank collection name, invalid filter
            :raises StorageFailure
        """
        collection = self._collection(collection_name)
        conditions = self.handler_filter.input(criteria).compile_statement()

        with self._storage_operation('Deletion failed.', 'delete_many', collection_name):
            result = collection.delete_many(conditions)

        return self._delete_outcome(result.deleted_count)

    def delete_by_id(self, collection_name: str, id: str) -> DeleteOutcome:
        """ Delete one document by its id

            :raises InvalidArgument: blank collection name, invalid id
            :raises StorageFailure
        """
        collection = self._collection(collection_name)
        criteria = self.handler_id.input(id).compile_statement()

        with self._storage_operation('Deletion failed.', 'delete_by_id', collection_name):
            result = collection.delete_one(criteria)

        return self._delete_outcome(result.deleted_count)

    def count(self, collection_name: str, criteria: Optional[Mapping] = None) -> int:
        """ Count matching documents. No limit is applied.

            :raises InvalidArgument: blank collection name, invalid filter
            :raises StorageFailure
        """
        collection = self._collection(collection_name)
        conditions = self.handler_filter.input(criteria).compile_statement()

        with self._storage_operation('Count failed.', 'count', collection_name):
            return collection.count_documents(conditions)

    # endregion

    # region Helpers

    def _collection(self, collection_name: str) -> Collection:
        """ Get a collection by name

            The collection is not required to exist: the store creates it lazily.

            :raises InvalidArgument: blank, or otherwise invalid collection name
        """
        if not isinstance(collection_name, str) or not collection_name.strip():
            raise exc.InvalidArgument('A collection name is required.')

        try:
            return self.database.get_collection(collection_name)
        except InvalidName as e:
            raise exc.InvalidArgument('Invalid collection name: {}'.format(e)) from e

    def _prepare_document(self, document: Mapping) -> dict:
        """ Validate a document that's going to be inserted, and copy it

            The driver adds `_id` to the documents it inserts: the copy keeps the caller's document intact.
        """
        if not isinstance(document, Mapping):
            raise exc.InvalidArgument('A document must be an object')

        try:
            validate_document(document)
        except TypeError as e:
            raise exc.MalformedInput(str(e)) from e

        return dict(document)

    @staticmethod
    def _delete_outcome(deleted_count: int) -> DeleteOutcome:
        message = 'Documents deleted successfully.' if deleted_count else 'No documents matched.'
        return DeleteOutcome(message, deleted_count)

    @contextmanager
    def _storage_operation(self, message: str, operation: str, collection_name: str):
        """ Wrap driver errors, and BSON encoding errors, into StorageFailure

            :param message: Description of the failure, for the user
            :param operation: Operation name, for the log
        """
        try:
            yield
        except BulkWriteError as e:
            logger.warning('%s on %r failed: %s', operation, collection_name, e)
            raise exc.StorageFailure(message, str(e), details={'nInserted': e.details.get('nInserted', 0),
                                                                'writeErrors': e.details.get('writeErrors', [])}) from e
        except PyMongoError as e:
            logger.warning('%s on %r failed: %s', operation, collection_name, e)
            raise exc.StorageFailure(message, str(e)) from e
        except (BSONError, OverflowError) as e:
            # The driver could not encode the request, e.g. an integer beyond int64 in a filter
            logger.warning('%s on %r failed to encode: %s', operation, collection_name, e)
            raise exc.StorageFailure(message, str(e)) from e

    # endregion
