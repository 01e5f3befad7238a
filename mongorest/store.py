import re
from logging import getLogger

from pymongo import MongoClient
from pymongo.database import Database

from .util.settings_dict import GatewaySettingsDict

logger = getLogger(__name__)


def redact_url(url: str) -> str:
    """ Hide the credentials in a connection string """
    return re.sub(r'(?<=//)[^@/]*@', '***@', url)


class StoreSession:
    """ Owns the connection to the MongoDB database

        MongoClient is thread-safe and keeps its own connection pool: one session serves all requests.
        The client connects lazily, on the first operation.

        Example:

            with StoreSession('mongodb://localhost:27017', 'MongoRest') as store:
                gateway = CollectionGateway(store.database)
    """

    def __init__(self, url: str, db_name: str, timeout_ms: int = 3000):
        self.url = url
        self.db_name = db_name
        self.timeout_ms = timeout_ms

        self._client = None  # type: MongoClient

    @classmethod
    def from_settings(cls, settings: GatewaySettingsDict) -> 'StoreSession':
        return cls(settings['mongo_url'], settings['mongo_db_name'], settings['mongo_timeout_ms'])

    @property
    def client(self) -> MongoClient:
        """ Get the client, create it if necessary """
        if self._client is None:
            logger.info('MongoDB connection url: %s, database name: %s', redact_url(self.url), self.db_name)
            self._client = MongoClient(
                self.url,
                serverSelectionTimeoutMS=self.timeout_ms,
                connectTimeoutMS=self.timeout_ms,
            )
        return self._client

    @property
    def database(self) -> Database:
        """ Get the database that holds the collections """
        return self.client.get_database(self.db_name)

    def close(self):
        """ Close the client. Can be called many times """
        if self._client is not None:
            logger.info('Closing MongoDB connection to database %s', self.db_name)
            self._client.close()
            self._client = None

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def __repr__(self):
        return '{}({!r}, {!r})'.format(self.__class__.__name__, redact_url(self.url), self.db_name)
