from unittest import mock

import mongomock
from pymongo.collection import Collection
from pymongo.database import Database


def get_working_db_for_tests(db_name: str = 'test'):
    """ Get an empty in-memory database

        Every call gives a new client, so tests never share data
    """
    return mongomock.MongoClient().get_database(db_name)


def get_mock_db_for_tests():
    """ Get a database double that records every call and never talks to a store

        :return: (database, collection): the collection is what `database.get_collection()` returns
    """
    database = mock.MagicMock(spec=Database)
    collection = mock.MagicMock(spec=Collection)
    database.get_collection.return_value = collection
    return database, collection
