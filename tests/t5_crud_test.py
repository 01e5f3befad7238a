import json
import unittest

from pymongo.errors import ServerSelectionTimeoutError

from mongorest import codec, GatewaySettingsDict
from mongorest.app import create_app, API_ROOT_PATH
from .util import get_working_db_for_tests, get_mock_db_for_tests


class CrudTestBase(unittest.TestCase):
    longMessage = True
    maxDiff = None

    def setUp(self):
        self.db = get_working_db_for_tests()
        self.app = app = create_app(GatewaySettingsDict(), database=self.db)
        app.testing = True
        self.client = app.test_client()

    def request(self, method: str, path: str, body=None, **kwargs):
        """ Make a request, return (status, decoded JSON) """
        if body is not None and not isinstance(body, (str, bytes)):
            body = json.dumps(body)
        res = self.client.open(API_ROOT_PATH + path, method=method, data=body,
                               content_type='application/json', **kwargs)
        self.assertEqual(res.mimetype, 'application/json')
        return res.status_code, json.loads(res.get_data(as_text=True))


class CollectionsViewTest(CrudTestBase):
    """ Test the HTTP API """

    def test_create_get_update(self):
        # === Test: create
        status, res = self.request('POST', '/items/create', {'_id': '1', 'name': 'a'})
        self.assertEqual(status, 200)
        self.assertEqual(res, {'message': 'Document created successfully.'})

        # === Test: get by id
        status, res = self.request('GET', '/items?id=1')
        self.assertEqual(status, 200)
        self.assertEqual(res, {'_id': '1', 'name': 'a'})

        # === Test: get: not found
        status, res = self.request('GET', '/items?id=2')
        self.assertEqual(status, 404)
        self.assertEqual(res, {'message': 'Document not found.'})

        # === Test: update
        status, res = self.request('PUT', '/items/update', {'filter': {'_id': '1'}, 'update': {'name': 'b'}})
        self.assertEqual(status, 200)
        self.assertEqual(res, {'message': 'Documents updated successfully.', 'matchedCount': 1, 'modifiedCount': 1})

        status, res = self.request('GET', '/items?id=1')
        self.assertEqual(res, {'_id': '1', 'name': 'b'})

        # === Test: update: nothing modified
        status, res = self.request('PUT', '/items/update', {'filter': {'_id': '2'}, 'update': {'name': 'b'}})
        self.assertEqual(status, 404)
        self.assertEqual(res, {'message': 'No documents were modified.', 'matchedCount': 0, 'modifiedCount': 0})

        # === Test: update: no update
        status, res = self.request('PUT', '/items/update', {'filter': {'_id': '1'}})
        self.assertEqual(status, 400)

    def test_extended_types(self):
        oid = '5f43a1b2c3d4e5f6a7b8c9d0'

        # === Test: ObjectId goes in and out as Extended JSON
        status, res = self.request('POST', '/items/create', {'_id': {'$oid': oid}, 'n': 1, 'f': 1.0})
        self.assertEqual(status, 200)

        res = self.client.get(API_ROOT_PATH + '/items?id=' + oid)
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.get_data(as_text=True), '{"_id": {"$oid": "%s"}, "n": 1, "f": 1.0}' % oid)

        # === Test: decoded through the codec, it's the same document
        self.assertEqual(codec.decode(res.get_data()), codec.decode('{"_id": {"$oid": "%s"}, "n": 1, "f": 1.0}' % oid))

    def test_binary(self):
        wire = '{"_id": "x", "b": {"$binary": {"base64": "YWJj", "subType": "00"}}}'

        # === Test: binary in, binary out
        status, res = self.request('POST', '/items/create', wire)
        self.assertEqual(status, 200)

        res = self.client.get(API_ROOT_PATH + '/items?id=x')
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.get_data(as_text=True), wire)

    def test_create_many_and_find(self):
        # === Test: create many
        status, res = self.request('POST', '/items/create-many', [
            {'_id': 1, 'a': {'b': 1}, 'tags': ['x']},
            {'_id': 2, 'a': {'b': 1}, 'tags': ['y']},
            {'_id': 3, 'a': {'b': 2}, 'tags': ['z']},
        ])
        self.assertEqual(status, 200)
        self.assertEqual(res, {'message': '3 documents created successfully.'})

        # === Test: list
        status, res = self.request('GET', '/items')
        self.assertEqual(status, 200)
        self.assertEqual(len(res), 3)

        status, res = self.request('GET', '/items?limit=2')
        self.assertEqual(len(res), 2)

        # === Test: find with a nested filter
        status, res = self.request('POST', '/items/find', {'a': {'b': 1}})
        self.assertEqual(status, 200)
        self.assertEqual(sorted(d['_id'] for d in res), [1, 2])

        # === Test: find with an array
        status, res = self.request('POST', '/items/find', {'tags': ['x', 'z']})
        self.assertEqual(sorted(d['_id'] for d in res), [1, 3])

        # === Test: find with a limit
        status, res = self.request('POST', '/items/find?limit=1', {'a.b': 1})
        self.assertEqual(len(res), 1)

        # === Test: find without a body: everything
        status, res = self.request('POST', '/items/find')
        self.assertEqual(len(res), 3)

        # === Test: count
        status, res = self.request('POST', '/items/count', {'a': {'b': 1}})
        self.assertEqual(status, 200)
        self.assertEqual(res, 2)

        status, res = self.request('POST', '/items/count')
        self.assertEqual(res, 3)

    def test_delete(self):
        self.request('POST', '/items/create-many', [{'_id': '1'}, {'_id': '2'}, {'_id': '3'}])

        # === Test: delete by id
        status, res = self.request('DELETE', '/items/1')
        self.assertEqual(status, 200)
        self.assertEqual(res, {'message': 'Documents deleted successfully.', 'deletedCount': 1})

        status, res = self.request('DELETE', '/items/1')
        self.assertEqual(status, 404)
        self.assertEqual(res, {'message': 'No documents matched.', 'deletedCount': 0})

        # === Test: delete many
        status, res = self.request('POST', '/items/delete', {})
        self.assertEqual(status, 200)
        self.assertEqual(res, {'message': 'Documents deleted successfully.', 'deletedCount': 2})

        # === Test: again: zero, not an error
        status, res = self.request('POST', '/items/delete', {})
        self.assertEqual(status, 200)
        self.assertEqual(res, {'message': 'No documents matched.', 'deletedCount': 0})

    def test_errors(self):
        # === Test: malformed body
        status, res = self.request('POST', '/items/create', '{not json')
        self.assertEqual(status, 400)
        self.assertTrue(res['message'].startswith('Malformed input'))

        status, res = self.request('POST', '/items/create', [1, 2])
        self.assertEqual(status, 400)

        status, res = self.request('POST', '/items/create-many', {'a': 1})
        self.assertEqual(status, 400)

        # === Test: blank collection name
        status, res = self.request('POST', '/%20/create', {'a': 1})
        self.assertEqual(status, 400)
        self.assertEqual(res, {'message': 'A collection name is required.'})

        # === Test: invalid limit
        status, res = self.request('GET', '/items?limit=ten')
        self.assertEqual(status, 400)
        status, res = self.request('GET', '/items?limit=99999999999999999999')
        self.assertEqual(status, 400)

        # === Test: an integer the store can't keep
        status, res = self.request('POST', '/items/create', '{"n": 18446744073709551616}')
        self.assertEqual(status, 400)
        self.assertIn('64-bit', res['message'])

        # === Test: invalid filter
        status, res = self.request('POST', '/items/find', {'$or': 1})
        self.assertEqual(status, 400)

        # Nothing was stored
        self.assertEqual(self.db.get_collection('items').count_documents({}), 0)


class CollectionsViewStorageFailureTest(CrudTestBase):
    """ Test the HTTP API when the store fails """

    def setUp(self):
        self.db, self.collection = get_mock_db_for_tests()
        self.app = app = create_app(GatewaySettingsDict(), database=self.db)
        app.testing = True
        self.client = app.test_client()

    def test_storage_failure(self):
        self.collection.find_one.side_effect = ServerSelectionTimeoutError('No servers found')

        status, res = self.request('GET', '/items?id=1')
        self.assertEqual(status, 500)
        self.assertEqual(res, {'message': 'Query failed.', 'error': 'No servers found'})

    def test_encoding_failure(self):
        # === Test: a filter the driver can't encode
        self.collection.count_documents.side_effect = OverflowError('MongoDB can only handle up to 8-byte ints')
        status, res = self.request('POST', '/items/count', '{"n": 18446744073709551616}')
        self.assertEqual(status, 500)
        self.assertEqual(res, {'message': 'Count failed.', 'error': 'MongoDB can only handle up to 8-byte ints'})

        # === Test: a stored document that has no JSON representation
        self.collection.find_one.return_value = {'_id': '1', 's': {1, 2}}
        status, res = self.request('GET', '/items?id=1')
        self.assertEqual(status, 500)
        self.assertEqual(res['message'], 'Response encoding failed.')
        self.assertIn("'s'", res['error'])
