"""
### Identifier lookup
Documents are looked up by their `_id`, which the user provides as a string.

In MongoDB, an `_id` is often an ObjectId, but it may just as well be a string (or anything else).
A string that looks like an ObjectId is not equal to the ObjectId itself, so the lookup mode is configurable:

* `auto`: an id that is a valid ObjectId (24 hex digits) matches both the ObjectId and the plain string;
    any other id matches the plain string
* `objectid`: the id must be a valid ObjectId; it only matches the ObjectId
* `string`: the id only matches the plain string
"""

from bson.objectid import ObjectId

from .base import MongoRestHandlerBase
from ..exc import InvalidArgument


ID_MODES = frozenset(('auto', 'objectid', 'string'))


class MongoId(MongoRestHandlerBase):
    """ Lookup by identifier """

    request_section_name = 'id'

    def __init__(self, id_mode='auto'):
        """ Init an id lookup

        :param id_mode: How to compare the user-supplied id with stored ids: 'auto', 'objectid', 'string'
        """
        super(MongoId, self).__init__()

        # Config
        if id_mode not in ID_MODES:
            raise ValueError('Unknown id_mode: {!r}. Use one of: {}'.format(id_mode, ', '.join(sorted(ID_MODES))))
        self.id_mode = id_mode

        # On input
        self.condition = None

    def input(self, id):
        super(MongoId, self).input(id)

        # Validate
        if not isinstance(id, str) or not id.strip():
            raise InvalidArgument('A document id is required.')

        # Compile
        if self.id_mode == 'string':
            self.condition = id
        elif self.id_mode == 'objectid':
            if not ObjectId.is_valid(id):
                raise InvalidArgument('Invalid document id: {!r} is not a valid ObjectId'.format(id))
            self.condition = ObjectId(id)
        elif ObjectId.is_valid(id):  # auto
            self.condition = {'$in': [ObjectId(id), id]}
        else:
            self.condition = id

        return self

    def compile_statement(self) -> dict:
        """ Get the filter that selects the document """
        return {'_id': self.condition}
