"""
### Limit Operation
Limits the number of documents returned by a "find" operation.

Values: can be a number, or a `null`.
A `null`, or a number that is not positive, means "the default limit".

There is no `skip`: MongoRest does not paginate.
"""

from .base import MongoRestHandlerBase
from ..document import INT64_MAX
from ..exc import InvalidArgument


class MongoLimit(MongoRestHandlerBase):
    """ Result count limit

        Handles one value:
        * 'limit': None, or int
    """

    request_section_name = 'limit'

    def __init__(self, default_limit=100, max_limit=None):
        """ Init a limit

        :param default_limit: The number of documents returned when the user has not specified any limit
        :param max_limit: The maximum number of documents that can be loaded with a single request.
            The user can never go any higher than that.
        """
        super(MongoLimit, self).__init__()

        # Config
        self.default_limit = default_limit
        self.max_limit = max_limit
        if not self.default_limit or self.default_limit <= 0:
            raise ValueError('default_limit must be a positive integer, got {!r}'.format(self.default_limit))
        if self.max_limit is not None and self.max_limit <= 0:
            raise ValueError('max_limit must be a positive integer, got {!r}'.format(self.max_limit))

        # On input
        self.limit = None

    def input(self, limit=None):
        super(MongoLimit, self).input(limit)

        # Validate
        # bool is an int, but { limit: true } is clearly a mistake
        if isinstance(limit, bool) or not isinstance(limit, (int, NoneType)):
            raise InvalidArgument('Limit must be either an integer, or null')
        if limit is not None and limit > INT64_MAX:
            raise InvalidArgument('Limit is too large: {}'.format(limit))

        # Clamp
        limit = self.default_limit if limit is None or limit <= 0 else limit

        # Max limit
        if self.max_limit:
            limit = min(self.max_limit, limit)

        # Done
        self.limit = limit
        return self

    def compile_statement(self) -> int:
        return self.limit


NoneType = type(None)
