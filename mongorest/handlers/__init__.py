"""
Handlers convert individual parts of a gateway request into what the store driver expects:

* `filter`: [Filter Operation](#filter-operation) is normalized into flat dotted paths
* `update`: [Update Operation](#update-operation) becomes a set of field assignments
* `limit`: [Limit Operation](#limit-operation) bounds the number of documents returned
* `id`: [Identifier lookup](#identifier-lookup) selects a single document
"""

from .base import MongoRestHandlerBase
from .filter import MongoFilter, normalize_filter, ELEMENT_MATCH
from .update import MongoUpdate
from .limit import MongoLimit
from .identifier import MongoId, ID_MODES
