"""
MongoRest is an HTTP gateway to the collections of a [MongoDB](https://www.mongodb.com/) database.

There's no model, and no schema: the API user names a collection in the URL,
and sends and receives raw JSON documents:

```javascript
$.post('/api/collections/items/find?limit=10', JSON.stringify({
    // nested objects and dotted paths are interchangeable
    address: { city: 'Paris' },  // address.city = "Paris"
    age: { $gte: 18 },  // age >= 18
    tags: ['x', 'y'],  // `tags` has either "x" or "y"
}))
```

Types that JSON can't express (ObjectId, dates, decimals) travel as Extended JSON: `{ $oid: '...' }`.
"""

# Exceptions that are used here and there
from .exc import *

# Values of documents, and the Codec that converts them to and from JSON
from .document import ValueKind, kind_of
from . import codec

# The handlers: that's where your JSON objects are converted to actual MongoDB queries!
from . import handlers
from .handlers import normalize_filter

# CollectionGateway is the surface for all operations on collections
from .gateway import CollectionGateway, NOT_FOUND, InsertOutcome, UpdateOutcome, DeleteOutcome

# The connection to the database
from .store import StoreSession

# Helpers
from .util import Reusable, GatewaySettingsDict

# CRUD views for an HTTP API
from .crud import CollectionCrudViewMixin, CRUD_METHOD
