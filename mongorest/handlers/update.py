"""
### Update Operation
An update is a partial modification: only the fields that were provided are written,
all other fields are left intact. Documents are never replaced as a whole.

```javascript
// Sets `name`, and `profile.age`, but leaves `profile.email` alone
{ name: 'Kevin', profile: { age: 30 } }
// -> { $set: { name: 'Kevin', 'profile.age': 30 } }
```

Arrays are assigned as they are. Update operators (`$inc`, `$unset`, ...) are not supported:
every key is a field name.
"""

from .base import MongoRestHandlerBase
from ..exc import InvalidArgument

from typing import Any, Mapping


class MongoUpdate(MongoRestHandlerBase):
    """ MongoRest update: field assignments

        Nested objects are flattened into dotted paths so that sibling fields of an embedded document survive.
    """

    request_section_name = 'update'

    def __init__(self):
        super(MongoUpdate, self).__init__()

        # On input
        self.assignments = None

    def input(self, update):
        super(MongoUpdate, self).input(update)

        # Validate
        if not isinstance(update, Mapping):
            raise InvalidArgument('Update must be an object')
        if not update:
            raise InvalidArgument('Update must set at least one field')

        # Flatten
        self.assignments = {}
        for name, value in update.items():
            self._flatten_into(self.assignments, name, value)
        return self

    def _flatten_into(self, assignments: dict, path: str, value: Any):
        """ Write the assignments for `value` found at `path` """
        # Update operators would be interpreted by the store, and that's not what the user asked for
        if path.rsplit('.', 1)[-1].startswith('$'):
            raise InvalidArgument('{}: operators are not supported, found `{}`'
                                  .format(self.request_section_name, path))

        # Non-empty document: recurse. An empty one is assigned verbatim
        if isinstance(value, Mapping) and value:
            for name, nested_value in value.items():
                self._flatten_into(assignments, path + '.' + name, nested_value)
        else:
            assignments[path] = value

    def compile_statement(self) -> dict:
        """ Get the update document for the store """
        return {'$set': self.assignments}
