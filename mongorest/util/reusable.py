from copy import copy


class Reusable:
    """ Make a reusable handler

        When a handler object is initialized with settings, it's a pity to waste it!
        This class wrapper makes a copy every time an attribute is accessed on its wrapped object.

        Example:

            limit = Reusable(MongoLimit(default_limit=10, max_limit=100))
            limit.input(50).compile_statement()  # works on a copy
            limit.input(500).compile_statement()  # works on another copy
    """
    __slots__ = ('__obj',)

    def __init__(self, obj):
        # Just store the object inside
        self.__obj = obj

    # Whenever any attribute (property or method) is accessed, the whole thing is copied.
    # This is copy-on-access

    def __getattr__(self, attr):
        return getattr(copy(self.__obj), attr)

    def __repr__(self):
        return repr(self.__obj)
