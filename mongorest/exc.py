class BaseMongoRestException(Exception):
    """ Base for every error raised by MongoRest

        `http_status` is the response status the HTTP layer maps the error to
    """
    http_status = 500


class InvalidArgument(BaseMongoRestException):
    """ Invalid input provided by the User: rejected before the store is touched """
    http_status = 400

    def __init__(self, err: str):
        self.message = err
        super(InvalidArgument, self).__init__(err)


class MalformedInput(BaseMongoRestException):
    """ The request body can't be decoded into a document """
    http_status = 400

    def __init__(self, err: str):
        self.message = 'Malformed input: {err}'.format(err=err)
        super(MalformedInput, self).__init__(self.message)


class StorageFailure(BaseMongoRestException):
    """ The store has failed to execute an operation

        This class is used to wrap driver errors: the original exception is available as `__cause__`
    """
    http_status = 500

    def __init__(self, message: str, error: str, details=None):
        #: Human-readable description of the failed operation, e.g. "Insertion failed."
        self.message = message
        #: The underlying driver message
        self.error = error
        #: Partial results reported by the store, if any (e.g. bulk write details)
        self.details = details

        super(StorageFailure, self).__init__('{}: {}'.format(message, error))
