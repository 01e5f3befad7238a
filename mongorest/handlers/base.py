class MongoRestHandlerBase:
    """ An implementation of a handler for one part of a gateway request

        Every subclass will handle a single piece of the request: the filter, the update, the limit, the id.
        The lifecycle is: init with settings -> input() -> compile_statement()
    """

    #: Name of the request section that this object is capable of handling
    request_section_name = None

    def __init__(self):
        """ Initialize the handler.

        This method does *not* receive any input data just yet, with the purpose of having an
        object that can be configured with settings once, and then reused with Reusable().

        NOTE: Any arguments that subclasses declare with default values are handler settings!!
        """
        #: The value received by input()
        self.input_value = None

        # Has the input() method been called already?
        self.input_received = False

    def __copy__(self):
        """ Some objects may be reused: i.e. their state before input() is called.

        Reusable handlers are implemented using the Reusable() wrapper which performs the
        automatic copying on attribute access
        """
        cls = self.__class__
        result = cls.__new__(cls)
        result.__dict__.update(self.__dict__)
        return result

    def input(self, value):
        """ Get a section of the request.

        The purpose of this method is to receive the input, validate it, and store as a public
        property so that external tools may export its value.

        :rtype: MongoRestHandlerBase
        :raises InvalidArgument
        """
        self.input_value = value  # no copying. Try not to modify it.

        # Set the flag
        self.input_received = True

        # Make sure that input() can only be used once
        self.input = self.__raise_input_not_reusable

        return self

    def __raise_input_not_reusable(self, *args, **kwargs):
        raise RuntimeError("You can't use the {}.input() method twice. "
                           "Wrap the class into Reusable(), or copy() it!"
                           .format(self.__class__.__name__))

    def compile_statement(self):
        """ Compile the input into whatever the store driver expects

        :return: dict, or a scalar
        """
        raise NotImplementedError()
