import os

from typing import *


class GatewaySettingsDict(dict):
    """ MongoRest settings container.

        Is mostly used for nice autocompletion and documentation purposes! :)

        The keyword settings in this object are plain kwargs names for the handlers' __init__ methods
        (`default_limit`, `max_limit`, `id_mode`), plus the settings of the store connection
        and the HTTP server.

        Use `from_env()` to load the settings from environment variables.
    """

    #: Environment variable name => (setting name, converter)
    ENVIRONMENT_VARIABLES = {
        'APP_HOST': ('app_host', str),
        'APP_PORT': ('app_port', int),
        'MONGO_URL': ('mongo_url', str),
        'MONGO_DB_NAME': ('mongo_db_name', str),
        'MONGO_TIMEOUT_MS': ('mongo_timeout_ms', int),
        'GATEWAY_DEFAULT_LIMIT': ('default_limit', int),
        'GATEWAY_MAX_LIMIT': ('max_limit', int),
        'GATEWAY_ID_MODE': ('id_mode', str),
    }

    def __init__(self,
                 # --- limit
                 default_limit: int = 100,
                 max_limit: Optional[int] = None,
                 # --- id
                 id_mode: str = 'auto',
                 # --- store
                 mongo_url: str = 'mongodb://localhost:27017',
                 mongo_db_name: str = 'MongoRest',
                 mongo_timeout_ms: int = 3000,
                 # --- http
                 app_host: str = '0.0.0.0',
                 app_port: int = 5000,
                 ):
        """ MongoRest settings

        Args:
            default_limit: (for: limit)
                The number of documents a "find" returns when the user gives no limit.
            max_limit: (for: limit)
                The hard limit on the number of documents a "find" may return. `None` means no hard limit.
            id_mode: (for: id)
                How user-supplied ids are compared to stored `_id`s: 'auto', 'objectid', or 'string'.
                See mongorest/handlers/identifier.py
            mongo_url: (for: store)
                MongoDB connection string
            mongo_db_name: (for: store)
                The database that holds the collections
            mongo_timeout_ms: (for: store)
                Server selection & connection timeout, milliseconds
            app_host: (for: http)
                The interface the HTTP server listens on
            app_port: (for: http)
                The port the HTTP server listens on
        """
        super().__init__(
            default_limit=default_limit,
            max_limit=max_limit,
            id_mode=id_mode,
            mongo_url=mongo_url,
            mongo_db_name=mongo_db_name,
            mongo_timeout_ms=mongo_timeout_ms,
            app_host=app_host,
            app_port=app_port,
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = None, **overrides) -> 'GatewaySettingsDict':
        """ Load settings from the environment

        Variables that are not set (or empty) keep their defaults.

        :param environ: The environment; `os.environ` by default
        :param overrides: Settings that take precedence over the environment
        :raises ValueError: a variable has an invalid value
        """
        if environ is None:
            environ = os.environ

        kwargs = {}
        for var_name, (setting_name, converter) in cls.ENVIRONMENT_VARIABLES.items():
            value = environ.get(var_name)
            if not value:
                continue
            try:
                kwargs[setting_name] = converter(value)
            except ValueError as e:
                raise ValueError('Invalid value for {}: {!r}'.format(var_name, value)) from e

        kwargs.update(overrides)
        return cls(**kwargs)

    def handler_settings(self, *names: str) -> dict:
        """ Pick the settings for a handler's __init__ """
        return {name: self[name] for name in names}
