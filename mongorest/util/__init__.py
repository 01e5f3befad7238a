from .reusable import Reusable
from .settings_dict import GatewaySettingsDict
