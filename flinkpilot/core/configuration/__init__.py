from flinkpilot.core.configuration.config_option import ConfigOption
from flinkpilot.core.configuration.configuration import Configuration

__all__ = ['ConfigOption', 'Configuration']
