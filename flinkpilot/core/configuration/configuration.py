import copy
from pathlib import Path
from typing import Any

import yaml

from flinkpilot.core.configuration.config_option import ConfigOption


class Configuration:
    """Ordered key/value configuration, read through typed ConfigOptions.

    Raw values are stored as given (strings when loaded from flink-conf.yaml,
    native python values when set in code) and coerced on every read.
    """

    def __init__(self, values: dict[str, Any] | None = None):
        self._data: dict[str, Any] = dict(values or {})

    @classmethod
    def from_dict(cls, values: dict[str, Any]) -> 'Configuration':
        return cls(values)

    @classmethod
    def from_yaml_file(cls, path: Path) -> 'Configuration':
        if not path.exists():
            raise FileNotFoundError(f'Configuration file {path} does not exist')

        content = yaml.safe_load(path.read_text()) or {}

        if not isinstance(content, dict):
            raise ValueError(f'Configuration file {path} must contain a flat mapping of options')

        return cls(content)

    def _find_raw(self, option: ConfigOption) -> Any:
        for key in (option.key, *option.fallback_keys):
            if self._data.get(key) is not None:
                return self._data[key]
        return None

    def get(self, option: ConfigOption, default: Any = None) -> Any:
        raw = self._find_raw(option)

        if raw is None:
            return default if default is not None else copy.deepcopy(option.default)

        return option.convert(raw)

    def get_raw(self, key: str) -> Any:
        return self._data.get(key)

    def set(self, option: ConfigOption | str, value: Any) -> None:
        key = option.key if isinstance(option, ConfigOption) else option
        self._data[key] = value

    def contains(self, option: ConfigOption) -> bool:
        return self._find_raw(option) is not None

    def remove(self, option: ConfigOption | str) -> bool:
        key = option.key if isinstance(option, ConfigOption) else option
        return self._data.pop(key, None) is not None

    def copy(self) -> 'Configuration':
        return Configuration(copy.deepcopy(self._data))

    def get_prefixed(self, prefix: str) -> dict[str, str]:
        return {
            key[len(prefix):]: _serialize(value)
            for key, value in self._data.items()
            if key.startswith(prefix) and len(key) > len(prefix)
        }

    def to_string_map(self) -> dict[str, str]:
        return {key: _serialize(value) for key, value in self._data.items() if value is not None}

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Configuration) and self._data == other._data

    def __repr__(self) -> str:
        return f'Configuration({self._data!r})'


def _serialize(value: Any) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, dict):
        return ','.join(f'{k}:{_serialize(v)}' for k, v in value.items())
    if isinstance(value, (list, tuple)):
        return ';'.join(_serialize(x) for x in value)
    return str(value)
