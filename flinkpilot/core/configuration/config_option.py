from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


def to_str(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


def to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f'Cannot convert boolean {value} to int')
    return int(value)


def to_float(value: Any) -> float:
    return float(value)


def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value

    normalized = str(value).strip().lower()
    if normalized == 'true':
        return True
    if normalized == 'false':
        return False

    raise ValueError(f'Could not parse value "{value}" as boolean')


def to_list(value: Any) -> list[str]:
    if isinstance(value, (list, tuple)):
        return [to_str(x) for x in value]

    return [x.strip() for x in str(value).split(';') if x.strip()]


def to_map(value: Any) -> dict[str, str]:
    if isinstance(value, dict):
        return {to_str(k): to_str(v) for k, v in value.items()}

    result = {}
    for entry in str(value).split(','):
        if not entry.strip():
            continue
        if ':' not in entry:
            raise ValueError(f'Map entry "{entry}" should be in the form key:value')
        k, v = entry.split(':', 1)
        result[k.strip()] = v.strip()

    return result


def to_list_of_maps(value: Any) -> list[dict[str, str]]:
    if isinstance(value, (list, tuple)):
        return [to_map(x) for x in value]

    return [to_map(x) for x in to_list(value)]


@dataclass(frozen=True)
class ConfigOption:
    key: str
    default: Any = None
    converter: Callable[[Any], Any] = to_str
    description: str = ''
    fallback_keys: tuple[str, ...] = field(default_factory=tuple)

    def convert(self, value: Any) -> Any:
        try:
            return self.converter(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Could not parse value '{value}' for key '{self.key}': {e}") from e
