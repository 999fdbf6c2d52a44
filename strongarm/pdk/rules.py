"""DesignRules - Process constants with attribute access."""

from typing import Any, Dict

import yaml


class DesignRules:
    """
    A tree of process constants.

    Values are read as attributes; nested groups are DesignRules themselves.
    Reading an undefined constant raises AttributeError::

        rules = DesignRules.from_dict({'M1': {'MIN_W': 140, 'MIN_S': 140}})
        rules.M1.MIN_W  # 140
    """

    def __init__(self, **values):
        object.__setattr__(self, '_values', {})
        for name, value in values.items():
            setattr(self, name, value)

    def __getattr__(self, name: str) -> Any:
        values = self.__dict__.get('_values', {})
        if name not in values:
            raise AttributeError(f"Design rule '{name}' is not defined")
        return values[name]

    def __setattr__(self, name: str, value: Any) -> None:
        self._values[name] = DesignRules.from_dict(value) if isinstance(value, dict) else value

    def __contains__(self, name: str) -> bool:
        return name in self._values

    def __repr__(self):
        return f'DesignRules({", ".join(self._values)})'

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def to_dict(self) -> Dict[str, Any]:
        return {name: value.to_dict() if isinstance(value, DesignRules) else value
                for name, value in self._values.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DesignRules':
        return cls(**data)

    @classmethod
    def from_yaml(cls, text: str) -> 'DesignRules':
        data = yaml.safe_load(text)
        if not isinstance(data, dict):
            raise ValueError('A design rules document must be a mapping')
        return cls.from_dict(data)
