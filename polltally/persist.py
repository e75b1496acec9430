'''Serialization of rules, polls and results to JSON-ready dictionaries.

Tallied results are archived by the surrounding application; this module
turns them (and the poll definitions and majority rules they stem from) into
plain dictionaries and back, so that an archived result can be reloaded and
compared with a recomputation.

An object is serialized as a dictionary with its scoped class name under the
``class`` key and its constructor arguments under the remaining keys. Tuples,
frozensets, dictionaries with non-string keys and enumeration members are
serialized as dictionaries with a ``type`` key.

Archived data is not trusted: only the classes registered here (by
:func:`simple_serialization` or :func:`register_class`) are ever
instantiated when reloading. Anything else is rejected with a ValueError.
'''

import enum
import json
import inspect
import importlib
from typing import Any, Callable, Dict, List


SERIALIZABLE: Dict[str, type] = {}

# modules whose import registers all serializable classes
SERIALIZABLE_MODULES = (
    'polltally.majority',
    'polltally.poll',
    'polltally.result',
    'polltally.evaluate',
)

SEQUENCE_TYPES: Dict[str, Callable] = {
    'tuple': tuple,
    'frozenset': frozenset,
}

ATOMIC_TYPES = (str, int, float, bool, type(None))


def register_class(class_: type) -> type:
    '''A decorator to allow reloading instances of the class from archives.'''
    SERIALIZABLE[scoped_name(class_)] = class_
    return class_


def simple_serialization(class_: type) -> type:
    '''A decorator to provide a simple to_dict() serialization method.

    The resulting method will serialize all object attributes corresponding
    to the class's constructor parameter names. Therefore, this decorator
    is only useful when the class stores all its constructor arguments
    unchanged (or in any other form acceptable to its constructor).
    Dataclasses qualify naturally. The class is also registered for
    reloading by :func:`from_dict`.

    :param class_: The class to add the method to.
    '''
    param_names = constructor_params(class_)

    def to_dict(self) -> Dict[str, Any]:
        out_dict = {'class': scoped_name(type(self))}
        for attr in param_names:
            out_dict[attr] = serialize_value(getattr(self, attr))
        return out_dict

    class_.to_dict = to_dict
    return register_class(class_)


def constructor_params(class_: type) -> List[str]:
    params = inspect.signature(class_.__init__).parameters
    return [
        name for name, param in params.items()
        if name != 'self' and param.kind not in (
            inspect.Parameter.VAR_POSITIONAL,
            inspect.Parameter.VAR_KEYWORD,
        )
    ]


def serialize_value(value: Any) -> Any:
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    elif isinstance(value, enum.Enum):
        return {
            'type': scoped_name(type(value)),
            'value': serialize_value(value.value),
        }
    elif isinstance(value, ATOMIC_TYPES):
        return value
    elif type(value).__name__ in SEQUENCE_TYPES:
        return {
            'type': type(value).__name__,
            'value': [serialize_value(item) for item in value],
        }
    elif isinstance(value, dict):
        if all(isinstance(key, str) for key in value.keys()):
            return {key: serialize_value(val) for key, val in value.items()}
        else:
            return {
                'type': 'dict',
                'keys': [serialize_value(key) for key in value.keys()],
                'values': [serialize_value(val) for val in value.values()],
            }
    elif isinstance(value, list):
        return [serialize_value(item) for item in value]
    else:
        raise ValueError(f'cannot serialize {value!r} to dict format')


def deserialize_value(value: Any) -> Any:
    if isinstance(value, dict):
        if 'class' in value:
            return deserialize_class(value)
        elif 'type' in value:
            return deserialize_typed(value)
        else:
            return {key: deserialize_value(val) for key, val in value.items()}
    elif isinstance(value, list):
        return [deserialize_value(item) for item in value]
    elif isinstance(value, ATOMIC_TYPES):
        return value
    else:
        raise ValueError(f'cannot deserialize {value!r}, type unknown')


def deserialize_typed(typedef: Dict[str, Any]) -> Any:
    type_name = typedef['type']
    if type_name == 'dict':
        keys, values = typedef.get('keys'), typedef.get('values')
        if not (isinstance(keys, list) and isinstance(values, list)):
            raise ValueError(f'invalid dict contents: {typedef!r}')
        return dict(zip(
            [deserialize_value(key) for key in keys],
            [deserialize_value(val) for val in values],
        ))
    if 'value' not in typedef:
        raise ValueError(f'invalid typed value contents: {typedef!r}')
    value = typedef['value']
    if type_name in SEQUENCE_TYPES:
        if not isinstance(value, list):
            raise ValueError(f'invalid {type_name} contents: {value!r}')
        return SEQUENCE_TYPES[type_name](
            deserialize_value(item) for item in value
        )
    enum_class = get_class(type_name)
    if not issubclass(enum_class, enum.Enum):
        raise ValueError(f'{type_name} is not an enumeration')
    return enum_class(deserialize_value(value))


def deserialize_class(clsdef: Dict[str, Any]) -> Any:
    cls = get_class(clsdef['class'])
    params = {
        key: deserialize_value(val)
        for key, val in clsdef.items() if key != 'class'
    }
    unknown = set(params) - set(constructor_params(cls))
    if unknown:
        raise ValueError(
            f'unknown parameters {sorted(unknown)!r} for {clsdef["class"]}'
        )
    return cls(**params)


def get_class(name: Any) -> type:
    '''Return the registered serializable class of the given scoped name.

    :raises ValueError: If no such class is registered.
    '''
    if not isinstance(name, str):
        raise ValueError(f'invalid polltally class name: {name!r}')
    if name not in SERIALIZABLE:
        for module in SERIALIZABLE_MODULES:
            importlib.import_module(module)
    try:
        return SERIALIZABLE[name]
    except KeyError:
        raise ValueError(f'unknown polltally class: {name!r}')


def from_dict(value: Dict[str, Any]) -> Any:
    """Parse a polltally object from a JSON-like dictionary.

    :param value: A dictionary created by :func:`to_dict`.
    :raises ValueError: If the dictionary does not describe a registered
        polltally class.
    """
    if not isinstance(value, dict):
        raise ValueError('invalid polltally object def: dict expected,'
                         f' got {value!r}')
    elif 'class' not in value:
        raise ValueError('invalid polltally object def: must have a class key')
    else:
        return deserialize_class(value)


def to_dict(obj: Any) -> Dict[str, Any]:
    """Serialize a polltally object to a JSON-ready dictionary.

    :param obj: A result, poll, majority rule or similar. It should provide
        a `to_dict()` method (courtesy of the simple_serialization decorator).
    """
    return serialize_value(obj)


def to_json(obj: Any, **kwargs) -> str:
    """Serialize a polltally object to a JSON string.

    Keyword arguments are passed to :func:`json.dumps`.
    """
    return json.dumps(to_dict(obj), **kwargs)


def from_json(text: str) -> Any:
    """Parse a polltally object from a JSON string made by :func:`to_json`."""
    return from_dict(json.loads(text))


def scoped_name(class_: type) -> str:
    return '.'.join((class_.__module__, class_.__name__))
