"""
Class Factory

Locates classes from dotted names and constructs instances, consulting an
optional dependency container first. Shared by pipe resolution and the
middleware bridge.
"""

import importlib
import logging
from typing import Any, Optional


logger = logging.getLogger("pipechain.factory")


def split_dotted_name(name: str):
    """
    Split ``package.module.Class`` or ``package.module:Class`` into parts.

    Returns:
        Tuple of (module path, attribute path) or None if the name has no
        module part.
    """
    if ':' in name:
        module_name, _, attr_path = name.partition(':')
    else:
        module_name, _, attr_path = name.rpartition('.')

    if not module_name or not attr_path:
        return None
    return module_name, attr_path


def _import_if_exists(module_name: str) -> Optional[Any]:
    """
    Import a module, returning None only when the module itself is missing.

    A module that exists but fails to import (including a missing dependency
    of that module) raises.
    """
    try:
        return importlib.import_module(module_name)
    except ModuleNotFoundError as e:
        parts = module_name.split('.')
        searched = {'.'.join(parts[:i]) for i in range(1, len(parts) + 1)}
        if e.name in searched:
            return None
        raise


class ClassFactory:
    """
    Resolves type identifiers into classes and instances.

    A type identifier is either a class object or a string. Strings are looked
    up in the container first (when one is set) and then imported as a dotted
    path.
    """

    def __init__(self, container: Optional[Any] = None):
        """
        Initialize the factory.

        Args:
            container: Optional object exposing ``has(name)`` and ``get(name)``
        """
        self.container = container

    def set_container(self, container: Optional[Any]) -> None:
        """Set (or clear with None) the dependency container."""
        self.container = container

    def in_container(self, name: Any) -> bool:
        """Whether the container can provide an entry for ``name``."""
        if self.container is None:
            return False
        try:
            return bool(self.container.has(name))
        except TypeError:
            # unhashable keys
            return False

    def locate(self, name: Any) -> Optional[type]:
        """
        Find the class a type identifier refers to.

        Args:
            name: Class object or dotted name

        Returns:
            The class, or None if it cannot be found. Failures other than a
            missing module or attribute propagate, including import errors
            raised by the module's own imports.
        """
        if isinstance(name, type):
            return name
        if not isinstance(name, str):
            return None

        parts = split_dotted_name(name.strip().lstrip('.'))
        if parts is None:
            return None
        module_name, attr_path = parts

        target = _import_if_exists(module_name)
        if target is None:
            # "pkg.Outer.Inner": retry with the last module segment as an attribute
            nested = split_dotted_name(module_name) if ':' not in name else None
            if nested is None:
                return None
            target = _import_if_exists(nested[0])
            if target is None:
                return None
            attr_path = f"{nested[1]}.{attr_path}"

        for attr in attr_path.split('.'):
            target = getattr(target, attr, None)
            if target is None:
                return None

        return target if isinstance(target, type) else None

    def exists(self, name: Any) -> bool:
        """Whether ``name`` is a type identifier that can be constructed."""
        if isinstance(name, type):
            return True
        if not isinstance(name, str):
            return False
        return self.in_container(name) or self.locate(name) is not None

    def make(self, name: Any) -> Any:
        """
        Build an instance for a type identifier.

        The container is consulted first; without an entry the located class
        is constructed without arguments.

        Raises:
            LookupError: If the identifier cannot be located
        """
        if self.in_container(name):
            logger.debug(f"Resolving {name!r} from container")
            return self.container.get(name)

        cls = self.locate(name)
        if cls is None:
            raise LookupError(f"Cannot locate class: {name!r}")

        logger.debug(f"Constructing {cls.__module__}.{cls.__qualname__}")
        return cls()


# Global instance
_default_factory = ClassFactory()


def get_default_factory() -> ClassFactory:
    """Get the process-wide class factory."""
    return _default_factory
