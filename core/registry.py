from typing import Any, Callable, Dict, Iterator, Type, TypeVar

T = TypeVar("T")


class Registry:
    """A registry mapping names to component classes."""

    def __init__(self, name: str):
        """
        Args:
            name: The name of the registry (e.g., "tool").
        """
        self._name = name
        self._components: Dict[str, Type[Any]] = {}

    def register(self, name: str) -> Callable[[Type[T]], Type[T]]:
        """
        A decorator to register a class with a given name. The name is also
        stored on the class as ``name``.

        Raises:
            ValueError: If the name is already registered.
        """
        def decorator(cls: Type[T]) -> Type[T]:
            if name in self._components:
                raise ValueError(f"Component '{name}' already registered in '{self._name}' registry.")
            setattr(cls, "name", name)
            self._components[name] = cls
            return cls
        return decorator

    def get(self, name: str) -> Type[Any]:
        """
        Raises:
            KeyError: If the name is not registered.
        """
        if name not in self._components:
            raise KeyError(f"Component '{name}' not found in '{self._name}' registry.")
        return self._components[name]

    def create(self, name: str, *args: Any, **kwargs: Any) -> Any:
        component_class = self.get(name)
        return component_class(*args, **kwargs)

    def __contains__(self, name: str) -> bool:
        return name in self._components

    def __iter__(self) -> Iterator[str]:
        return iter(self._components)

    def keys(self):
        return self._components.keys()


tool_registry = Registry("tool")
