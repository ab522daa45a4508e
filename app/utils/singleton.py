from threading import Lock
from typing import Any


class SingletonMeta(type):
    """Metaclass that gives each class a single shared instance.

    The first call constructs the instance; later calls return it unchanged
    and ignore their arguments.
    """

    _instances: dict[type, Any] = {}
    _lock: Lock = Lock()

    def __call__(cls, *args: Any, **kwargs: Any) -> Any:
        with cls._lock:
            if cls not in cls._instances:
                cls._instances[cls] = super().__call__(*args, **kwargs)
        return cls._instances[cls]
