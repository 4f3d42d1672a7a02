"""
Built-in notifiers for SysObs.

Importing this package imports every notifier module, which registers its
classes in the notifier registry, and re-exports the Notifier subclasses
listed in each module's ``__all__``.
"""

import importlib
import pkgutil

from sysobs.core import Notifier
from sysobs.logging_config import get_logger

logger = get_logger(__name__)

__all__: list[str] = []

for _module_info in pkgutil.iter_modules(__path__):
    _module = importlib.import_module(f"{__name__}.{_module_info.name}")

    for _name in getattr(_module, "__all__", ()):
        _cls = getattr(_module, _name)
        if _name in __all__:
            logger.warning(
                "Duplicate notifier '%s' in module '%s' - skipping",
                _name,
                _module_info.name
            )
        elif not (isinstance(_cls, type) and issubclass(_cls, Notifier)):
            logger.warning(
                "Export '%s' in module '%s' is not a Notifier subclass - skipping",
                _name,
                _module_info.name
            )
        else:
            globals()[_name] = _cls
            __all__.append(_name)
