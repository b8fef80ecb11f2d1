from antiptrn_core.config import CoreConfig, load_core_config
from antiptrn_core.counter import CounterService, parse_count
from antiptrn_core.errors import (
    CounterError,
    InvalidStoredValue,
    StoreNotConfigured,
    StoreUnavailable,
)

__version__ = "0.1.0"

__all__ = [
    "CoreConfig",
    "CounterError",
    "CounterService",
    "InvalidStoredValue",
    "StoreNotConfigured",
    "StoreUnavailable",
    "__version__",
    "load_core_config",
    "parse_count",
]
