# src/dberrors/core/logging/
# ├─ __init__.py            # public API: setup_logging, execution id helpers
# ├─ builder.py             # make_dict_config(settings) + setup_logging(settings)
# ├─ formatters.py          # JsonFormatter, ColorFormatter
# ├─ filters.py             # ExecutionIdFilter, RedactFilter (+ contextvar helpers)
# └─ handlers.py            # console / rotating file handler factories


from .builder import setup_logging, make_dict_config
from .filters import set_execution_id, reset_execution_id, get_execution_id, ExecutionIdFilter

__all__ = [
    "setup_logging",
    "make_dict_config",
    "set_execution_id",
    "reset_execution_id",
    "get_execution_id",
    "ExecutionIdFilter",
]
