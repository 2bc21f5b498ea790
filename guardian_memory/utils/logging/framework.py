"""Logging helpers used throughout the package.

- SmartLogger: per-module handle that tags records with their component
- log_execution: decorator logging start, completion and failure of a call
- log_operation: context manager scoping a correlation ID and shared context
"""

import functools
import inspect
import threading
import time
import uuid
from contextlib import contextmanager
from typing import Any, Callable, Dict, Optional

from .logger import get_correlation_id, set_correlation_id, clear_correlation_id
from .multi_file_logger import get_multi_file_logger

PACKAGE_NAME = 'guardian_memory'

# Module path prefix (below the package) -> component, first match wins
MODULE_COMPONENTS = (
    ('memory.storage', 'storage'),
    ('memory', 'memory'),
    ('utils.config', 'config'),
    ('cli', 'cli'),
)

_scope = threading.local()


def component_for_module(module_name: str) -> str:
    """Component that records from a module are filed under."""
    package, _, module_path = module_name.partition('.')
    if package != PACKAGE_NAME:
        return 'system'

    for prefix, component in MODULE_COMPONENTS:
        if module_path == prefix or module_path.startswith(prefix + '.'):
            return component
    return 'system'


def _caller_component(depth: int) -> str:
    frame = inspect.currentframe()
    try:
        for _ in range(depth + 1):
            frame = frame.f_back
        return component_for_module(frame.f_globals.get('__name__', ''))
    finally:
        del frame


def _scope_context() -> Dict[str, Any]:
    return getattr(_scope, 'context', {})


class SmartLogger:
    """Logger bound to one component.

    Records carry `component` plus whatever context the enclosing
    `log_operation` scopes added. Without an explicit component the calling
    module decides.
    """

    def __init__(self, component: Optional[str] = None):
        self.component = component or _caller_component(depth=1)

    def _log(self, level: str, message: str, **context):
        context.setdefault('component', self.component)
        for key, value in _scope_context().items():
            context.setdefault(key, value)
        # Looked up per call so a reset shared logger takes effect
        getattr(get_multi_file_logger(), level)(message, **context)

    def debug(self, message: str, **context):
        self._log('debug', message, **context)

    def info(self, message: str, **context):
        self._log('info', message, **context)

    def warning(self, message: str, **context):
        self._log('warning', message, **context)

    def error(self, message: str, **context):
        self._log('error', message, **context)

    def isEnabledFor(self, level: int) -> bool:
        return get_multi_file_logger().isEnabledFor(level)


def log_execution(component: Optional[str] = None, operation: Optional[str] = None,
                  include_args: bool = True, include_result: bool = True):
    """Decorator logging each call at debug level and failures at error level.

    Example:
        @log_execution("storage", "append_line", include_result=False)
        def append(self, line: str):
            ...
    """
    def decorator(func: Callable) -> Callable:
        op_name = operation or func.__name__
        func_logger = SmartLogger(component or component_for_module(func.__module__))
        params = list(inspect.signature(func).parameters)
        is_method = bool(params) and params[0] == 'self'

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            call_id = str(uuid.uuid4())[:8]
            details: Dict[str, Any] = {}
            if include_args:
                details['args'] = args[1:] if is_method else args
                if kwargs:
                    details['kwargs'] = kwargs

            func_logger.debug(f"function_start_{op_name}", operation=op_name,
                              execution_id=call_id, **details)
            started = time.time()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                func_logger.error(f"function_error_{op_name}",
                                  operation=op_name,
                                  execution_id=call_id,
                                  duration_seconds=round(time.time() - started, 3),
                                  error=str(e),
                                  error_type=type(e).__name__)
                raise

            outcome: Dict[str, Any] = {}
            if include_result:
                text = str(result)
                outcome['result'] = text if len(text) <= 500 else text[:500] + '...'
            func_logger.debug(f"function_complete_{op_name}", operation=op_name,
                              execution_id=call_id,
                              duration_seconds=round(time.time() - started, 3),
                              **outcome)
            return result

        return wrapper
    return decorator


@contextmanager
def log_operation(component: Optional[str] = None, operation: str = "operation",
                  correlation_id: Optional[str] = None, **context):
    """Scope an operation: one correlation ID and shared context for every record inside.

    Nested scopes keep the outer correlation ID unless given their own.

    Example:
        with log_operation("memory", "corpus_load", chars=len(text)):
            manager = build(text)

    Yields:
        The correlation ID in effect
    """
    op_logger = SmartLogger(component or _caller_component(depth=2))

    previous_id = get_correlation_id()
    previous_context = _scope_context()
    correlation_id = set_correlation_id(correlation_id or previous_id)
    _scope.context = {**previous_context, 'operation': operation, **context}

    op_logger.info(f"operation_start_{operation}")
    started = time.time()
    try:
        yield correlation_id
    except Exception as e:
        op_logger.error(f"operation_error_{operation}",
                        duration_seconds=round(time.time() - started, 3),
                        success=False,
                        error=str(e),
                        error_type=type(e).__name__)
        raise
    else:
        op_logger.info(f"operation_complete_{operation}",
                       duration_seconds=round(time.time() - started, 3),
                       success=True)
    finally:
        _scope.context = previous_context
        if previous_id:
            set_correlation_id(previous_id)
        else:
            clear_correlation_id()


def get_smart_logger(component: Optional[str] = None) -> SmartLogger:
    """Logger for a component, or for the calling module's component."""
    return SmartLogger(component or _caller_component(depth=1))
