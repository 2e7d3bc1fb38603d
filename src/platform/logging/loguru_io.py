"""
Logger.io: call logging for use cases, the ledger and repositories

- DEBUG: masked args and return value of every decorated call
- Expected failures (CustomBaseError): one line without traceback, WARNING
  for caller errors (4xx) and ERROR otherwise
- Anything else: ERROR with traceback
- Each exception is logged once per call chain, by the innermost decorated call
"""

from collections.abc import Awaitable
from functools import wraps
from inspect import iscoroutinefunction
import types
from typing import TYPE_CHECKING, Any, Callable, ParamSpec, TypeVar, cast, overload


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io_config import (
    ExtraField,
    call_depth_var,
    custom_logger,
)
from src.platform.logging.loguru_io_utils import (
    build_call_target_func_path,
    get_chain_start_time,
    is_sensitive_key,
    mask_sensitive,
    normalize_args_kwargs,
    reset_call_depth,
    truncate_content,
)


_F = TypeVar('_F', bound=Callable[..., Any])
_LOGGED_FLAG = '_logged_by_io'


class LoguruIO:
    def __init__(
        self, custom_logger: 'LoguruLogger', *, reraise: bool = True, truncate_content: bool = False
    ) -> None:
        self._custom_logger = custom_logger
        self.reraise = reraise
        self.truncate_content = truncate_content
        self.extra: dict[str, Any] = {}
        self.depth = 2  # wrapper + helper frames

    def _enter(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        call_depth_var.set(call_depth_var.get() + 1)
        self.extra[ExtraField.CHAIN_START_TIME] = get_chain_start_time()
        if settings.DEBUG:
            self._custom_logger.bind(**self.extra).opt(depth=self.depth).debug(
                f'args: {self.scrub(args)}, kwargs: {self.scrub(kwargs)}'
            )

    def _leave(self, return_value: Any) -> Any:
        if settings.DEBUG:
            self._custom_logger.bind(**self.extra).opt(depth=self.depth).debug(
                f'return: {self.scrub(return_value)}'
            )
        return return_value

    def _fail(self, exc: Exception) -> None:
        if getattr(exc, _LOGGED_FLAG, False):
            return
        setattr(exc, _LOGGED_FLAG, True)

        bound = self._custom_logger.bind(**self.extra).opt(depth=self.depth)
        if not isinstance(exc, CustomBaseError):
            bound.exception(f'{type(exc).__name__}: {exc}')
            return

        code = f'[{exc.code.value}]' if exc.code is not None else ''
        line = f'{type(exc).__name__}{code}: {exc.message}'
        if exc.status_code < 500:
            bound.warning(line)
        else:
            bound.error(line)

    def scrub(self, data: Any) -> Any:
        if isinstance(data, dict):
            scrubbed: Any = {
                key: '********' if is_sensitive_key(key) else self.scrub(value)
                for key, value in data.items()
            }
        elif isinstance(data, list | tuple):
            scrubbed = type(data)(self.scrub(item) for item in data)
        else:
            scrubbed = mask_sensitive(data)
        return truncate_content(scrubbed) if self.truncate_content else scrubbed

    def _hide_from_traceback(self, func: Callable[..., Any]) -> Callable[..., Any]:
        func.__code__ = func.__code__.replace(  # type: ignore[attr-defined]
            co_filename=cast(types.FunctionType, self._custom_logger.catch).__code__.co_filename
        )
        return func

    def __call__(self, func: _F) -> _F:
        self.extra[ExtraField.CALL_TARGET] = build_call_target_func_path(func)

        if iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                try:
                    self._enter(args, kwargs)
                    args, kwargs = normalize_args_kwargs(func, *args, **kwargs)
                    return self._leave(await cast(Awaitable[Any], func(*args, **kwargs)))
                except Exception as e:
                    self._fail(e)
                    if self.reraise:
                        raise
                    return None
                finally:
                    reset_call_depth()

            return cast(_F, self._hide_from_traceback(async_wrapper))

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                self._enter(args, kwargs)
                args, kwargs = normalize_args_kwargs(func, *args, **kwargs)
                return self._leave(func(*args, **kwargs))
            except Exception as e:
                self._fail(e)
                if self.reraise:
                    raise
                return None
            finally:
                reset_call_depth()

        return cast(_F, self._hide_from_traceback(sync_wrapper))


_P = ParamSpec('_P')
_T = TypeVar('_T')


class Logger:
    base = custom_logger

    @overload
    @staticmethod
    def io(func: Callable[_P, _T]) -> Callable[_P, _T]: ...

    @overload
    @staticmethod
    def io(func: None = ..., *, reraise: bool = ..., truncate_content: bool = ...) -> LoguruIO: ...

    @staticmethod
    def io(
        func: Callable[_P, _T] | None = None, *, reraise: bool = True, truncate_content: bool = True
    ) -> Callable[_P, _T] | LoguruIO:
        decorator = LoguruIO(
            custom_logger=custom_logger, reraise=reraise, truncate_content=truncate_content
        )
        return decorator(func) if func else decorator
