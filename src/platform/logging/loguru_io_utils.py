from inspect import FullArgSpec, getfile, getfullargspec, getsourcelines
from os.path import basename
import re
from time import time
from typing import Any, Callable

from src.platform.logging.loguru_io_config import (
    SENSITIVE_KEYWORDS,
    call_depth_var,
    chain_start_time_var,
)


_MAX_CONTENT_LENGTH = 1000

# matches `token='abc'`, "password": "abc" and similar key/value renderings
_SENSITIVE_PATTERN = re.compile(
    r"""(['"]?)(%s)\1(\s*[=:]\s*)(['"])[^'"]*\4""" % '|'.join(sorted(SENSITIVE_KEYWORDS)),
    re.IGNORECASE,
)


def get_chain_start_time() -> float:
    if not (start_time := chain_start_time_var.get()):
        start_time = time()
        chain_start_time_var.set(start_time)
    return start_time


def build_call_target_func_path(func: Callable[..., Any]) -> str:
    try:
        lineno = getsourcelines(func)[1]
    except (OSError, TypeError):
        lineno = 0
    return f'{basename(getfile(getattr(func, "__func__", func)))}::{func.__qualname__}:{lineno}'


def reset_call_depth() -> None:
    layer = max(call_depth_var.get() - 1, 0)
    call_depth_var.set(layer)
    if not layer:
        chain_start_time_var.set(0)


def normalize_args_kwargs(
    func: Callable[..., Any], *args: Any, **kwargs: Any
) -> tuple[tuple[Any, ...], dict[Any, Any]]:
    if hasattr(func, '__wrapped__'):
        func = func.__wrapped__  # type: ignore
    full_arg_spec: FullArgSpec = getfullargspec(func)
    spec_args: list[str] = full_arg_spec.args

    if not full_arg_spec.varkw:
        kw_list: list[str] = spec_args + full_arg_spec.kwonlyargs
        kwargs = {k: v for k, v in kwargs.items() if k in kw_list}

    if not full_arg_spec.varargs:
        spec_default: list[Any] = list(full_arg_spec.defaults) if full_arg_spec.defaults else []
        args_dict = dict(
            zip(
                spec_args,
                [None] * (len(spec_args) - len(spec_default)) + spec_default,
                strict=False,
            )
        )
        if args_dict := {k: v for k, v in args_dict.items() if k not in kwargs}:
            args_max_len: int = len(args_dict)
            args_min_len: int = len([value for value in args_dict.values() if value is None])
            if len(args) not in range(args_min_len, args_max_len + 1):
                args = args[:args_max_len]
        else:
            args = ()

    return args, kwargs


def mask_sensitive(data: Any) -> Any:
    data_str = str(data)
    masked = _SENSITIVE_PATTERN.sub(r"\1\2\1\3\4********\4", data_str)
    return data if masked == data_str else masked


def should_mask_keyword(keyword: Any, value: Any) -> Any:
    return '********' if str(keyword).lower() in SENSITIVE_KEYWORDS else value


def truncate_content(data: Any) -> Any:
    data_str = str(data)
    if len(data_str) <= _MAX_CONTENT_LENGTH:
        return data
    return f'{data_str[:_MAX_CONTENT_LENGTH]}...(+{len(data_str) - _MAX_CONTENT_LENGTH} chars)'
