"""Common utilities shared across crawling, extraction and indexing."""

from lexlist.common.utils import (
    is_cjk_char,
    first_cjk_char,
    unique_preserve_order,
    _load_env_file,
    _clean_value,
    ensure_dir,
    dump_json,
    write_text_atomic,
)
from lexlist.common.logging import (
    log_debug,
    log_error,
    set_log_context,
    clear_log_context,
    setup_prefixed_stdout,
)
from lexlist.common.config import CONFIG_FILENAME, ConfigError, CrawlConfig, load_config
from lexlist.common.fetch import (
    FetchError,
    FetchPolicy,
    PlainTransport,
    RetriesExhausted,
    SessionTransport,
    Transport,
    default_transports,
    fetch_with_policy,
)

__all__ = [
    # utils
    "is_cjk_char",
    "first_cjk_char",
    "unique_preserve_order",
    "_load_env_file",
    "_clean_value",
    "ensure_dir",
    "dump_json",
    "write_text_atomic",
    # logging
    "log_debug",
    "log_error",
    "set_log_context",
    "clear_log_context",
    "setup_prefixed_stdout",
    # config
    "CONFIG_FILENAME",
    "ConfigError",
    "CrawlConfig",
    "load_config",
    # fetch
    "FetchError",
    "FetchPolicy",
    "PlainTransport",
    "RetriesExhausted",
    "SessionTransport",
    "Transport",
    "default_transports",
    "fetch_with_policy",
]
