from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from storekit.config_io import load_config
from storekit.config_namespace import ConfigNamespace

logger = logging.getLogger(__name__)

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class StoreConfig:
    """Options for `create_extensible_store`, parsed from the `store:` section."""

    thunk: bool = True
    stream_creators: tuple[str, ...] = ()
    cleanup_ejected_state: bool = True
    log_level: str | None = None
    log_file: str | None = None
    effective: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.thunk, bool):
            raise TypeError(f"StoreConfig.thunk must be a boolean (type={type(self.thunk).__name__})")
        if not isinstance(self.cleanup_ejected_state, bool):
            raise TypeError(
                "StoreConfig.cleanup_ejected_state must be a boolean "
                f"(type={type(self.cleanup_ejected_state).__name__})"
            )
        if not isinstance(self.stream_creators, tuple):
            raise TypeError(
                "StoreConfig.stream_creators must be a tuple[str, ...] "
                f"(type={type(self.stream_creators).__name__})"
            )
        if self.log_level is not None and self.log_level not in LOG_LEVELS:
            raise ValueError(
                f"StoreConfig.log_level must be one of: {', '.join(LOG_LEVELS)} (got {self.log_level!r})"
            )

    @staticmethod
    def from_dict(cfg: Mapping[str, Any] | None) -> "StoreConfig":
        """Parse a config mapping holding an optional `store:` section.

        Raises:
            TypeError: a value has the wrong type.
            ValueError: unknown keys or invalid values.
        """

        if cfg is None:
            cfg = {}
        if not isinstance(cfg, Mapping):
            raise TypeError(f"Config must be a mapping (type={type(cfg).__name__})")

        root = ConfigNamespace(dict(cfg), path="")
        store = root.namespace("store", default=None)

        thunk = store.get_bool("thunk", default=True)
        stream_creators = store.namespace("epics", default=None).get_list_str(
            "stream_creators", default=[], allow_empty=True
        )
        cleanup = store.namespace("reducers", default=None).get_bool(
            "cleanup_ejected_state", default=True
        )

        logging_cfg = store.namespace("logging", default=None)
        level = logging_cfg.get_str("level", default=None)
        log_file = logging_cfg.get_str("file", default=None)

        store.assert_consumed()

        return StoreConfig(
            thunk=thunk,
            stream_creators=tuple(stream_creators),
            cleanup_ejected_state=cleanup,
            log_level=level.upper() if level else None,
            log_file=log_file,
            effective=root.effective_values(),
        )


def load_store_config(**kwargs: Any) -> StoreConfig:
    """Load YAML config via `config_io.load_config(**kwargs)` and parse it."""

    cfg, meta = load_config(**kwargs)
    config = StoreConfig.from_dict(cfg)
    logger.debug("Store config (%s): %s", meta["mode"], config.effective)
    return config
