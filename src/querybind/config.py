# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Binder configuration.

Options are layered with genro-toolbox ``SmartOptions``, later sources
overriding earlier ones:

1. Built-in ``DEFAULTS``
2. The ``querybind`` section of an optional YAML config file
3. Environment variables ``QUERYBIND_*`` (e.g. ``QUERYBIND_HEADER``)
4. Explicit constructor parameters

Options:
    header: Response header receiving the push URL (default "HX-Push-Url").
        htmx also understands "HX-Replace-Url".
    logger: Name of the logger used by the binder (default "querybind").
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from genro_toolbox import SmartOptions  # type: ignore[import-untyped]

__all__ = ["BinderConfig", "DEFAULTS", "PUSH_URL_HEADER"]

PUSH_URL_HEADER = "HX-Push-Url"

DEFAULTS = {"header": PUSH_URL_HEADER, "logger": "querybind"}


def _binder_opts_spec(
    header: str,
    logger: str,
) -> None:
    """Reference function for SmartOptions type extraction (no defaults)."""


class BinderConfig:
    """Resolved binder options."""

    __slots__ = ("_opts",)

    def __init__(
        self,
        header: str | None = None,
        logger: str | None = None,
        config_file: str | Path | None = None,
    ) -> None:
        self._opts = self._build_config(header=header, logger=logger, config_file=config_file)

    def _build_config(
        self,
        header: str | None,
        logger: str | None,
        config_file: str | Path | None,
    ) -> SmartOptions:
        env_opts = SmartOptions(_binder_opts_spec, env="QUERYBIND", argv=[])

        caller_opts = SmartOptions(dict(header=header, logger=logger), ignore_none=True)

        if config_file is not None and Path(config_file).exists():
            file_opts = SmartOptions(str(config_file))["querybind"] or SmartOptions({})
        else:
            file_opts = SmartOptions({})

        return SmartOptions(DEFAULTS) + file_opts + env_opts + caller_opts

    @property
    def header(self) -> str:
        """Name of the push URL response header."""
        return str(self._opts["header"] or PUSH_URL_HEADER)

    @property
    def logger_name(self) -> str:
        return str(self._opts["logger"] or "querybind")

    def __getitem__(self, name: str) -> Any:
        """Proxy bracket access to underlying opts."""
        return self._opts[name]

    def __repr__(self) -> str:
        return f"BinderConfig(header={self.header!r}, logger={self.logger_name!r})"
