from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from types import SimpleNamespace
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from .sourcing import ID_STRATEGIES

_BOOLEAN_TRUE = {"1", "true", "yes", "on"}
_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


@dataclass(frozen=True)
class Config:
    """Runtime configuration assembled from environment variables and caller options."""

    base_prices_path: Optional[Path]
    valid_combos_path: Optional[Path]
    sub_materials_path: Optional[Path]
    id_strategy: str = "uuid"
    lp_factor: float = 1.0
    check_consistency: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, cli_args: object | None = None, dotenv_path: Path | None = None) -> "Config":
        """Load ``.env`` (from ``dotenv_path`` or the working directory) and read the environment.

        Variables already set in the environment win over ``.env`` values.
        """
        load_dotenv(dotenv_path or find_dotenv(usecwd=True))
        return load_config(os.environ, cli_args)


def _to_path(value: object | None) -> Optional[Path]:
    """Resolve a catalog file location; blank values mean "use the demo catalog"."""
    text = "" if value is None else str(value).strip().strip('"')
    if not text:
        return None
    return Path(text).expanduser().resolve()


def _to_float(value: object | None) -> Optional[float]:
    if value is None:
        return None
    text = str(value).replace(",", "").strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _flag(value: object | None, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if not text:
        return default
    return text in _BOOLEAN_TRUE


def _overrides(cli_args: object | None) -> SimpleNamespace:
    """Caller overrides as a namespace; mappings and argparse results are both accepted."""
    if isinstance(cli_args, SimpleNamespace):
        return cli_args
    if isinstance(cli_args, Mapping):
        return SimpleNamespace(**{str(k): v for k, v in cli_args.items()})
    return SimpleNamespace(**dict(getattr(cli_args, "__dict__", {})))


def _id_strategy(value: object | None) -> str:
    text = str(value or "").strip().lower()
    return text if text in ID_STRATEGIES else "uuid"


def _log_level(value: object | None) -> str:
    text = str(value or "").strip().upper()
    return text if text in _LOG_LEVELS else "INFO"


def load_config(env: Mapping[str, str], cli_args: object | None = None) -> Config:
    """Build a :class:`Config` from environment variables, then apply caller overrides.

    Unparseable values fall back to defaults rather than failing.
    """

    base_prices_path = _to_path(env.get("VALVECOST_BASE_PRICES"))
    valid_combos_path = _to_path(env.get("VALVECOST_VALID_COMBOS"))
    sub_materials_path = _to_path(env.get("VALVECOST_SUB_MATERIALS"))
    id_strategy = _id_strategy(env.get("VALVECOST_ID_STRATEGY"))
    lp_factor = _to_float(env.get("VALVECOST_LP_FACTOR"))
    if lp_factor is None or lp_factor <= 0:
        lp_factor = 1.0
    check_consistency = _flag(env.get("VALVECOST_CHECK_CONSISTENCY"), default=True)
    log_level = _log_level(env.get("VALVECOST_LOG_LEVEL"))

    cli_ns = _overrides(cli_args)
    if getattr(cli_ns, "base_prices", None):
        base_prices_path = _to_path(cli_ns.base_prices) or base_prices_path
    if getattr(cli_ns, "valid_combos", None):
        valid_combos_path = _to_path(cli_ns.valid_combos) or valid_combos_path
    if getattr(cli_ns, "sub_materials", None):
        sub_materials_path = _to_path(cli_ns.sub_materials) or sub_materials_path
    if getattr(cli_ns, "id_strategy", None):
        id_strategy = _id_strategy(cli_ns.id_strategy)
    if getattr(cli_ns, "lp_factor", None) is not None:
        override = _to_float(cli_ns.lp_factor)
        if override is not None and override > 0:
            lp_factor = override
    if getattr(cli_ns, "verbose", False):
        log_level = "DEBUG"

    return Config(
        base_prices_path=base_prices_path,
        valid_combos_path=valid_combos_path,
        sub_materials_path=sub_materials_path,
        id_strategy=id_strategy,
        lp_factor=lp_factor,
        check_consistency=check_consistency,
        log_level=log_level,
    )


def configure_logging(config: Config) -> None:
    """Set up root logging at ``config.log_level``; for entry points, not library code."""
    if not logging.getLogger().handlers:
        logging.basicConfig(level=getattr(logging, config.log_level), format="%(message)s")


__all__ = ["Config", "load_config", "configure_logging"]
