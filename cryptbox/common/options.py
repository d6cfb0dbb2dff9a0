"""
Option-bag configuration shared by every facade.

Each family defines a pydantic config record with defaults. Callers pass
option callables (with_hex(), with_pkcs7(), ...) which are applied to a fresh
record in order, so a later option overrides an earlier one.
"""

from typing import Callable, TypeVar

from pydantic import BaseModel, ConfigDict

from .encoding import Encoding

ConfigT = TypeVar("ConfigT", bound="BaseConfig")


class BaseConfig(BaseModel):
    """Base record: knows how to apply options to itself."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def apply(self: ConfigT, *opts: Callable[[ConfigT], None]) -> ConfigT:
        for opt in opts:
            opt(self)
        return self


class EncodedConfig(BaseConfig):
    """Record for operations whose output (or input) carries an encoding."""

    encoding: Encoding = Encoding.NONE


Option = Callable[[EncodedConfig], None]


def with_hex() -> Option:
    """Render output as lowercase hex (and read input as hex)."""
    def apply(conf: EncodedConfig) -> None:
        conf.encoding = Encoding.HEX
    return apply


def with_base64() -> Option:
    """Render output as standard base64 (and read input as base64)."""
    def apply(conf: EncodedConfig) -> None:
        conf.encoding = Encoding.BASE64
    return apply
