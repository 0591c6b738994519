"""Custom encoder registry -- maps a logged type to a hand-written RecordLogger.

Encoder classes announce themselves with :func:`custom_logger_for`.  The
decorator only records the registration; :meth:`EncoderRegistry.scan` turns
the recorded classes into a registry once at startup, validating each one.

Example::

    @custom_logger_for(VendorMotor)
    class VendorMotorLogger(RecordLogger[VendorMotor]):
        def __init__(self) -> None:
            super().__init__(VendorMotor)

        def update(self, sink, motor):
            sink.log_double("output", motor.get_output())
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from looplog.errors import ConfigurationError

if TYPE_CHECKING:
    from looplog.runtime.record_logger import RecordLogger

logger = logging.getLogger(__name__)

L = TypeVar("L", bound=type)

_TARGET_ATTR = "__looplog_encodes__"
_registered: list[type] = []


def custom_logger_for(target: type) -> Callable[[L], L]:
    """Class decorator marking a RecordLogger subclass as the encoder for *target*."""

    def decorate(encoder_cls: L) -> L:
        setattr(encoder_cls, _TARGET_ATTR, target)
        _registered.append(encoder_cls)
        return encoder_cls

    return decorate


def registered_encoders() -> list[type]:
    """Encoder classes recorded by :func:`custom_logger_for`, in registration order."""
    return list(_registered)


def clear_registered_encoders() -> None:
    _registered.clear()


class EncoderRegistry:
    """Immutable-after-startup lookup from logged type to encoder instance."""

    def __init__(self) -> None:
        self._encoders: dict[type, RecordLogger[Any]] = {}

    @classmethod
    def scan(cls) -> EncoderRegistry:
        """Build a registry from every class decorated with ``custom_logger_for``."""
        return cls.from_loggers(registered_encoders())

    @classmethod
    def from_loggers(cls, encoder_classes: Iterable[type]) -> EncoderRegistry:
        registry = cls()
        for encoder_cls in encoder_classes:
            target = getattr(encoder_cls, _TARGET_ATTR, None)
            if target is None:
                raise ConfigurationError(
                    f"{encoder_cls.__qualname__} is not decorated with @custom_logger_for"
                )
            registry.register(target, encoder_cls)
        return registry

    def register(self, target: type, encoder_cls: type) -> RecordLogger[Any]:
        """Instantiate *encoder_cls* and bind it to *target*.

        Raises ConfigurationError if *target* already has an encoder, if the
        class is not a RecordLogger, or if it cannot be built without
        arguments.
        """
        from looplog.runtime.record_logger import RecordLogger

        if target in self._encoders:
            existing = type(self._encoders[target]).__qualname__
            raise ConfigurationError(
                f"Multiple custom loggers registered for {target.__qualname__}: "
                f"{existing} and {encoder_cls.__qualname__}"
            )
        if not (isinstance(encoder_cls, type) and issubclass(encoder_cls, RecordLogger)):
            raise ConfigurationError(
                f"{getattr(encoder_cls, '__qualname__', encoder_cls)!s} is not a subclass of "
                f"RecordLogger[{target.__qualname__}]"
            )
        try:
            encoder = encoder_cls()
        except TypeError as exc:
            raise ConfigurationError(
                f"Custom logger {encoder_cls.__qualname__} must be constructible "
                f"without arguments: {exc}"
            ) from exc
        self._encoders[target] = encoder
        logger.debug("Registered custom logger %s for %s", encoder_cls.__qualname__, target.__qualname__)
        return encoder

    def get(self, target: type) -> RecordLogger[Any] | None:
        return self._encoders.get(target)

    def __contains__(self, target: object) -> bool:
        return target in self._encoders

    def __len__(self) -> int:
        return len(self._encoders)

    def targets(self) -> list[type]:
        return list(self._encoders)
