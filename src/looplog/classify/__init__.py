"""Type classification: declared type -> loggable shape."""

from looplog.classify.classifier import ClassifierContext, TypeClassifier, is_optional, unwrap_optional
from looplog.classify.registry import EncoderRegistry, custom_logger_for
from looplog.classify.shapes import (
    ClassifiedShape,
    Container,
    CustomEncoded,
    EnumName,
    LoggableShape,
    Measurement,
    NestedLoggable,
    Primitive,
    PrimitiveArray,
    PropertyBag,
    StructArray,
    StructRecord,
    Suppressed,
    Text,
    TextArray,
    Unsupported,
)

__all__ = [
    "ClassifiedShape",
    "ClassifierContext",
    "Container",
    "CustomEncoded",
    "EncoderRegistry",
    "EnumName",
    "LoggableShape",
    "Measurement",
    "NestedLoggable",
    "Primitive",
    "PrimitiveArray",
    "PropertyBag",
    "StructArray",
    "StructRecord",
    "Suppressed",
    "Text",
    "TextArray",
    "TypeClassifier",
    "Unsupported",
    "custom_logger_for",
    "is_optional",
    "unwrap_optional",
]
