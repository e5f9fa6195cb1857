"""Layout descriptor construction for record definitions."""

import logging
from collections.abc import Iterable, Mapping

from .classifier import TypeClassifier
from .types import FieldDescriptor, GenericParam, RecordDescriptor

logger = logging.getLogger(__name__)


class DescriptorBuilder:
    """Build record descriptors from ordered (name, type expression) pairs."""

    def __init__(self, classifier: TypeClassifier | None = None):
        self.classifier = classifier or TypeClassifier()

    def build(
        self,
        record_name: str,
        ordered_fields: Iterable[tuple[str, str]],
        *,
        descriptions: Mapping[str, str] | None = None,
        abi_name: str | None = None,
        abi_version: str | None = None,
        generic_params: Iterable[GenericParam] = (),
    ) -> RecordDescriptor:
        """Classify every field, in order, and total the fixed widths.

        Field order is preserved and nothing is filtered or deduplicated;
        name uniqueness is left to the caller.
        """
        descriptions = descriptions or {}
        fields: list[FieldDescriptor] = []
        total_size = 0

        for name, type_expression in ordered_fields:
            field_type, width = self.classifier.classify(type_expression)
            if field_type.is_unknown:
                logger.debug(
                    "%s.%s: unrecognized type %r counted as 0 bytes",
                    record_name,
                    name,
                    field_type.raw_text,
                )

            fields.append(
                FieldDescriptor(
                    name=name,
                    type=field_type,
                    byte_width=width,
                    description=descriptions.get(name),
                )
            )
            total_size += width

        return RecordDescriptor(
            name=record_name,
            fields=tuple(fields),
            total_fixed_size=total_size,
            abi_name=abi_name,
            abi_version=abi_version,
            generic_params=tuple(generic_params),
        )


def build(record_name: str, ordered_fields: Iterable[tuple[str, str]]) -> RecordDescriptor:
    """Build the layout descriptor for a record."""
    return DescriptorBuilder().build(record_name, ordered_fields)
