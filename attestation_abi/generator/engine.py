"""ABIProvider generation engine shared by the host adapters."""

import logging

from .classifier import TypeClassifier
from .descriptor import DescriptorBuilder
from .emitter import CodeEmitter
from .types import Diagnostic, GeneratedImplementation, RecordDefinition, RecordDescriptor, RecordKind

logger = logging.getLogger(__name__)

INELIGIBLE_MESSAGE = "Only structs with named fields are supported"


class IneligibleInputError(ValueError):
    """Raised when a definition is not a struct with named fields."""


class AbiEngine:
    """Turn record definitions into ABIProvider implementations.

    The engine holds no state between calls; collaborators can be swapped by
    passing them in.
    """

    def __init__(
        self,
        classifier: TypeClassifier | None = None,
        builder: DescriptorBuilder | None = None,
        emitter: CodeEmitter | None = None,
    ):
        self.classifier = classifier or TypeClassifier()
        self.builder = builder or DescriptorBuilder(self.classifier)
        self.emitter = emitter or CodeEmitter()

    def check_eligible(self, definition: RecordDefinition) -> None:
        if definition.kind != RecordKind.STRUCT:
            raise IneligibleInputError(INELIGIBLE_MESSAGE)

    def describe(self, definition: RecordDefinition) -> RecordDescriptor:
        """Build the layout descriptor of an eligible definition."""
        self.check_eligible(definition)
        return self.builder.build(
            definition.name,
            [(f.name, f.type_expression) for f in definition.fields],
            descriptions=definition.field_descriptions,
            abi_name=definition.abi_name,
            abi_version=definition.abi_version,
            generic_params=definition.generic_params,
        )

    def generate(self, definition: RecordDefinition) -> GeneratedImplementation | Diagnostic:
        """Generate code for a definition, or a diagnostic if it is not eligible."""
        try:
            descriptor = self.describe(definition)
        except IneligibleInputError as err:
            logger.debug("%s (%s) rejected: %s", definition.name, definition.kind, err)
            return self.emitter.reject(str(err), record_name=definition.name)

        implementation = self.emitter.emit(descriptor)
        logger.debug(
            "%s: %d fields, %d fixed bytes",
            definition.name,
            implementation.field_count,
            descriptor.total_fixed_size,
        )
        return implementation


def generate(definition: RecordDefinition) -> GeneratedImplementation | Diagnostic:
    """Generate the ABIProvider implementation for a definition."""
    return AbiEngine().generate(definition)
