"""Token-based adapter: expands ``#[derive(Attestation)]`` for one item.

The macro front end hands over the source of a single type definition. The
result is the generated implementation text, which the host places next to
the original item.
"""

from attestation_abi.generator.engine import AbiEngine
from attestation_abi.generator.parser import parse_item
from attestation_abi.generator.types import Diagnostic


class CompileError(RuntimeError):
    """Compile-time error reported in place of the macro expansion."""


class DeriveMacro:
    """Derive macro bound to an engine instance."""

    def __init__(self, engine: AbiEngine | None = None):
        self.engine = engine or AbiEngine()

    def __call__(self, source: str) -> str:
        definition = parse_item(source)
        result = self.engine.generate(definition)
        if isinstance(result, Diagnostic):
            raise CompileError(result.message)
        return result.source_text


def derive_attestation(source: str, engine: AbiEngine | None = None) -> str:
    """Expand the Attestation derive for the item defined in ``source``.

    Raises:
        CompileError: The item is not a struct with named fields.
        ValidationError: The item declares a field twice.
    """
    return DeriveMacro(engine)(source)
