"""Cairo code emitter for ABIProvider implementations."""

from jinja2 import Environment, PackageLoader

from attestation_abi import __version__

from .types import Diagnostic, GeneratedImplementation, RecordDescriptor, Severity


def _cairo_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _doc_comment(value: str, indent: str = "") -> str:
    # Every line of a multi-line text needs its own marker
    lines = str(value).splitlines() or [""]
    return "\n".join(f"{indent}/// {line}".rstrip() for line in lines)


env = Environment(
    loader=PackageLoader("attestation_abi.generator", "templates"),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    line_comment_prefix="%%",
    line_statement_prefix="%",
)
env.filters["cairo_string"] = _cairo_string
env.filters["doc_comment"] = _doc_comment

template = env.get_template("abi_provider.cairo.j2")


def impl_name(record_name: str) -> str:
    return f"{record_name}ABIProvider"


def impl_generics(descriptor: RecordDescriptor) -> str:
    """Generic parameter list of the impl, empty for non-generic records."""
    if not descriptor.generic_params:
        return ""
    params = [p.text for p in descriptor.generic_params]
    params += [f"+Serde<{descriptor.self_type}>", f"+Drop<{descriptor.self_type}>"]
    return f"<{', '.join(params)}>"


def file_name(record_name: str) -> str:
    """Name of the auxiliary file holding the implementation for a record."""
    return f"{record_name}_abi_provider.cairo"


class CodeEmitter:
    """Render ABIProvider implementations, or diagnostics for rejected input."""

    def emit(self, descriptor: RecordDescriptor) -> GeneratedImplementation:
        """Render the implementation for a descriptor.

        The field count is written as a literal rather than derived from
        get_abi() at run time.
        """
        field_count = descriptor.field_count
        source_text = template.render(
            descriptor=descriptor,
            impl_name=impl_name(descriptor.name),
            impl_generics=impl_generics(descriptor),
            field_count=field_count,
        )
        return GeneratedImplementation(
            target_record_name=descriptor.name,
            field_count=field_count,
            source_text=source_text,
            file_name=file_name(descriptor.name),
        )

    def reject(self, reason: str, record_name: str | None = None) -> Diagnostic:
        return Diagnostic(message=reason, severity=Severity.ERROR, record_name=record_name)


def emit(descriptor: RecordDescriptor) -> GeneratedImplementation:
    """Render the ABIProvider implementation for a descriptor."""
    return CodeEmitter().emit(descriptor)


def runtime() -> str:
    """Generate the Cairo declarations of ABIField, StructABI and ABIProvider."""
    runtime_template = env.get_template("abi_runtime.cairo.j2")
    return runtime_template.render(version=__version__)
