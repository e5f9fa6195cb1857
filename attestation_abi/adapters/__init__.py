"""Host adapters feeding the ABIProvider engine."""

from .derive import CompileError as CompileError
from .derive import DeriveMacro as DeriveMacro
from .derive import derive_attestation as derive_attestation
from .plugin import AttestationPlugin as AttestationPlugin
from .plugin import PluginDiagnostic as PluginDiagnostic
from .plugin import PluginGeneratedFile as PluginGeneratedFile
from .plugin import PluginResult as PluginResult
from .plugin import SourceText as SourceText
