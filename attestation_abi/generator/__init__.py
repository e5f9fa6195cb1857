"""ABIProvider code generator."""

from .classifier import TypeClassifier as TypeClassifier
from .classifier import classify as classify
from .descriptor import DescriptorBuilder as DescriptorBuilder
from .descriptor import build as build
from .emitter import CodeEmitter as CodeEmitter
from .emitter import emit as emit
from .engine import AbiEngine as AbiEngine
from .engine import IneligibleInputError as IneligibleInputError
from .engine import generate as generate
from .parser import ValidationError as ValidationError
from .parser import parse as parse
from .parser import parse_item as parse_item
from .parser import parse_type as parse_type
from .types import *
