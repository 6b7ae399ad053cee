"""docbind package root."""

from docbind.aliases import AliasTable
from docbind.binder import Binder
from docbind.blocks import CodeBlock, Heading, Table, tokenize
from docbind.exceptions import (
    BindError,
    ConversionError,
    DuplicateAssignment,
    MissingRequiredColumn,
    SchemaBuildError,
    SchemaMismatch,
)
from docbind.layout import LayoutNode

__all__ = [
    "__version__",
    "AliasTable",
    "Binder",
    "BindError",
    "CodeBlock",
    "ConversionError",
    "DuplicateAssignment",
    "Heading",
    "LayoutNode",
    "MissingRequiredColumn",
    "SchemaBuildError",
    "SchemaMismatch",
    "Table",
    "tokenize",
]

__version__ = "0.1.0"
