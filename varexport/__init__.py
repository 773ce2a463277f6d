"""
varexport: runtime variable export for operational introspection.

Register named, dynamically readable values (counters, gauges, status strings,
nested maps) under namespaces, then dump, scrape or look them up while the
process runs.
"""

from varexport.exceptions import (
    ExportError,
    InvalidVariableError,
    SettingsError,
    UnsupportedMemberError,
    VarExportError,
    VariableAccessError,
    VariableError,
)
from varexport.exporter import (
    NamespaceDirectory,
    VarExporter,
    for_namespace,
    get_value,
    get_variable,
    global_exporter,
    list_namespaces,
    register,
    visit_namespace_variables,
)
from varexport.locator import ExportData, export
from varexport.variables import (
    CachingVariable,
    EntryVariable,
    LazilyManagedVariable,
    ManagedVariable,
    ProxyVariable,
    Variable,
)

__all__ = [
    "CachingVariable",
    "EntryVariable",
    "ExportData",
    "ExportError",
    "InvalidVariableError",
    "LazilyManagedVariable",
    "ManagedVariable",
    "NamespaceDirectory",
    "ProxyVariable",
    "SettingsError",
    "UnsupportedMemberError",
    "VarExportError",
    "VarExporter",
    "Variable",
    "VariableAccessError",
    "VariableError",
    "export",
    "for_namespace",
    "get_value",
    "get_variable",
    "global_exporter",
    "list_namespaces",
    "register",
    "visit_namespace_variables",
]
