"""
varexport variable types

- `Variable`: the abstract, named value source
- `ManagedVariable` / `LazilyManagedVariable`: values pushed or supplied by their owner
- `AccessorVariable`: values read from attributes, properties or methods
- `ProxyVariable` / `CachingVariable`: read-through views, optionally memoized
- `EntryVariable`: one entry of an expandable (mapping-valued) variable
"""

from varexport.variables.accessor import AccessorVariable
from varexport.variables.base import Clock, Variable, escape_property, format_timestamp, system_clock
from varexport.variables.entry import EntryVariable
from varexport.variables.managed import LazilyManagedVariable, ManagedVariable, ManagedVariableBuilder
from varexport.variables.proxy import CachingVariable, ProxyVariable

__all__ = [
    "AccessorVariable",
    "CachingVariable",
    "Clock",
    "EntryVariable",
    "LazilyManagedVariable",
    "ManagedVariable",
    "ManagedVariableBuilder",
    "ProxyVariable",
    "Variable",
    "escape_property",
    "format_timestamp",
    "system_clock",
]
