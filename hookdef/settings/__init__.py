"""
Host settings documents: markers, reconciliation and configuration scopes.
"""

from .marker import MANAGED_BY_MARKER, ManagedMarker
from .reconciler import ReconcileResult, build_command, reconcile, strip_managed
from .scopes import Scope, ScopeOutcome, ScopeSync, describe_hook_file, resolve_scopes

__all__ = [
    'MANAGED_BY_MARKER', 'ManagedMarker',
    'ReconcileResult', 'build_command', 'reconcile', 'strip_managed',
    'Scope', 'ScopeOutcome', 'ScopeSync', 'describe_hook_file', 'resolve_scopes',
]
