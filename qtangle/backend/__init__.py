"""Amplitude storage for groups of entangled qubits."""

from .group import EntanglementGroup, apply_gate, entangle, locked_group, locked_groups

__all__ = ["EntanglementGroup", "apply_gate", "entangle", "locked_group", "locked_groups"]
