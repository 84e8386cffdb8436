# model/__init__.py
# This file is part of Vigil - An LTL Runtime Verification
#
# Concrete state model for proposition traces

"""Proposition snapshots: the state type read from trace files.

Exports:
    Snapshot: One observed state (identifier, propositions, optional timestamp)
    proposition: Predicate testing membership of one proposition
    proposition_resolver: Identifier-to-predicate resolver for the parser
"""

from .snapshot import Snapshot, proposition, proposition_resolver

__all__ = ["Snapshot", "proposition", "proposition_resolver"]
