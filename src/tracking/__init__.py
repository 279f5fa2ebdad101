"""
Tracking module.

The canonical reconciler implementation is in tracking.reconciler.
"""

from .reconciler import ElementReconciler, ReconciliationPlan, plan_reconciliation

__all__ = ["ElementReconciler", "ReconciliationPlan", "plan_reconciliation"]
