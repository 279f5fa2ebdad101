"""
Tests for ElementReconciler confirm-or-retract behavior.
"""

import uuid

import numpy as np
import pytest

from conftest import obj, surf, translation
from models.category import ObjectCategory, SurfaceCategory, CategoryVariant
from models.element import CategoryVariantError
from tracking.reconciler import ElementReconciler, plan_reconciliation


class TestReconcilerBasics:
    """Basic reconciler functionality tests."""

    def test_reconciler_init(self):
        """Reconciler starts empty."""
        reconciler = ElementReconciler()

        assert len(reconciler) == 0
        assert reconciler.identities == frozenset()
        assert reconciler.cycle_count == 0

    def test_first_batch_creates_records(self, ids):
        """Every identity in the first batch is created."""
        reconciler = ElementReconciler()

        result = reconciler.reconcile([obj(ids[0]), surf(ids[1])])

        assert result.created_identities == (ids[0], ids[1])
        assert result.updated == ()
        assert result.retracted == ()
        assert reconciler.identities == {ids[0], ids[1]}

    def test_empty_batch_on_empty_collection(self):
        """Empty batch with nothing tracked changes nothing."""
        reconciler = ElementReconciler()

        result = reconciler.reconcile([])

        assert result.is_empty
        assert reconciler.cycle_count == 1

    def test_get_and_contains(self, ids):
        """Records are reachable by identity."""
        reconciler = ElementReconciler()
        reconciler.reconcile([obj(ids[0], cat="sofa")])

        assert ids[0] in reconciler
        assert ids[1] not in reconciler
        assert reconciler.get(ids[0]).category.category is ObjectCategory.SOFA
        assert reconciler.get(ids[1]) is None

    def test_identities_is_a_snapshot(self, ids):
        """Mutating the returned identities does not touch the collection."""
        reconciler = ElementReconciler()
        reconciler.reconcile([obj(ids[0])])

        snapshot = set(reconciler.identities)
        snapshot.add(ids[1])

        assert reconciler.identities == {ids[0]}


class TestReconcilerScenario:
    """The create / update / retract sequence across three scans."""

    def test_three_cycle_scenario(self):
        a, b = uuid.uuid4(), uuid.uuid4()
        reconciler = ElementReconciler()

        first = reconciler.reconcile([obj(a, dims=(1, 1, 1), cat="bed")])
        assert first.created_identities == (a,)
        assert first.updated == ()
        assert first.retracted == ()
        assert reconciler.identities == {a}

        second = reconciler.reconcile([
            obj(a, dims=(2, 1, 1), cat="bed"),
            surf(b, dims=(1, 1, 1), cat="wall"),
        ])
        assert second.created_identities == (b,)
        assert second.updated_identities == (a,)
        assert second.retracted == ()
        assert reconciler.identities == {a, b}
        np.testing.assert_array_equal(reconciler.get(a).dimensions, [2, 1, 1])

        third = reconciler.reconcile([])
        assert third.created == ()
        assert third.updated == ()
        assert third.retracted == (a, b)
        assert len(reconciler) == 0

    def test_update_mutates_record_in_place(self, ids):
        """The updated record is the same object that was created."""
        reconciler = ElementReconciler()
        created = reconciler.reconcile([obj(ids[0], transform=translation(1.0))]).created[0]

        result = reconciler.reconcile([obj(ids[0], transform=translation(3.0))])

        assert result.updated[0] is created
        assert created.transform[0, 3] == 3.0
        assert created.revision == 1

    def test_kind_change_within_variant(self, ids):
        """A door can go from open to closed."""
        reconciler = ElementReconciler()
        reconciler.reconcile([surf(ids[0], cat="door", is_open=True)])

        result = reconciler.reconcile([surf(ids[0], cat="door", is_open=False)])

        assert result.updated_identities == (ids[0],)
        assert reconciler.get(ids[0]).category.category is SurfaceCategory.DOOR_CLOSED


class TestReconcilerProperties:
    """Invariants that hold for every cycle."""

    def test_reconfirmation_is_idempotent(self, ids):
        """Reconciling the same batch twice creates and retracts nothing the second time."""
        reconciler = ElementReconciler()
        batch = [obj(ids[0]), surf(ids[1]), obj(ids[2], cat="chair")]

        reconciler.reconcile(batch)
        second = reconciler.reconcile(batch)

        assert second.created == ()
        assert second.retracted == ()
        assert set(second.updated_identities) == set(ids)

    def test_tracked_equals_confirmed(self, ids):
        """After every cycle the tracked identities are exactly the batch identities."""
        reconciler = ElementReconciler()
        batches = [
            [obj(ids[0]), obj(ids[1])],
            [obj(ids[1]), surf(ids[2])],
            [surf(ids[2])],
            [obj(ids[0]), obj(ids[1]), surf(ids[2])],
            [],
        ]

        for batch in batches:
            reconciler.reconcile(batch)
            assert reconciler.identities == {d.identity for d in batch}

    def test_result_lists_are_disjoint(self, ids):
        reconciler = ElementReconciler()
        reconciler.reconcile([obj(ids[0]), obj(ids[1])])

        result = reconciler.reconcile([obj(ids[1]), obj(ids[2]), obj(ids[2])])

        created = set(result.created_identities)
        updated = set(result.updated_identities)
        retracted = set(result.retracted)
        assert created == {ids[2]}
        assert updated == {ids[1]}
        assert retracted == {ids[0]}
        assert not (created & updated or created & retracted or updated & retracted)

    def test_empty_batch_retracts_everything(self, ids):
        """An empty scan retracts every tracked identity."""
        reconciler = ElementReconciler()
        reconciler.reconcile([obj(ids[0]), surf(ids[1]), obj(ids[2])])

        result = reconciler.reconcile([])

        assert result.retracted == tuple(ids)
        assert len(reconciler) == 0

    def test_reset_retracts_everything(self, ids):
        reconciler = ElementReconciler()
        reconciler.reconcile([obj(ids[0]), obj(ids[1])])

        result = reconciler.reset()

        assert set(result.retracted) == {ids[0], ids[1]}
        assert len(reconciler) == 0

    def test_duplicate_in_batch_last_write_wins(self, ids):
        """The second occurrence of an identity in one batch wins."""
        reconciler = ElementReconciler()

        result = reconciler.reconcile([
            obj(ids[0], transform=translation(1.0)),
            obj(ids[0], transform=translation(2.0)),
        ])

        assert result.created_identities == (ids[0],)
        assert len(reconciler) == 1
        assert reconciler.get(ids[0]).transform[0, 3] == 2.0

    def test_duplicate_of_tracked_identity_updates_once(self, ids):
        reconciler = ElementReconciler()
        reconciler.reconcile([obj(ids[0])])

        result = reconciler.reconcile([
            obj(ids[0], dims=(1, 1, 1)),
            obj(ids[0], dims=(3, 3, 3)),
        ])

        assert result.updated_identities == (ids[0],)
        np.testing.assert_array_equal(reconciler.get(ids[0]).dimensions, [3, 3, 3])

    def test_reappearing_identity_gets_new_record(self, ids):
        """An identity retracted and seen again starts a fresh record."""
        reconciler = ElementReconciler()
        original = reconciler.reconcile([obj(ids[0])]).created[0]
        reconciler.reconcile([])

        result = reconciler.reconcile([obj(ids[0])])

        assert result.created_identities == (ids[0],)
        assert result.created[0] is not original
        assert result.created[0].revision == 0


class TestVariantImmutability:
    """Object/surface variant can never change for a tracked identity."""

    def test_variant_change_fails_fast(self, ids):
        reconciler = ElementReconciler()
        reconciler.reconcile([obj(ids[0])])

        with pytest.raises(CategoryVariantError):
            reconciler.reconcile([surf(ids[0])])

    def test_variant_change_leaves_state_untouched(self, ids):
        """A rejected batch modifies no record and no membership."""
        reconciler = ElementReconciler()
        reconciler.reconcile([obj(ids[0], dims=(1, 1, 1)), obj(ids[1])])

        with pytest.raises(CategoryVariantError):
            reconciler.reconcile([obj(ids[0], dims=(5, 5, 5)), surf(ids[1])])

        assert reconciler.identities == {ids[0], ids[1]}
        np.testing.assert_array_equal(reconciler.get(ids[0]).dimensions, [1, 1, 1])
        assert reconciler.get(ids[0]).revision == 0
        assert reconciler.cycle_count == 1

    def test_variant_conflict_within_new_batch(self, ids):
        """A new identity reported as both object and surface is rejected."""
        reconciler = ElementReconciler()

        with pytest.raises(CategoryVariantError):
            reconciler.reconcile([obj(ids[0]), surf(ids[0])])

        assert len(reconciler) == 0


class TestPlanReconciliation:
    """The pure planning step."""

    def test_plan_orders(self, ids):
        tracked = {ids[0]: CategoryVariant.OBJECT, ids[1]: CategoryVariant.SURFACE}

        plan = plan_reconciliation(tracked, [obj(ids[2]), obj(ids[0]), obj(ids[2])])

        assert plan.created == (ids[2],)
        assert plan.updated == (ids[0],)
        assert plan.retracted == (ids[1],)
        assert plan.confirmed == (ids[2], ids[0])

    def test_plan_has_no_side_effects(self, ids):
        tracked = {ids[0]: CategoryVariant.OBJECT}

        plan_reconciliation(tracked, [obj(ids[1])])

        assert tracked == {ids[0]: CategoryVariant.OBJECT}
