"""
Tests para JudgeReconciler (find-or-create + enhancement) con fakes en memoria.
"""
import pytest

from app.infrastructure.external.courtlistener_sync.reconciler import JudgeReconciler
from app.infrastructure.external.courtlistener_sync.run_budget import RunBudget
from app.infrastructure.external.courtlistener_sync.types import NOOP_OUTCOME
from app.shared.exceptions.sync import ExternalRecordNotFound, StoreError


class TestJudgeReconciler:
    """Reconciliación de un juez individual."""

    @pytest.fixture
    def build(self, judge_store, limits, fixed_now):
        def _build(upstream):
            return JudgeReconciler(upstream=upstream, store=judge_store, limits=limits, clock=lambda: fixed_now)
        return _build

    def test_creates_new_judge_and_enhances(self, build, judge_store, upstream_factory, person):
        payload = person(
            42,
            "Ana Pérez",
            educations=[{"school": {"name": "Stanford"}, "degree": "JD"}],
        )
        reconciler = build(upstream_factory(people={42: payload}))
        budget = RunBudget()

        outcome = reconciler.reconcile("42", budget)

        assert outcome.created is True
        assert outcome.updated is False
        assert outcome.enhanced is True
        assert budget.created_count == 1

        row = judge_store.by_external_id("42")
        assert row["name"] == "Ana Pérez"
        assert row["courtlistener_data"] == payload
        assert row["jurisdiction"] == "CA"
        assert row["appointed_date"] == "2015-01-05"
        assert row["education"] == "Stanford (JD)"
        assert "Judge at Superior Court of California" in row["bio"]

    def test_second_reconcile_updates_without_duplicating(self, build, judge_store, upstream_factory, person):
        """Reconciliar dos veces el mismo id deja una sola fila."""
        reconciler = build(upstream_factory(people={7: person(7, "Juez Siete")}))
        budget = RunBudget()

        first = reconciler.reconcile("7", budget)
        second = reconciler.reconcile("7", budget)

        assert first.created is True
        assert second.updated is True
        assert second.created is False
        assert budget.created_count == 1
        assert len([r for r in judge_store.rows.values() if r.get("courtlistener_id") == "7"]) == 1

    def test_reconciling_existing_judge_twice_is_stable(self, build, judge_store, upstream_factory, person, days_ago):
        """Dos reconciliaciones con el mismo payload: ambas updated y sin deriva de campos."""
        judge_id = judge_store.seed("11", updated_at=days_ago(30))
        judge_store.rows[judge_id]["appointed_date"] = "2010-06-01"
        payload = person(
            11,
            "Carmen Ruiz",
            educations=[{"school": {"name": "Berkeley"}, "degree": "JD"}],
        )
        reconciler = build(upstream_factory(people={11: payload}))
        budget = RunBudget()
        tracked = (
            "name", "court_name", "jurisdiction", "appointed_date",
            "education", "bio", "courtlistener_data",
        )

        first = reconciler.reconcile("11", budget)
        after_first = {k: judge_store.rows[judge_id].get(k) for k in tracked}
        second = reconciler.reconcile("11", budget)
        after_second = {k: judge_store.rows[judge_id].get(k) for k in tracked}

        assert first.updated is True and first.created is False
        assert second.updated is True and second.created is False
        assert after_first == after_second
        assert after_first["name"] == "Carmen Ruiz"
        assert after_first["appointed_date"] == "2010-06-01"
        assert after_first["education"] == "Berkeley (JD)"
        assert after_first["courtlistener_data"] == payload
        assert budget.created_count == 0
        assert len(judge_store.rows) == 1

    def test_update_does_not_overwrite_appointed_date(self, build, judge_store, upstream_factory, person, days_ago):
        judge_id = judge_store.seed("9", updated_at=days_ago(30), name="Viejo")
        judge_store.rows[judge_id]["appointed_date"] = "2001-01-01"
        reconciler = build(upstream_factory(people={9: person(9, "Nuevo Nombre", date_start="2020-02-02")}))

        outcome = reconciler.reconcile("9", RunBudget())

        assert outcome.updated is True
        row = judge_store.rows[judge_id]
        assert row["name"] == "Nuevo Nombre"
        assert row["appointed_date"] == "2001-01-01"

    def test_missing_upstream_raises_not_found(self, build, upstream_factory):
        reconciler = build(upstream_factory(people={}))

        with pytest.raises(ExternalRecordNotFound) as exc_info:
            reconciler.reconcile("404", RunBudget())

        assert exc_info.value.external_id == "404"

    def test_creation_budget_exhausted_is_noop(self, build, judge_store, upstream_factory, person):
        reconciler = build(upstream_factory(people={5: person(5)}))
        budget = RunBudget(created_count=150)

        outcome = reconciler.reconcile("5", budget)

        assert outcome == NOOP_OUTCOME
        assert judge_store.by_external_id("5") is None
        assert budget.created_count == 150

    def test_existing_judge_still_updated_when_creation_budget_exhausted(
        self, build, judge_store, upstream_factory, person, days_ago
    ):
        judge_store.seed("5", updated_at=days_ago(30))
        reconciler = build(upstream_factory(people={5: person(5, "Actualizado")}))

        outcome = reconciler.reconcile("5", RunBudget(created_count=150))

        assert outcome.updated is True
        assert judge_store.by_external_id("5")["name"] == "Actualizado"

    def test_enhancement_failure_does_not_fail_reconcile(self, build, judge_store, upstream_factory, person):
        judge_store.fail_updates_with = {"bio", "education"}
        reconciler = build(upstream_factory(people={3: person(3)}))

        outcome = reconciler.reconcile("3", RunBudget())

        assert outcome.created is True
        assert outcome.enhanced is False
        assert judge_store.by_external_id("3") is not None

    def test_nothing_to_enhance(self, build, upstream_factory, person):
        reconciler = build(upstream_factory(people={3: person(3, positions=[])}))

        outcome = reconciler.reconcile("3", RunBudget())

        assert outcome.created is True
        assert outcome.enhanced is False

    def test_insert_conflict_falls_back_to_update(self, build, judge_store, upstream_factory, person, days_ago):
        """Si otra corrida insertó entre el find y el insert, se actualiza."""
        upstream = upstream_factory(people={8: person(8, "Concurrente")})
        reconciler = build(upstream)
        budget = RunBudget()

        original_find = judge_store.find_by_external_id
        calls = {"n": 0}

        def _find_after_concurrent_insert(external_id):
            calls["n"] += 1
            if calls["n"] == 1:
                # Simula la otra corrida: inserta justo después del primer find
                judge_store.seed(external_id, updated_at=days_ago(1))
                return None
            return original_find(external_id)

        judge_store.find_by_external_id = _find_after_concurrent_insert

        outcome = reconciler.reconcile("8", budget)

        assert outcome.updated is True
        assert outcome.created is False
        assert budget.created_count == 0
        assert judge_store.by_external_id("8")["name"] == "Concurrente"

    def test_store_error_propagates(self, build, judge_store, upstream_factory, person):
        judge_store.fail_find_for = {"6"}
        reconciler = build(upstream_factory(people={6: person(6)}))

        with pytest.raises(StoreError):
            reconciler.reconcile("6", RunBudget())
