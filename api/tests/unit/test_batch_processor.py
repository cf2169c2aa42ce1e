"""
Tests unitarios para BatchProcessor.

El reconciler se mockea: aquí solo interesa el chunking, el manejo de
errores por entidad, el corte por presupuesto y el rate limiting.
"""
import pytest
from unittest.mock import Mock

from app.infrastructure.external.courtlistener_sync.batch_processor import BatchProcessor, chunked
from app.infrastructure.external.courtlistener_sync.run_budget import RunBudget
from app.infrastructure.external.courtlistener_sync.sync_config import SyncLimits
from app.infrastructure.external.courtlistener_sync.types import ReconcileOutcome
from app.shared.constants.sync_constants import RUN_LIMIT_MARKER
from app.shared.exceptions.sync import ExternalRecordNotFound


UPDATED = ReconcileOutcome(updated=True, created=False, enhanced=True)
CREATED = ReconcileOutcome(updated=False, created=True, enhanced=False)


def _ids(n, start=1):
    return [str(i) for i in range(start, start + n)]


class TestBatchProcessor:
    """Tests para BatchProcessor.process."""

    @pytest.fixture
    def reconciler(self):
        mock = Mock()
        mock.reconcile.return_value = UPDATED
        return mock

    def test_empty_input_returns_empty_stats(self, reconciler, limits, sleeps):
        processor = BatchProcessor(reconciler=reconciler, limits=limits, sleep=sleeps.append)

        stats = processor.process([], RunBudget())

        assert stats.processed == 0
        assert stats.errors == []
        reconciler.reconcile.assert_not_called()
        assert sleeps == []

    def test_one_failing_entity_does_not_stop_the_batch(self, reconciler, sleeps):
        """25 ids en chunks de 10, uno falla: 24 procesados y 1 error."""
        def _reconcile(external_id, budget):
            if external_id == "7":
                raise ExternalRecordNotFound(external_id)
            return UPDATED

        reconciler.reconcile.side_effect = _reconcile
        limits = SyncLimits(inter_batch_delay_s=2.0)
        processor = BatchProcessor(reconciler=reconciler, limits=limits, sleep=sleeps.append)
        budget = RunBudget()

        stats = processor.process(_ids(25), budget, batch_size=10)

        assert stats.processed == 24
        assert stats.updated == 24
        assert stats.enhanced == 24
        assert len(stats.errors) == 1
        assert stats.errors[0].startswith("7: ")
        assert "7" in stats.errors[0]
        assert stats.limit_reached is False
        assert budget.processed_count == 24
        # 3 chunks -> 2 delays, ninguno después del último
        assert sleeps == [2.0, 2.0]

    def test_processes_sequentially_in_input_order(self, reconciler, limits, sleeps):
        processor = BatchProcessor(reconciler=reconciler, limits=limits, sleep=sleeps.append)

        processor.process(["c", "a", "b"], RunBudget(), batch_size=2)

        assert [c.args[0] for c in reconciler.reconcile.call_args_list] == ["c", "a", "b"]

    def test_batch_size_is_clamped(self, reconciler, sleeps):
        limits = SyncLimits(max_batch_size=25, inter_batch_delay_s=1.0)
        processor = BatchProcessor(reconciler=reconciler, limits=limits, sleep=sleeps.append)

        processor.process(_ids(60), RunBudget(), batch_size=1000)

        # chunks de 25: 25 + 25 + 10
        assert len(sleeps) == 2

    def test_entity_limit_marks_run_limit_when_work_remains(self, reconciler, sleeps):
        limits = SyncLimits(per_run_entity_limit=3, inter_batch_delay_s=0.0)
        processor = BatchProcessor(reconciler=reconciler, limits=limits, sleep=sleeps.append)
        budget = RunBudget()

        stats = processor.process(_ids(5), budget)

        assert stats.processed == 3
        assert stats.limit_reached is True
        assert stats.errors == [RUN_LIMIT_MARKER]
        assert reconciler.reconcile.call_count == 3
        assert budget.processed_count == 3

    def test_no_marker_when_limit_reached_on_last_item(self, reconciler, sleeps):
        limits = SyncLimits(per_run_entity_limit=3, inter_batch_delay_s=0.0)
        processor = BatchProcessor(reconciler=reconciler, limits=limits, sleep=sleeps.append)

        stats = processor.process(_ids(3), RunBudget())

        assert stats.processed == 3
        assert stats.errors == []
        assert stats.limit_reached is False

    def test_create_limit_stops_batch(self, reconciler, sleeps):
        """El reconciler consume creaciones; al agotarse se corta el batch."""
        def _reconcile(external_id, budget):
            budget.created_count += 1
            return CREATED

        reconciler.reconcile.side_effect = _reconcile
        limits = SyncLimits(per_run_create_limit=2, inter_batch_delay_s=0.0)
        processor = BatchProcessor(reconciler=reconciler, limits=limits, sleep=sleeps.append)

        stats = processor.process(_ids(4), RunBudget())

        assert stats.created == 2
        assert stats.errors == [RUN_LIMIT_MARKER]

    def test_already_exhausted_budget_processes_nothing(self, reconciler, limits, sleeps):
        processor = BatchProcessor(reconciler=reconciler, limits=limits, sleep=sleeps.append)

        stats = processor.process(_ids(2), RunBudget(processed_count=250))

        assert stats.processed == 0
        assert stats.errors == [RUN_LIMIT_MARKER]
        reconciler.reconcile.assert_not_called()


def test_chunked_preserves_order() -> None:
    assert chunked(["a", "b", "c", "d", "e"], 2) == [["a", "b"], ["c", "d"], ["e"]]
