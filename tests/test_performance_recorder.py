"""Tests for PerformanceRecorder."""
import pytest

from liftengine.core.exceptions import PersistenceError
from liftengine.models.enums import SetType
from liftengine.schemas.records import PerformanceInput
from liftengine.services.performance_recorder import PerformanceRecorder

from tests.conftest import FakeWorkoutStore, plan_exercise, warmup, working


@pytest.fixture
def bench():
    return plan_exercise(1, [warmup(60, 8), working(100, 5), working(100, 5)], name="Bench Press")


@pytest.fixture
def fake_store():
    return FakeWorkoutStore()


@pytest.fixture
def recorder(fake_store):
    return PerformanceRecorder(fake_store)


class TestRecordSet:
    @pytest.mark.asyncio
    async def test_record_set_persists_performance(self, recorder, fake_store, bench):
        record = await recorder.record_set(1, bench, 1, PerformanceInput(weight=100, reps=5, rpe=8))

        assert record.set_number == 2
        assert record.set_type is SetType.WORKING
        assert record.weight == 100
        assert record.reps == 5
        assert record.rpe == 8
        assert record.completed is True
        assert fake_store.set_records == [record]

    @pytest.mark.asyncio
    async def test_reuses_exercise_log_within_session(self, recorder, fake_store, bench):
        first = await recorder.record_set(1, bench, 0, PerformanceInput(weight=60, reps=8))
        second = await recorder.record_set(1, bench, 1, PerformanceInput(weight=100, reps=5))

        assert first.exercise_log_id == second.exercise_log_id
        assert len(fake_store.exercise_logs) == 1

    @pytest.mark.asyncio
    async def test_finds_existing_log_from_store(self, fake_store, bench):
        """A fresh recorder still reuses the log created by an earlier one."""
        first = await PerformanceRecorder(fake_store).record_set(1, bench, 0, PerformanceInput(reps=8))
        second = await PerformanceRecorder(fake_store).record_set(1, bench, 1, PerformanceInput(reps=5))

        assert first.exercise_log_id == second.exercise_log_id
        assert fake_store.calls.count("create_exercise_log") == 1

    @pytest.mark.asyncio
    async def test_separate_sessions_get_separate_logs(self, recorder, fake_store, bench):
        first = await recorder.record_set(1, bench, 0, PerformanceInput(reps=8))
        second = await recorder.record_set(2, bench, 0, PerformanceInput(reps=8))

        assert first.exercise_log_id != second.exercise_log_id

    @pytest.mark.asyncio
    async def test_set_index_out_of_range(self, recorder, bench):
        with pytest.raises(IndexError):
            await recorder.record_set(1, bench, 3, PerformanceInput(reps=5))


class TestFailures:
    @pytest.mark.asyncio
    async def test_failed_log_creation_is_not_cached(self, recorder, fake_store, bench):
        fake_store.fail_on["create_exercise_log"] = 1

        with pytest.raises(PersistenceError) as exc_info:
            await recorder.record_set(1, bench, 0, PerformanceInput(reps=8))

        assert exc_info.value.operation == "create_exercise_log"
        assert fake_store.exercise_logs == {}

        record = await recorder.record_set(1, bench, 0, PerformanceInput(reps=8))
        assert record.exercise_log_id in fake_store.exercise_logs

    @pytest.mark.asyncio
    async def test_failed_set_write_keeps_log(self, recorder, fake_store, bench):
        fake_store.fail_on["create_set_record"] = 1

        with pytest.raises(PersistenceError):
            await recorder.record_set(1, bench, 0, PerformanceInput(reps=8))

        record = await recorder.record_set(1, bench, 0, PerformanceInput(reps=8))
        assert len(fake_store.exercise_logs) == 1
        assert len(fake_store.set_records) == 1
        assert record.set_number == 1
