"""Tests for the dashboard controller (refresh, submit, clear cache)."""

import pytest

from jobprompter.api.validators import TriggerImportRequest
from jobprompter.dashboard.controller import DashboardController, LOAD_ERROR_MESSAGE
from jobprompter.dashboard.submission import SubmissionError
from jobprompter.store.manager import IMPORT_LOGS_KEY, STATS_KEY, STATS_TIMESTAMP_KEY

from tests.conftest import FakeBackendClient, FakeResponse, logs_body, stats_body


def import_request(name='Indeed Jobs', url='https://api.indeed.com/jobs', fmt='json'):
    return TriggerImportRequest(apiName=name, apiUrl=url, type=fmt)


@pytest.fixture
def controller(backend, cache, clock):
    """Controller without delayed re-checks."""
    return DashboardController(backend, cache, clock=clock, schedule_rechecks=False)


class TestRefresh:
    """Test DashboardController.refresh."""

    def test_refresh_sets_records_and_stats(self, cache, clock):
        """Test a successful refresh replaces the display state."""
        backend = FakeBackendClient(
            logs=FakeResponse(200, logs_body([{'_id': 'a', 'status': 'completed'}])),
            stats=FakeResponse(200, stats_body(total=5, completed=5))
        )
        controller = DashboardController(backend, cache, clock=clock, schedule_rechecks=False)

        assert controller.refresh() is True

        assert [r.id for r in controller.records] == ['a']
        assert controller.stats.total_jobs == 5
        assert controller.error is None
        assert controller.is_loading is False
        assert controller.last_refreshed is not None

    def test_refresh_error_keeps_prior_state(self, backend, controller, connection_error):
        """Test a failed refresh flags an error and keeps what was shown."""
        backend.logs_response = FakeResponse(200, logs_body([{'_id': 'a'}]))
        controller.refresh()
        shown_records = controller.records
        shown_stats = controller.stats

        backend.error = connection_error
        assert controller.refresh() is False

        assert controller.error == LOAD_ERROR_MESSAGE
        assert controller.records is shown_records
        assert controller.stats is shown_stats
        assert controller.is_loading is False

    def test_malformed_json_flags_error(self, backend, controller):
        """Test malformed JSON becomes the generic load error."""
        backend.stats_response = FakeResponse(200, ValueError('bad json'))

        controller.refresh()

        assert controller.error == LOAD_ERROR_MESSAGE

    def test_next_refresh_clears_error(self, backend, controller, connection_error):
        """Test the retry action clears the error flag."""
        backend.error = connection_error
        controller.refresh()

        backend.error = None
        controller.refresh()

        assert controller.error is None

    def test_outage_never_raises(self, cache, clock):
        """Test backend outage shows mock data instead of failing."""
        backend = FakeBackendClient(logs=FakeResponse(503), stats=FakeResponse(503))
        controller = DashboardController(backend, cache, clock=clock, schedule_rechecks=False)

        assert controller.refresh() is True
        assert len(controller.records) == 2
        assert controller.source == 'mock'

    def test_ensure_loaded_fetches_once(self, backend, controller):
        """Test the initial load happens only on first access."""
        controller.ensure_loaded()
        controller.ensure_loaded()

        assert backend.fetch_calls == 1

    def test_snapshot_shape(self, controller):
        """Test snapshot is JSON-ready."""
        controller.refresh()

        snapshot = controller.snapshot()

        assert set(snapshot) == {
            'importLogs', 'stats', 'isLoading', 'error', 'source', 'lastRefreshed'
        }
        assert snapshot['stats']['totalJobs'] == 0


class TestSubmitImport:
    """Test DashboardController.submit_import."""

    def test_submission_with_import_log_id(self, backend, controller, cache):
        """Test backend importLogId becomes the new record's id."""
        backend.stats_response = FakeResponse(200, stats_body(total=10, pending=2))
        controller.refresh()
        backend.trigger_response = FakeResponse(200, {'data': {'importLogId': 42}})

        result = controller.submit_import(import_request())

        record = controller.records[0]
        assert record.id == 42
        assert record.status == 'pending'
        assert record.jobs_found == 0
        assert result.job_id == 'Unknown'

        stored_stats, stored_at = cache.get_stats()
        assert stored_stats.pending_jobs == 3
        assert stored_stats.total_jobs == 11
        assert stored_at is not None
        assert controller.stats.pending_jobs == 3

    def test_submission_sends_manual_trigger(self, backend, controller):
        """Test the request fields are sent to the backend."""
        controller.submit_import(import_request('LinkedIn', 'https://li.example/jobs', 'xml'))

        assert backend.trigger_calls == [('LinkedIn', 'https://li.example/jobs', 'xml')]

    def test_job_id_message(self, backend, controller):
        """Test the user notification carries the job id."""
        backend.trigger_response = FakeResponse(200, {'data': {'jobId': 'job-7'}})

        result = controller.submit_import(import_request())

        assert result.job_id == 'job-7'
        assert result.message == 'Import started successfully! Job ID: job-7'

    def test_job_id_top_level_fallbacks(self, backend, controller):
        """Test jobId and id at the top level are used as fallbacks."""
        backend.trigger_response = FakeResponse(200, {'jobId': 'top'})
        assert controller.submit_import(import_request()).job_id == 'top'

        backend.trigger_response = FakeResponse(200, {'id': 99})
        assert controller.submit_import(import_request()).job_id == 99

    def test_record_id_falls_back_to_clock(self, controller, clock):
        """Test the clock supplies an id when the backend gives none."""
        controller.submit_import(import_request())

        assert controller.records[0].id == clock.millis

    def test_first_submission_without_stats(self, controller, cache):
        """Test stats start at one pending job when none were shown."""
        controller.submit_import(import_request())

        stats, _ = cache.get_stats()
        assert stats.to_dict() == {
            'totalJobs': 1, 'pendingJobs': 1, 'completedJobs': 0, 'failedJobs': 0
        }

    def test_cached_records_capped(self, backend, controller, cache, clock):
        """Test cached records never exceed ten after many submissions."""
        for i in range(15):
            backend.trigger_response = FakeResponse(200, {'data': {'importLogId': i}})
            controller.submit_import(import_request(name=f'Feed {i}'))

        records = cache.get_records()
        assert len(records) == 10
        assert records[0]['id'] == 14
        assert len(controller.records) == 15

    def test_rejected_submission_mutates_nothing(self, backend, controller, store):
        """Test a non-success response leaves all state untouched."""
        controller.refresh()
        backend.trigger_response = FakeResponse(500, {'error': 'boom'})

        with pytest.raises(SubmissionError):
            controller.submit_import(import_request())

        assert controller.records == []
        assert controller.stats.pending_jobs == 0
        assert store.keys() == []
        assert controller.is_loading is False

    def test_transport_failure_is_submission_error(self, backend, controller, store, connection_error):
        """Test network failures surface as SubmissionError."""
        backend.error = connection_error

        with pytest.raises(SubmissionError):
            controller.submit_import(import_request())

        assert store.keys() == []

    def test_refresh_after_submission_keeps_optimistic_stats(self, backend, controller, clock):
        """Test a quick re-check keeps the optimistic pending count."""
        backend.logs_response = FakeResponse(
            200, logs_body([{'_id': 'old', 'status': 'completed'}])
        )
        backend.stats_response = FakeResponse(200, stats_body(total=10, pending=0))
        controller.refresh()
        controller.submit_import(import_request())

        clock.advance(2)
        controller.refresh()

        assert controller.stats.pending_jobs == 1
        assert controller.source == 'local-stats'


class TestRechecks:
    """Test delayed re-checks after a submission."""

    def test_three_rechecks_scheduled(self, backend, cache, clock):
        """Test a submission schedules one re-check per delay."""
        controller = DashboardController(
            backend, cache, clock=clock, recheck_delays=[60, 120, 180]
        )
        backend.trigger_response = FakeResponse(200, {'data': {'importLogId': 5}})

        controller.submit_import(import_request())

        assert controller.scheduler.pending(5) == 3
        controller.close()
        assert controller.scheduler.pending(5) == 0

    def test_default_delays(self, backend, cache):
        """Test default re-checks at 2, 5 and 10 seconds."""
        controller = DashboardController(backend, cache)

        assert controller.scheduler.delays == (2.0, 5.0, 10.0)


class TestClearCache:
    """Test DashboardController.clear_cache."""

    def test_clear_cache_removes_keys_and_refreshes_once(self, backend, controller, store):
        """Test all three keys are gone and exactly one refresh ran."""
        controller.submit_import(import_request())
        assert store.get(IMPORT_LOGS_KEY) is not None
        calls_before = backend.fetch_calls

        controller.clear_cache()

        assert store.get(IMPORT_LOGS_KEY) is None
        assert store.get(STATS_KEY) is None
        assert store.get(STATS_TIMESTAMP_KEY) is None
        assert backend.fetch_calls == calls_before + 1


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
