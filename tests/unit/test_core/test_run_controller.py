"""
Unit tests for run state bookkeeping.
"""
import threading

import pytest

from harvester.core import RunController
from harvester.interfaces import RunNotInProgressError


class TestRunController:

    @pytest.mark.unit
    def test_try_start_claims_once(self, run_controller):
        assert run_controller.try_start() is True
        assert run_controller.try_start() is False
        assert run_controller.in_progress is True

    @pytest.mark.unit
    def test_stop_without_run(self, run_controller):
        with pytest.raises(RunNotInProgressError):
            run_controller.stop()
        assert run_controller.stop_requested is False

    @pytest.mark.unit
    def test_stop_then_finish_resets_flags(self, run_controller):
        run_controller.try_start()
        run_controller.stop()
        assert run_controller.stop_requested is True

        run_controller.finish_run()
        assert run_controller.in_progress is False
        assert run_controller.stop_requested is False
        assert run_controller.try_start() is True

    @pytest.mark.unit
    def test_concurrent_try_start_has_single_winner(self):
        controller = RunController()
        results = []
        barrier = threading.Barrier(8)

        def contender():
            barrier.wait()
            results.append(controller.try_start())

        threads = [threading.Thread(target=contender) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results.count(True) == 1
