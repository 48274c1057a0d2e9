"""Unit tests for AutosaveService."""

import time
import unittest
from unittest.mock import Mock

from tests.conftest import SAMPLE_TEXT
from textmarks.models.state import DocumentState
from textmarks.services.autosave import AutosaveService, autosave_marks
from textmarks.services.persistence import MemoryStateStore
from textmarks.services.store import MarkStore


def wait_for(predicate, timeout=1.0):
    """Poll ``predicate`` until it is true or ``timeout`` seconds pass."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class TestAutosaveService(unittest.TestCase):
    """Test cases for AutosaveService."""

    def test_debounce_single_call(self):
        """Test that a single trigger call results in one save."""
        save_callback = Mock()
        service = AutosaveService(save_callback, debounce_ms=50)

        service.trigger()

        self.assertTrue(wait_for(lambda: save_callback.call_count == 1))
        time.sleep(0.1)
        save_callback.assert_called_once()
        self.assertFalse(service.pending)

    def test_debounce_multiple_rapid_calls(self):
        """Test that multiple rapid trigger calls are debounced into a single save."""
        save_callback = Mock()
        service = AutosaveService(save_callback, debounce_ms=200)

        for _ in range(4):
            service.trigger()
            time.sleep(0.01)
        self.assertTrue(service.pending)
        save_callback.assert_not_called()

        self.assertTrue(wait_for(lambda: save_callback.call_count == 1))
        time.sleep(0.25)
        save_callback.assert_called_once()

    def test_debounce_separated_calls(self):
        """Test that triggers separated by the debounce period save twice."""
        save_callback = Mock()
        service = AutosaveService(save_callback, debounce_ms=20)

        service.trigger()
        self.assertTrue(wait_for(lambda: save_callback.call_count == 1))
        service.trigger()
        self.assertTrue(wait_for(lambda: save_callback.call_count == 2))

    def test_save_now_bypasses_debounce(self):
        """Test that save_now saves immediately."""
        save_callback = Mock()
        service = AutosaveService(save_callback, debounce_ms=1000)

        service.save_now()

        save_callback.assert_called_once()

    def test_save_now_cancels_pending_trigger(self):
        """Test that save_now cancels a pending debounced save."""
        save_callback = Mock()
        service = AutosaveService(save_callback, debounce_ms=50)

        service.trigger()
        service.save_now()
        time.sleep(0.15)

        save_callback.assert_called_once()

    def test_save_now_propagates_errors(self):
        """Test that an explicit save reports failures to the caller."""
        service = AutosaveService(Mock(side_effect=OSError("disk full")))
        with self.assertRaises(OSError):
            service.save_now()

    def test_cancel_pending_trigger(self):
        """Test that cancel drops a pending save."""
        save_callback = Mock()
        service = AutosaveService(save_callback, debounce_ms=50)

        service.trigger()
        service.cancel()
        time.sleep(0.15)

        save_callback.assert_not_called()
        self.assertFalse(service.pending)

    def test_flush_saves_only_when_pending(self):
        """Test that flush saves a pending change and is otherwise a no-op."""
        save_callback = Mock()
        service = AutosaveService(save_callback, debounce_ms=1000)

        service.flush()
        save_callback.assert_not_called()

        service.trigger()
        service.flush()
        save_callback.assert_called_once()
        self.assertFalse(service.pending)

    def test_error_in_callback_doesnt_break_service(self):
        """Test that a failing timed save is logged and later saves still run."""
        save_callback = Mock(side_effect=[RuntimeError("boom"), None])
        service = AutosaveService(save_callback, debounce_ms=20)

        with self.assertLogs("textmarks.services.autosave", level="ERROR") as logs:
            service.trigger()
            self.assertTrue(wait_for(lambda: save_callback.call_count == 1))
            self.assertTrue(wait_for(lambda: not service.pending))
        self.assertIn("Autosave failed", logs.output[0])

        service.trigger()
        self.assertTrue(wait_for(lambda: save_callback.call_count == 2))

    def test_default_debounce(self):
        service = AutosaveService(Mock())
        self.assertEqual(service.debounce_ms, 0.5)


class TestAutosaveMarks(unittest.TestCase):
    """Test cases for autosave_marks()."""

    def test_store_changes_are_saved(self):
        """Test that mark changes reach the state store."""
        state = DocumentState(text=SAMPLE_TEXT)
        state_store = MemoryStateStore()
        store = MarkStore()
        service = autosave_marks(store, state_store, state, debounce_ms=1000)

        mark = store.create(SAMPLE_TEXT, "t1", 0, 2)
        self.assertEqual(state.marks, [mark])
        self.assertEqual(state_store.save_count, 0)

        service.flush()
        self.assertEqual(state_store.save_count, 1)
        self.assertEqual(state_store.load().marks, [mark])

    def test_burst_of_changes_saves_once(self):
        """Test that several quick changes are written in a single save."""
        state = DocumentState(text=SAMPLE_TEXT)
        state_store = MemoryStateStore()
        store = MarkStore()
        autosave_marks(store, state_store, state, debounce_ms=50)

        store.create(SAMPLE_TEXT, "t1", 0, 2)
        store.create(SAMPLE_TEXT, "t1", 3, 6)
        store.create(SAMPLE_TEXT, "t2", 7, 16)

        self.assertTrue(wait_for(lambda: state_store.save_count == 1))
        time.sleep(0.1)
        self.assertEqual(state_store.save_count, 1)
        self.assertEqual(len(state_store.load().marks), 3)
