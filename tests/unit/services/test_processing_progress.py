"""Unit tests for the processing progress store."""

from concurrent.futures import ThreadPoolExecutor
from uuid import uuid4

from app.services.revision.processing_progress import ProcessingProgress, ProgressInfo


class TestProcessingProgress:
    """Set, get and clear progress per script."""

    def test_set_get_clear(self):
        """Test the basic lifecycle of an entry."""
        store = ProcessingProgress()
        script_id = uuid4()

        assert store.get(script_id) is None
        store.set(script_id, 30, "Parsing script")
        assert store.get(script_id) == ProgressInfo(percent=30, step="Parsing script")
        assert store.get(str(script_id)) == ProgressInfo(percent=30, step="Parsing script")

        store.clear(script_id)
        assert store.get(script_id) is None

    def test_clear_unknown_is_noop(self):
        """Test clearing a script that never reported progress."""
        ProcessingProgress().clear(uuid4())

    def test_concurrent_writers(self):
        """Test that parallel updates for different scripts all land."""
        store = ProcessingProgress()
        ids = [uuid4() for _ in range(50)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda sid: store.set(sid, 100, "Complete"), ids))

        assert all(store.get(sid).percent == 100 for sid in ids)
