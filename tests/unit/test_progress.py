from __future__ import annotations

from unittest.mock import MagicMock, patch

from invoice_importer.services.progress import ProgressTracker


def test_counts_without_tty():
    with patch("invoice_importer.services.progress.is_tty_enabled", return_value=False):
        with ProgressTracker(3) as tracker:
            tracker.advance()
            tracker.advance(skipped=True)
            tracker.advance()
    assert tracker.pbar is None
    assert (tracker.kept, tracker.skipped, tracker.processed) == (2, 1, 3)


def test_tqdm_bar_on_tty():
    bar = MagicMock()
    with patch("invoice_importer.services.progress.is_tty_enabled", return_value=True), \
            patch("invoice_importer.services.progress.tqdm", return_value=bar) as tqdm_cls:
        tracker = ProgressTracker(4, refresh_every=2)
        tracker.advance()
        tracker.advance(skipped=True)
        tracker.advance()
        tracker.close()
    assert tqdm_cls.call_args.kwargs["total"] == 4
    assert tqdm_cls.call_args.kwargs["unit"] == "row"
    assert bar.update.call_count == 3
    # once at row 2, once on close
    assert bar.set_postfix.call_count == 2
    bar.set_postfix.assert_called_with(kept=2, skipped=1)
    bar.close.assert_called_once()
    assert tracker.pbar is None


def test_close_twice_is_safe():
    with patch("invoice_importer.services.progress.is_tty_enabled", return_value=True), \
            patch("invoice_importer.services.progress.tqdm", return_value=MagicMock()):
        tracker = ProgressTracker(1)
        tracker.close()
        tracker.close()
    assert tracker.pbar is None
