"""
Unit tests for the page cursor's break policy.
"""

import pytest

from inspection_report.reporting import theme
from inspection_report.reporting.cursor import PageState


class TestPageState:
    """Tests for derived page geometry."""

    def test_a4_geometry(self):
        state = PageState()

        assert state.page_width == pytest.approx(210, abs=0.1)
        assert state.page_height == pytest.approx(297, abs=0.1)
        assert state.content_width == pytest.approx(180, abs=0.1)
        assert state.content_bottom == pytest.approx(state.page_height - theme.FOOTER_RESERVE)


class TestEnsureSpace:
    """Tests for PageCursor.ensure_space."""

    def test_first_page_starts_below_header(self, cursor, header_calls):
        assert cursor.page_index == 1
        assert cursor.y == theme.CONTENT_TOP
        assert header_calls == [1]

    def test_fits_returns_current_offset(self, cursor, header_calls):
        cursor.advance(50)

        y = cursor.ensure_space(20)

        assert y == theme.CONTENT_TOP + 50
        assert cursor.page_index == 1
        assert header_calls == [1]

    def test_overflow_starts_new_page(self, cursor, header_calls):
        cursor.advance(cursor.state.remaining - 5)

        y = cursor.ensure_space(10)

        assert cursor.page_index == 2
        assert y == theme.CONTENT_TOP
        assert header_calls == [1, 2]

    def test_block_that_just_fits_does_not_break(self, cursor):
        cursor.advance(cursor.state.remaining - 10.5)

        cursor.ensure_space(10)

        assert cursor.page_index == 1

    def test_images_get_more_room_than_text(self, cursor):
        """Test the image threshold reaches into the footer reserve."""
        cursor.advance(cursor.state.remaining - 20)
        needed = 20 + theme.IMAGE_BREAK_TOLERANCE / 2

        cursor.ensure_image_space(needed)
        assert cursor.page_index == 1

        cursor.ensure_space(needed)
        assert cursor.page_index == 2

    def test_image_past_tolerance_breaks(self, cursor):
        cursor.advance(cursor.state.remaining - 20)

        cursor.ensure_image_space(20 + theme.IMAGE_BREAK_TOLERANCE + 1)

        assert cursor.page_index == 2


class TestPageLifecycle:
    """Tests for explicit page starts and closing."""

    def test_page_without_header(self, cursor, header_calls):
        cursor.new_page(with_header=False)

        assert cursor.page_index == 2
        assert cursor.y == theme.MARGIN
        assert header_calls == [1]

    def test_close_buffers_every_page(self, cursor, recording_canvas):
        cursor.new_page()
        cursor.new_page()

        total = cursor.close()

        assert total == 3
        assert recording_canvas.buffered_pages == 3
