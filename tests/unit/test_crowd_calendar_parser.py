"""
Unit Tests: Crowd Calendar Parser

Test Strategy:
- Single fragments for field extraction and level derivation
- Saved calendar page for mixed valid/malformed cells
- Malformed cells must be skipped and reported, never raised
"""

import re
from datetime import date, datetime, timezone

import pytest

from conftest import calendar_fragment
from parksync.collector.crowd_calendar_parser import CalendarPattern, CrowdCalendarParser
from parksync.collector.errors import ParseError


class TestCrowdCalendarParser:

    @pytest.fixture
    def parser(self):
        return CrowdCalendarParser()

    def test_single_fragment(self, parser):
        html = "<div title='Predicted wait time of 31 minutes on Jan 01'>31</div>"

        predictions = list(parser.parse(html, 2025, 'magic-kingdom'))

        assert len(predictions) == 1
        prediction = predictions[0]
        assert prediction.park_id == 'magic-kingdom'
        assert prediction.prediction_date == date(2025, 1, 1)
        assert prediction.wait_time_minutes == 31
        assert prediction.crowd_level == 6
        assert prediction.description == "Moderate"
        assert prediction.recommendation == "Moderate crowds. Plan your must-do attractions early."
        assert prediction.data_source == 'thrill_data'
        assert prediction.displayed_value == '31'

    def test_double_quotes_and_case(self, parser):
        html = '<div title="predicted WAIT time of 12 minutes on dec 24">12</div>'

        predictions = list(parser.parse(html, 2025, 'epcot'))

        assert [p.prediction_date for p in predictions] == [date(2025, 12, 24)]
        assert predictions[0].crowd_level == 2

    def test_unknown_month_is_skipped(self, parser):
        html = calendar_fragment(20, 'Xyz 05') + calendar_fragment(20, 'Mar 05')

        predictions = list(parser.parse(html, 2025, 'epcot'))

        assert [p.prediction_date for p in predictions] == [date(2025, 3, 5)]
        assert len(parser.skipped) == 1
        assert 'Xyz' in str(parser.skipped[0])
        assert 'Xyz 05' in parser.skipped[0].fragment

    def test_impossible_date_is_skipped(self, parser):
        html = calendar_fragment(22, 'Feb 30')

        assert list(parser.parse(html, 2025, 'epcot')) == []
        assert len(parser.skipped) == 1

    def test_leap_day_uses_caller_year(self, parser):
        html = calendar_fragment(22, 'Feb 29')

        assert [p.prediction_date for p in parser.parse(html, 2024, 'epcot')] == [date(2024, 2, 29)]
        assert list(parser.parse(html, 2025, 'epcot')) == []

    def test_missing_fields_are_skipped(self, parser):
        html = (
            "<div title='Predicted wait time of  minutes on Jan 02'>--</div>"
            "<div title='Predicted wait time of 18 minutes on Jan 03'></div>"
        )

        assert list(parser.parse(html, 2025, 'epcot')) == []
        assert len(parser.skipped) == 2

    def test_saved_calendar_page(self, parser, calendar_html):
        synced_at = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

        predictions = list(parser.parse(calendar_html, 2025, 'magic-kingdom', synced_at=synced_at))

        assert [p.prediction_date for p in predictions] == [
            date(2025, 1, 1), date(2025, 1, 2), date(2025, 1, 3),
            date(2025, 1, 4), date(2025, 1, 5), date(2025, 2, 28),
        ]
        assert [p.crowd_level for p in predictions] == [6, 4, 2, 8, 10, 4]
        assert all(p.synced_at == synced_at for p in predictions)
        assert len(parser.skipped) == 3

    def test_page_without_calendar_yields_nothing(self, parser):
        assert list(parser.parse('<html><body>Maintenance</body></html>', 2025, 'epcot')) == []
        assert parser.skipped == []

    def test_non_text_document_raises(self, parser):
        with pytest.raises(ParseError):
            list(parser.parse(None, 2025, 'epcot'))

    def test_parse_is_lazy(self, parser):
        html = calendar_fragment(20, 'Jan 01') + calendar_fragment(20, 'Jan 02')

        iterator = parser.parse(html, 2025, 'epcot')

        assert next(iterator).prediction_date == date(2025, 1, 1)

    def test_custom_pattern(self):
        pattern = CalendarPattern(
            version='data-attr-v2',
            regex=re.compile(r"""data-wait=(['"])(\d*) on ([A-Za-z]*) (\d*)\1>([^<]*)<"""),
        )
        parser = CrowdCalendarParser(pattern)

        predictions = list(parser.parse("<td data-wait='40 on Jul 04'>40</td>", 2025, 'epcot'))

        assert predictions[0].prediction_date == date(2025, 7, 4)
        assert predictions[0].crowd_level == 10
