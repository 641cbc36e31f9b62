"""Tests for localised labels."""

import pytest

from src.position.messages import frequency_label, horizon_label, message
from src.simulation.params import HarvestFrequency


class TestHorizonLabel:
    @pytest.mark.parametrize(
        "months, label",
        [(1, "1 month"), (3, "3 months"), (12, "1 year"), (24, "2 years"), (18, "18 months")],
    )
    def test_english(self, months: int, label: str) -> None:
        assert horizon_label(months) == label

    def test_french(self) -> None:
        assert horizon_label(1, "fr") == "1 mois"
        assert horizon_label(12, "fr") == "1 an"

    def test_unknown_locale_falls_back_to_english(self) -> None:
        assert horizon_label(6, "de") == "6 months"


class TestFrequencyLabel:
    def test_fixed_frequencies(self) -> None:
        assert frequency_label(HarvestFrequency.WEEKLY) == "Weekly"
        assert frequency_label(HarvestFrequency.QUARTERLY, locale="fr") == "Trimestriel"

    def test_custom_days(self) -> None:
        assert frequency_label(HarvestFrequency.CUSTOM, 10) == "Every 10 days"
        assert frequency_label(HarvestFrequency.CUSTOM, 10, "fr") == "Tous les 10 jours"


def test_message_formatting() -> None:
    assert message("margin", drop="12.5") == "Margin before liquidation: 12.5%"
