"""Localised warning and label text for simulation results."""

from __future__ import annotations

from src.simulation.params import HarvestFrequency

_MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "leverage_near_max": "Leverage very close to the theoretical maximum ({current}x / {maximum}x)",
        "leverage_near_max_detail": "Any increase in utilization could trigger a liquidation",
        "critical": "DANGER: Health Factor < 1.1 - liquidation imminent!",
        "critical_detail": "Price can fall only {drop}% before liquidation",
        "high": "High risk - low Health Factor",
        "medium": "Moderate risk - watch price movements",
        "low": "Position relatively safe",
        "very_low": "Very conservative position",
        "margin": "Margin before liquidation: {drop}%",
    },
    "fr": {
        "leverage_near_max": "Leverage très proche du max théorique ({current}x / {maximum}x)",
        "leverage_near_max_detail": "Toute augmentation de l'utilisation pourrait causer une liquidation",
        "critical": "DANGER: Health Factor < 1.1 - Liquidation imminente!",
        "critical_detail": "Le prix peut chuter de seulement {drop}% avant liquidation",
        "high": "Risque élevé - Health Factor bas",
        "medium": "Risque modéré - Surveillez les variations de prix",
        "low": "Position relativement sûre",
        "very_low": "Position très conservatrice",
        "margin": "Marge avant liquidation: {drop}%",
    },
}

_FREQUENCY_LABELS: dict[str, dict[HarvestFrequency, str]] = {
    "en": {
        HarvestFrequency.DAILY: "Daily",
        HarvestFrequency.WEEKLY: "Weekly",
        HarvestFrequency.MONTHLY: "Monthly",
        HarvestFrequency.QUARTERLY: "Quarterly",
        HarvestFrequency.CUSTOM: "Every {days} days",
    },
    "fr": {
        HarvestFrequency.DAILY: "Quotidien",
        HarvestFrequency.WEEKLY: "Hebdomadaire",
        HarvestFrequency.MONTHLY: "Mensuel",
        HarvestFrequency.QUARTERLY: "Trimestriel",
        HarvestFrequency.CUSTOM: "Tous les {days} jours",
    },
}

_HORIZON_LABELS: dict[str, tuple[str, str, str, str]] = {
    # (one month, n months, one year, n years)
    "en": ("1 month", "{n} months", "1 year", "{n} years"),
    "fr": ("1 mois", "{n} mois", "1 an", "{n} ans"),
}


def _locale(locale: str) -> str:
    return locale if locale in _MESSAGES else "en"


def message(key: str, locale: str = "en", **values: object) -> str:
    return _MESSAGES[_locale(locale)][key].format(**values)


def frequency_label(
    frequency: HarvestFrequency, custom_days: int | None = None, locale: str = "en"
) -> str:
    template = _FREQUENCY_LABELS[_locale(locale)][frequency]
    return template.format(days=custom_days)


def horizon_label(months: int, locale: str = "en") -> str:
    """Human label for a projection horizon, e.g. 3 -> "3 months", 24 -> "2 years"."""
    one_month, n_months, one_year, n_years = _HORIZON_LABELS[_locale(locale)]
    if months % 12 == 0:
        years = months // 12
        return one_year if years == 1 else n_years.format(n=years)
    return one_month if months == 1 else n_months.format(n=months)
