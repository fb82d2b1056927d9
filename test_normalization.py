"""Pure helpers: header matching, risk levels, confidence, DB readiness."""

import pytest
from sqlalchemy.exc import OperationalError

from umutisafe.database import wait_for_database
from umutisafe.services.medicine_import import parse_medicine_csv
from umutisafe.core.exceptions import BadRequestException
from umutisafe.utils.normalization import (
    clamp_confidence,
    explicit_risk_level,
    infer_risk_level,
    initials,
    missing_required_columns,
    normalize_header,
    normalize_risk_level,
    resolve_columns,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("  Registration N°. ", "registration n"),
        ("GÉNÉRIC_NAME", "generic name"),
        ("Dosage-Form", "dosage form"),
        (None, ""),
    ],
)
def test_normalize_header(raw, expected):
    assert normalize_header(raw) == expected


def test_resolve_columns_prefers_first_matching_header():
    resolved = resolve_columns(["Brand", "Trade Name", "Generic", "Reg No", "Dose", "Form", "Country"])

    assert resolved["brand_name"] == "Brand"
    assert resolved["generic_name"] == "Generic"
    assert resolved["registration_number"] == "Reg No"
    assert resolved["manufacturer_country"] == "Country"
    assert missing_required_columns(resolved) == []


def test_missing_required_columns_keeps_declared_order():
    assert missing_required_columns({"brand_name": "Brand"}) == [
        "registration_number",
        "generic_name",
        "strength",
        "dosage_form",
    ]


@pytest.mark.parametrize("raw, expected", [("low", "LOW"), (" Med ", "MEDIUM"), ("HIGH", "HIGH"), ("", None)])
def test_normalize_risk_level(raw, expected):
    assert normalize_risk_level(raw) == expected


def test_normalize_risk_level_rejects_unknown():
    with pytest.raises(ValueError):
        normalize_risk_level("critical")


def test_explicit_risk_level_needs_one_unambiguous_level():
    assert explicit_risk_level("High risk") == "HIGH"
    assert explicit_risk_level("low to high") is None
    assert explicit_risk_level("n/a") is None


@pytest.mark.parametrize(
    "explicit, category, expected",
    [
        ("Low", "Opioid", "LOW"),
        (None, "Narcotic analgesic", "HIGH"),
        ("", "Schedule II", "HIGH"),
        (None, "Antibiotic", "MEDIUM"),
        (None, None, "MEDIUM"),
    ],
)
def test_infer_risk_level(explicit, category, expected):
    assert infer_risk_level(explicit, category) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [(1.7, 1.0), (-0.2, 0.0), (0.42, 0.42), ("0.5", 0.5), (None, None), (float("nan"), None), ("abc", None)],
)
def test_clamp_confidence(raw, expected):
    assert clamp_confidence(raw) == expected


def test_initials():
    assert initials("jean  baptiste niyonzima") == "JBN"


def test_parse_medicine_csv_strips_blank_cells():
    rows = parse_medicine_csv(
        "Registration Number,Brand Name,Generic Name,Strength,Dosage Form,Notes\n"
        "RW-1,  ,Paracetamol , 500mg,Tablet,ignored\n"
    )

    assert rows == [
        {
            "registration_number": "RW-1",
            "brand_name": None,
            "generic_name": "Paracetamol",
            "strength": "500mg",
            "dosage_form": "Tablet",
        }
    ]


def test_parse_medicine_csv_rejects_empty_file():
    with pytest.raises(BadRequestException):
        parse_medicine_csv("")


class FlakyEngine:
    """Engine stand-in whose first `failures` connections fail."""

    def __init__(self, failures):
        self.failures = failures
        self.attempts = 0

    def connect(self):
        self.attempts += 1
        if self.attempts <= self.failures:
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))
        return _Connection()


class _Connection:
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, statement):
        return None


def test_wait_for_database_backs_off_then_succeeds():
    delays = []
    engine = FlakyEngine(failures=2)

    wait_for_database(engine, retries=5, backoff_seconds=0.5, sleep=delays.append)

    assert engine.attempts == 3
    assert delays == [0.5, 1.0]


def test_wait_for_database_gives_up():
    delays = []
    engine = FlakyEngine(failures=10)

    with pytest.raises(OperationalError):
        wait_for_database(engine, retries=3, backoff_seconds=1, sleep=delays.append)

    assert engine.attempts == 3
    assert delays == [1, 2]
