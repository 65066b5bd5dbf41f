from datetime import date

import pytest
from pydantic import ValidationError

from schemas.suivi_hebdo import SuiviTechniqueHebdo
from schemas.suivi_production import SuiviProductionHebdo
from schemas.suivi_setup import SuiviTechniqueSetup
from utils.formatting import format_fr_number, format_fr_pct, format_litres
from utils.numbers import is_positive_number, to_int, to_number, to_optional_number


def test_daily_record_reads_camel_case_payload():
    record = SuiviTechniqueHebdo.model_validate({
        "recordDate": "2024-03-04",
        "ageJour": "15",
        "mortaliteNbre": "3",
        "consoEauL": "120,5",
        "effectifDepart": 500,
        "observation": "RAS",
    })

    assert record.record_date == date(2024, 3, 4)
    assert record.age_jour == 15
    assert record.mortalite_nbre == 3
    assert record.conso_eau_l == 120.5
    assert record.effectif_depart == 500


def test_malformed_numbers_become_zero():
    record = SuiviTechniqueHebdo.model_validate({"recordDate": "2024-03-04", "mortaliteNbre": "abc", "consoEauL": None})

    assert record.mortalite_nbre == 0
    assert record.conso_eau_l == 0.0
    assert record.effectif_depart is None


def test_negative_effectif_is_rejected():
    with pytest.raises(ValidationError):
        SuiviTechniqueHebdo.model_validate({"recordDate": "2024-03-04", "effectifDepart": -1})


def test_production_totals():
    production = SuiviProductionHebdo.model_validate({
        "reportNbre": 100, "reportPoids": "850,5",
        "venteNbre": 20, "ventePoids": 180,
        "consoNbre": "x", "autreNbre": 2, "autrePoids": 15,
    })

    assert production.conso_nbre == 0
    assert production.total_nbre == 122
    assert production.total_poids == 1045.5
    assert production.sorties_nbre == 22


def test_setup_accepts_numeric_batiment():
    setup = SuiviTechniqueSetup.model_validate({"batiment": 3, "effectifMisEnPlace": "1500"})

    assert setup.batiment == "3"
    assert setup.effectif_mis_en_place == 1500


def test_number_coercion():
    assert to_number("12,75") == 12.75
    assert to_number(float("nan")) == 0.0
    assert to_number(True) == 0.0
    assert to_optional_number("  ") is None
    assert to_int("7.9") == 7
    assert is_positive_number("5") is True
    assert is_positive_number(0) is False


def test_french_formatting():
    assert format_fr_number(12) == "12"
    assert format_fr_number(12.346) == "12,35"
    assert format_fr_number(None) == "—"
    assert format_fr_pct(2.5) == "2,50 %"
    assert format_fr_pct(None) == "—"
    assert format_litres(120.26) == "120,3"


def test_non_finite_numbers_become_zero():
    assert to_number(float("inf")) == 0.0
    assert to_number("1e400") == 0.0
    assert to_number(10 ** 400) == 0.0
    assert to_int("1e400") == 0
    assert is_positive_number(float("inf")) is False

    record = SuiviTechniqueHebdo.model_validate({"recordDate": "2024-03-04", "mortaliteNbre": "1e400", "consoEauL": float("inf")})
    assert record.mortalite_nbre == 0
    assert record.conso_eau_l == 0.0

    production = SuiviProductionHebdo.model_validate({"venteNbre": "1e400", "ventePoids": float("inf")})
    assert production.vente_nbre == 0
    assert production.total_poids == 0.0
