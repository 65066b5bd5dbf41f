import asyncio

from crud.weekly_summary import compute_effectif_chain, compute_weekly_summary
from record_store import HEBDO_PATH, PRODUCTION_PATH, SETUP_PATH, STOCK_PATH
from utils.semaine import FEMELLE, MALE


def _production(vente_nbre, vente_poids=0):
    return {"reportNbre": 0, "reportPoids": 0, "venteNbre": vente_nbre, "ventePoids": vente_poids,
            "consoNbre": 1, "consoPoids": 3.5, "autreNbre": 0, "autrePoids": 0}


def test_failed_fetch_only_drops_its_own_dimension(fake_store, store):
    for batiment in ("B1", "B2"):
        for sex in (MALE, FEMELLE):
            fake_store.add(PRODUCTION_PATH, _production(10, 100), batiment, sex, "S3")
    fake_store.fail(PRODUCTION_PATH, 500, "B2", FEMELLE, "S3")

    summary = asyncio.run(compute_weekly_summary(store, 1, "L24", "S3", ["B1", "B2"]))

    assert summary.production.vente_nbre == 30
    assert summary.production.vente_poids == 300
    assert summary.production.conso_nbre == 3
    assert summary.production.total_nbre == 33


def test_malformed_payload_is_treated_as_missing(fake_store, store):
    fake_store.add(PRODUCTION_PATH, _production(10), "B1", MALE, "S3")
    fake_store.add(PRODUCTION_PATH, "{not json", "B1", FEMELLE, "S3")
    fake_store.add(STOCK_PATH, {"poidsVifProduitKg": "abc", "stockAliment": "12,5"}, "B1", MALE, "S3")

    summary = asyncio.run(compute_weekly_summary(store, 1, "L24", "S3", ["B1"]))

    assert summary.production.vente_nbre == 10
    assert summary.stock.poids_vif_produit_kg == 0


def test_malformed_daily_row_is_skipped(fake_store, store):
    fake_store.add(HEBDO_PATH, [
        {"recordDate": "2024-03-04", "mortaliteNbre": 2, "effectifDepart": 100},
        {"recordDate": "2024-03-05", "mortaliteNbre": -4},
        {"recordDate": "2024-03-06", "mortaliteNbre": "n/a"},
    ], "B1", MALE, "S1")

    summary = asyncio.run(compute_weekly_summary(store, 1, "L24", "S1", ["B1"]))

    assert [row.record_date for row in summary.aggregated_rows] == ["2024-03-04", "2024-03-06"]
    assert summary.weekly_totals.total_mortality == 2


def test_effectif_depart_is_derived_from_previous_week(fake_store, store):
    fake_store.add(SETUP_PATH, {"batiment": "B1", "sex": MALE, "effectifMisEnPlace": 50, "souche": "BUT 6"}, "B1", MALE)
    fake_store.add(HEBDO_PATH, [{"recordDate": "2024-03-04", "mortaliteNbre": 3, "effectifDepart": 50}], "B1", MALE, "S1")
    fake_store.add(HEBDO_PATH, [{"recordDate": "2024-03-11", "mortaliteNbre": 1}], "B1", MALE, "S2")

    summary = asyncio.run(compute_weekly_summary(store, 1, "L24", "S2", ["B1"]))

    assert summary.effectif_depart == 47
    assert summary.aggregated_rows[0].mortalite_pct == 2.13
    assert summary.stock.effectif_restant_fin_semaine == 46
    assert summary.setup.souche == "BUT 6"


def test_first_week_without_saved_effectif_uses_the_setup(fake_store, store):
    fake_store.add(SETUP_PATH, {"effectifMisEnPlace": 120}, "B1", FEMELLE)
    fake_store.add(HEBDO_PATH, [{"recordDate": "2024-03-04", "mortaliteNbre": 6}], "B1", FEMELLE, "S1")

    summary = asyncio.run(compute_weekly_summary(store, 1, "L24", "S1", ["B1"]))

    assert summary.effectif_depart == 120
    assert summary.weekly_totals.mortality_pct == 5.0


def test_summary_without_any_record(store):
    summary = asyncio.run(compute_weekly_summary(store, 1, "L24", "S1"))

    assert summary.batiments == ["B1", "B2", "B3", "B4"]
    assert summary.effectif_depart == 0
    assert summary.stock.stock_aliment is None
    assert summary.last_active_setup is None


def test_effectif_chain_for_one_dimension(fake_store, store):
    fake_store.add(SETUP_PATH, {"effectifMisEnPlace": 200}, "B2", MALE)
    fake_store.add(HEBDO_PATH, [{"recordDate": "2024-03-04", "mortaliteNbre": 4}], "B2", MALE, "S1")
    fake_store.add(PRODUCTION_PATH, {"venteNbre": 10}, "B2", MALE, "S1")
    fake_store.add(HEBDO_PATH, [{"recordDate": "2024-03-11", "mortaliteNbre": 1, "effectifDepart": 180}], "B2", MALE, "S2")

    chain = asyncio.run(compute_effectif_chain(store, 1, "L24", "B2", MALE, ["S1", "S2", "S3"]))

    assert [week.effectif_depart for week in chain.weeks] == [200, 180, 179]
    assert [week.explicit for week in chain.weeks] == [False, True, False]
    assert chain.weeks[0].effectif_restant_fin_semaine == 186


def test_authorization_header_is_forwarded(fake_store):
    store = fake_store.client("Bearer abc123")

    asyncio.run(compute_weekly_summary(store, 1, "L24", "S1", ["B1"]))

    assert fake_store.calls
    assert all(authorization == "Bearer abc123" for _, authorization in fake_store.calls)


def test_oversized_numbers_count_as_zero(fake_store, store):
    fake_store.add(HEBDO_PATH, '[{"recordDate": "2024-03-04", "mortaliteNbre": 1e400, "consoEauL": 1e400, "effectifDepart": 100},'
                               ' {"recordDate": "2024-03-05", "mortaliteNbre": 2}]', "B1", MALE, "S1")
    fake_store.add(PRODUCTION_PATH, {"venteNbre": "1e400", "consoNbre": 3}, "B1", MALE, "S1")

    summary = asyncio.run(compute_weekly_summary(store, 1, "L24", "S1", ["B1"]))

    assert [row.mortalite_nbre for row in summary.aggregated_rows] == [0, 2]
    assert summary.weekly_totals.total_water == 0
    assert summary.production.vente_nbre == 0
    assert summary.production.conso_nbre == 3
    assert summary.stock.effectif_restant_fin_semaine == 95


def test_effectif_depart_falls_back_on_previous_week_stock(fake_store, store):
    fake_store.add(STOCK_PATH, {"effectifRestantFinSemaine": 47}, "B1", MALE, "S1")
    fake_store.add(HEBDO_PATH, [{"recordDate": "2024-03-11", "mortaliteNbre": 1}], "B1", MALE, "S2")

    summary = asyncio.run(compute_weekly_summary(store, 1, "L24", "S2", ["B1"]))

    assert summary.effectif_depart == 47
    assert summary.stock.effectif_restant_fin_semaine == 46
