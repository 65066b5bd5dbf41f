import asyncio

from crud.charges import compute_charge_rollup
from utils.charges import NO_SEMAINE, cumul_for_semaine, week_blocks

LINES = [
    {"semaine": "S2", "qte": 10, "prix_per_unit": 2.5, "montant": 25, "male": 10, "femelle": 15},
    {"semaine": "S1", "qte": 5, "prix_per_unit": 2, "montant": "abc", "male": None, "femelle": 0},
    {"semaine": "S10", "qte": 1, "prix_per_unit": 3, "montant": 3, "male": 1, "femelle": 2},
    {"semaine": None, "qte": 0, "prix_per_unit": 0, "montant": 7, "male": 0, "femelle": 0},
]

VIDE_SANITAIRE = {"qte": 1, "prix_per_unit": 100, "montant": 100}


def test_week_blocks_cumul_starts_at_vide_sanitaire():
    blocks = week_blocks(LINES, VIDE_SANITAIRE)

    assert [block["semaine"] for block in blocks] == ["S1", "S2", "S10", NO_SEMAINE]
    assert [block["total"]["montant"] for block in blocks] == [0.0, 25.0, 3.0, 7.0]
    assert [block["cumul"]["montant"] for block in blocks] == [100.0, 125.0, 128.0, 135.0]
    # the fallow period has no male / femelle split
    assert blocks[0]["cumul"]["male"] == 0.0
    assert blocks[1]["cumul"]["femelle"] == 15.0


def test_week_blocks_without_vide_sanitaire_or_unassigned_lines():
    blocks = week_blocks(LINES[:2])

    assert [block["semaine"] for block in blocks] == ["S1", "S2"]
    assert blocks[-1]["cumul"]["qte"] == 15.0


def test_cumul_for_semaine_includes_previous_weeks():
    assert cumul_for_semaine(LINES, "S2", VIDE_SANITAIRE)["montant"] == 125.0
    assert cumul_for_semaine(LINES, "S10", VIDE_SANITAIRE)["qte"] == 17.0
    assert cumul_for_semaine(LINES, "S1")["montant"] == 0.0


def test_charge_rollup_from_record_store(fake_store, store):
    fake_store.add("/api/livraisons-gaz", [
        {"semaine": "S1", "qte": "4", "prixPerUnit": "1,5", "montant": "6", "male": 3, "femelle": 3},
        {"semaine": "S2", "qte": 2, "prixPerUnit": 1.5, "montant": 3, "male": 1, "femelle": 2},
    ])
    fake_store.add("/api/vide-sanitaire-livraisons-gaz", {"qte": 1, "prixPerUnit": 10, "montant": 10})

    rollup = asyncio.run(compute_charge_rollup(store, "livraisons-gaz", 1, "L24", "S2"))

    assert [block.semaine for block in rollup.blocks] == ["S1", "S2"]
    assert rollup.blocks[0].total.prix == 1.5
    assert rollup.blocks[1].cumul.montant == 19.0
    assert rollup.semaine_total.montant == 3.0
    assert rollup.semaine_cumul.montant == 19.0
    assert rollup.vide_sanitaire.montant == 10.0


def test_charge_rollup_when_sheet_is_unavailable(fake_store, store):
    fake_store.fail("/api/electricite", 503)

    rollup = asyncio.run(compute_charge_rollup(store, "electricite", 1, "L24"))

    assert rollup.blocks == []
    assert rollup.vide_sanitaire is None
    assert rollup.semaine_total is None
