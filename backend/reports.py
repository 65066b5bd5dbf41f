import logging
import os
from datetime import datetime
from io import BytesIO

import pandas as pd
import pytz
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from schemas.weekly_summary import WeeklySummary
from utils import format_fr_number, format_fr_pct, format_litres, record_to_dict

logger = logging.getLogger(__name__)

FARM_TIMEZONE = os.getenv("FARM_TIMEZONE", "Africa/Algiers")

SHEET_NAME = "Suivi hebdomadaire"

# Column headers of the daily table, as on the weekly tracking sheet
DAILY_COLUMNS = {
    "record_date": "DATE",
    "age_jour": "ÂGE (J)",
    "mortalite_nbre": "MORT. NBRE",
    "mortalite_pct": "MORT. %",
    "mortalite_cumul": "CUMUL MORT.",
    "mortalite_cumul_pct": "CUMUL %",
    "conso_eau_l": "CONSO EAU (L)",
}


def _generated_at() -> str:
    return datetime.now(pytz.timezone(FARM_TIMEZONE)).strftime("%d-%m-%Y %H:%M")


def _daily_frame(summary: WeeklySummary) -> pd.DataFrame:
    rows = []
    for row in summary.aggregated_rows:
        data = record_to_dict(row)
        rows.append({
            DAILY_COLUMNS["record_date"]: datetime.strptime(data["record_date"], "%Y-%m-%d").strftime("%d-%m-%Y"),
            DAILY_COLUMNS["age_jour"]: data["age_jour"] if data["age_jour"] is not None else "—",
            DAILY_COLUMNS["mortalite_nbre"]: data["mortalite_nbre"],
            DAILY_COLUMNS["mortalite_pct"]: format_fr_pct(data["mortalite_pct"]),
            DAILY_COLUMNS["mortalite_cumul"]: data["mortalite_cumul"],
            DAILY_COLUMNS["mortalite_cumul_pct"]: format_fr_pct(data["mortalite_cumul_pct"]),
            DAILY_COLUMNS["conso_eau_l"]: format_litres(data["conso_eau_l"]),
        })

    totals = summary.weekly_totals
    rows.append({
        DAILY_COLUMNS["record_date"]: "TOTAL",
        DAILY_COLUMNS["age_jour"]: "",
        DAILY_COLUMNS["mortalite_nbre"]: totals.total_mortality,
        DAILY_COLUMNS["mortalite_pct"]: format_fr_pct(totals.mortality_pct),
        DAILY_COLUMNS["mortalite_cumul"]: "",
        DAILY_COLUMNS["mortalite_cumul_pct"]: "",
        DAILY_COLUMNS["conso_eau_l"]: format_litres(totals.total_water),
    })
    return pd.DataFrame(rows, columns=list(DAILY_COLUMNS.values()))


def _overview_frame(summary: WeeklySummary) -> pd.DataFrame:
    production = summary.production
    stock = summary.stock
    consumption = summary.consumption
    performance = summary.performance
    active = summary.last_active_setup

    items = [
        ("Lot", summary.lot),
        ("Semaine", summary.semaine),
        ("Bâtiments", ", ".join(summary.batiments)),
        ("Date mise en place", summary.setup.date_mise_en_place or "—"),
        ("Souche", summary.setup.souche or "—"),
        ("Effectif mis en place", format_fr_number(summary.setup.effectif_mis_en_place)),
        ("Effectif départ", format_fr_number(summary.effectif_depart)),
        ("Report (nbre / kg)", f"{production.report_nbre} / {format_fr_number(production.report_poids)}"),
        ("Vente (nbre / kg)", f"{production.vente_nbre} / {format_fr_number(production.vente_poids)}"),
        ("Conso. employeur (nbre / kg)", f"{production.conso_nbre} / {format_fr_number(production.conso_poids)}"),
        ("Autre (nbre / kg)", f"{production.autre_nbre} / {format_fr_number(production.autre_poids)}"),
        ("Total (nbre / kg)", f"{production.total_nbre} / {format_fr_number(production.total_poids)}"),
        ("Effectif restant fin de semaine", format_fr_number(stock.effectif_restant_fin_semaine)),
        ("Poids vif produit (kg)", format_fr_number(stock.poids_vif_produit_kg)),
        ("Stock aliment (kg)", format_fr_number(stock.stock_aliment)),
        ("Dernier bâtiment actif", f"{active.batiment} {active.sex}" if active else "—"),
        ("Consommation aliment semaine (kg)", format_fr_number(consumption.consommation_aliment_semaine)),
        ("Cumul aliment consommé (kg)", format_fr_number(consumption.cumul_aliment_consomme)),
        ("Indice eau / aliment", format_fr_number(consumption.indice_eau_aliment)),
        ("Aliment (kg / jour)", format_fr_number(consumption.conso_aliment_kg_par_jour)),
        ("Viabilité", format_fr_pct(performance.viabilite)),
        ("Indice de consommation", format_fr_number(performance.indice_consommation)),
    ]
    return pd.DataFrame(items, columns=["INDICATEUR", "VALEUR"])


def write_weekly_summary_excel(summary: WeeklySummary) -> BytesIO:
    """
    Render a weekly summary as an .xlsx workbook held in memory.

    The sheet carries a title line, the daily mortality / water table with its
    TOTAL row, then the production, stock, consumption and performance figures.
    """
    daily_df = _daily_frame(summary)
    overview_df = _overview_frame(summary)

    title = f"SUIVI HEBDOMADAIRE - LOT {summary.lot} - {summary.semaine}"
    daily_start = 3
    overview_start = daily_start + len(daily_df) + 3

    excel_file = BytesIO()
    with pd.ExcelWriter(excel_file, engine="openpyxl") as writer:
        daily_df.to_excel(writer, index=False, sheet_name=SHEET_NAME, startrow=daily_start - 1)
        overview_df.to_excel(writer, index=False, sheet_name=SHEET_NAME, startrow=overview_start - 1)

        ws = writer.sheets[SHEET_NAME]

        yellow_fill = PatternFill(start_color="FFFF00", end_color="FFFF00", fill_type="solid")
        orange_red_fill = PatternFill(start_color="FF6600", end_color="FF6600", fill_type="solid")
        bold_font_black = Font(bold=True, color="000000")
        bold_font_white = Font(bold=True, color="FFFFFF")

        ws.cell(row=1, column=1, value=title).font = bold_font_black
        ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=len(DAILY_COLUMNS))
        ws.cell(row=1, column=1).alignment = Alignment(horizontal='center', vertical='center')
        ws.cell(row=1, column=1).fill = yellow_fill
        ws.cell(row=2, column=1, value=f"Généré le {_generated_at()}")

        for header_row, width in ((daily_start, len(DAILY_COLUMNS)), (overview_start, 2)):
            for col_idx in range(1, width + 1):
                cell = ws.cell(row=header_row, column=col_idx)
                cell.fill = orange_red_fill
                cell.font = bold_font_white

        total_row = daily_start + len(daily_df)
        for col_idx in range(1, len(DAILY_COLUMNS) + 1):
            cell = ws.cell(row=total_row, column=col_idx)
            cell.fill = yellow_fill
            cell.font = bold_font_black

        ws.column_dimensions[get_column_letter(1)].width = 34
        for col_idx in range(2, len(DAILY_COLUMNS) + 1):
            ws.column_dimensions[get_column_letter(col_idx)].width = 16

    excel_file.seek(0)
    logger.info(f"Weekly summary workbook built for lot {summary.lot} {summary.semaine} ({len(summary.aggregated_rows)} days)")
    return excel_file
