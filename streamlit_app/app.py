from __future__ import annotations

import json

import altair as alt
import streamlit as st

from market_kpi.config import get_settings
from market_kpi.export.package_client import (
    PackageExportError,
    dataset_upload_files,
    request_package,
)
from market_kpi.filters import with_segment_type
from market_kpi.metrics.calculator import compute
from market_kpi.models import Dataset, FilterState
from market_kpi.present.cards import build_cards, headline
from market_kpi.selection.selector import resolve
from market_kpi.store.frame import records_table, yearly_totals
from market_kpi.store.load import DatasetLoadError, load_dataset, parse_dataset

# =====================================================
# Page config
# =====================================================
st.set_page_config(page_title="Market KPI Dashboard", layout="wide")
st.title("📊 Market KPI Dashboard")

settings = get_settings()

# =====================================================
# Dataset (uploaded file wins over KPI_DATASET_PATH)
# =====================================================
uploaded = st.sidebar.file_uploader("Dataset JSON", type=["json"])

dataset: Dataset | None = None
try:
    if uploaded is not None:
        dataset = parse_dataset(json.loads(uploaded.getvalue()))
    elif settings.dataset_path is not None:
        dataset = load_dataset(settings.dataset_path)
except (DatasetLoadError, ValueError) as exc:
    st.error(f"Unable to load dataset: {exc}")
    st.stop()

if dataset is None:
    st.info("Upload a dataset or set `KPI_DATASET_PATH` in `.env`.")
    st.stop()

# =====================================================
# Filters
# =====================================================
st.sidebar.header("Filters")

data_type = st.sidebar.radio("Data type", ["value", "volume"], horizontal=True)
segment_types = list(dataset.dimensions.segments)
segment_type = st.sidebar.selectbox("Segment type", segment_types) if segment_types else None
geographies = st.sidebar.multiselect("Geographies", dataset.dimensions.geographies)
level_choice = st.sidebar.selectbox("Aggregation level", ["Best available", 1, 2, 3, 4])
currency = st.sidebar.text_input("Currency override", value="").strip() or None

flt = with_segment_type(
    FilterState(
        geographies=frozenset(geographies),
        segment_type=segment_type,
        data_type=data_type,
        aggregation_level=None if level_choice == "Best available" else int(level_choice),
    ),
    dataset,
)

selection = resolve(dataset.matrix(flt.data_type), flt)
kpi = compute(
    selection.records,
    dataset.metadata,
    flt,
    currency=currency,
    geography_dropped=selection.geography_dropped,
    settings=settings,
)

# =====================================================
# SECTION 0 — KPI CARDS (nothing at all when no data)
# =====================================================
cards = build_cards(kpi)
if kpi is not None and cards:
    st.caption(headline(kpi))
    columns = st.columns(len(cards))
    for column, card in zip(columns, cards):
        with column:
            st.metric(card.title, card.value, delta=card.caption, delta_color="off")

    st.divider()

    # =====================================================
    # SECTION 1 — SELECTED TOTALS
    # =====================================================
    st.header("📈 Selected Totals by Year")

    df_totals = yearly_totals(selection.records)
    if kpi.display_divisor != 1.0:
        df_totals["total"] = df_totals["total"] / kpi.display_divisor

    chart = (
        alt.Chart(df_totals)
        .mark_line(point=True)
        .encode(
            x=alt.X("year:O", title="Year"),
            y=alt.Y("total:Q", title=f"{kpi.data_type_label} ({kpi.unit})"),
            tooltip=["year:O", "total:Q"],
        )
        .properties(height=320)
    )
    st.altair_chart(chart, width="stretch")

    with st.expander(f"Records used ({len(selection.records)}, tier: {selection.tier})"):
        st.dataframe(records_table(selection.records), width="stretch")

# =====================================================
# SECTION 2 — DOWNLOAD PACKAGE
# =====================================================
st.divider()
st.header("📦 Ready to Deploy?")
st.caption("Generate and download your deployment package")

project_name = st.text_input("Project name", value="market-dashboard")

if st.button("Download Package", disabled=not project_name.strip()):
    value_file, volume_file = dataset_upload_files(dataset)
    try:
        with st.spinner("Generating..."):
            archive = request_package(value_file, volume_file, project_name, settings=settings)
    except PackageExportError as exc:
        st.error(str(exc))
    else:
        st.download_button(
            "Save archive",
            data=archive,
            file_name=f"{project_name.strip()}.zip",
            mime="application/zip",
        )
        st.success("Package generated.")

# =====================================================
# Footer
# =====================================================
st.caption(
    f"Records in matrix: {len(dataset.matrix(flt.data_type))} • "
    f"Years: {', '.join(str(y) for y in dataset.metadata.years) or 'n/a'}"
)
