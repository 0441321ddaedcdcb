"""Streamlit widgets for browsing and editing hospitals."""
from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional

import streamlit as st

from hospital_core.data.snapshot import ID_FIELD, YEAR_FIELD, hospitals_to_frame, sort_hospitals
from hospital_core.errors import ErrorContext, error_boundary
from hospital_core.services.hospital_service import HospitalBinding

PRIMARY_COLOR = "#2563eb"
SUBTLE_TEXT = "#64748b"

# Fields offered on the add form; stored records may carry any others
FORM_FIELDS = ("name", "address", "capacity", "phone")

INT_PATTERN = re.compile(r"-?(0|[1-9]\d*)")
FLOAT_PATTERN = re.compile(r"-?(0|[1-9]\d*)\.\d+")


def header(title: str, subtitle: str, icon: str = "🏥"):
    st.markdown(f"""
        <div style="display:flex;gap:1rem;align-items:center;margin-bottom:1rem;">
            <div style="font-size:2.6rem;">{icon}</div>
            <div>
                <h1 style="margin:0;font-size:2.1rem;color:{PRIMARY_COLOR};">{title}</h1>
                <p style="margin:.3rem 0 0 0;color:{SUBTLE_TEXT};">{subtitle}</p>
            </div>
        </div>
    """, unsafe_allow_html=True)


def coerce_value(raw: Any) -> Any:
    """Turn plain decimal form text into int/float, anything else stays text."""
    if not isinstance(raw, str):
        return raw
    text = raw.strip()
    # leading zeros (phone numbers, codes) stay strings
    if INT_PATTERN.fullmatch(text):
        return int(text)
    if FLOAT_PATTERN.fullmatch(text):
        return float(text)
    return text


def build_fields(
    values: Mapping[str, Any],
    original: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Build a record field set from form values.

    Empty entries are dropped and ``id``/``YEAR`` never end up in the
    stored fields, since both live in the record's path. Fields whose text
    still matches ``str(original[key])`` keep the original value and type;
    only edited text is coerced.
    """
    original = original or {}
    fields = {}
    for key, raw in values.items():
        if key in (ID_FIELD, YEAR_FIELD):
            continue
        if key in original and raw == str(original[key]):
            value = original[key]
        else:
            value = coerce_value(raw)
        if value == "" or value is None:
            continue
        fields[key] = value
    return fields


def render_status(binding: HospitalBinding):
    """Loading indicator and the binding's last error message."""
    if binding.loading.get():
        st.info("⏳ Loading…")
    message = binding.error.get()
    if message:
        st.error(message)


def render_year_selector(binding: HospitalBinding) -> str:
    years = binding.available_years()
    current = binding.selected_year.get()
    if current not in years:
        years = sorted(set(years) | {current})

    year = st.selectbox("Year", years, index=years.index(current), key="year_selector")
    if year != current:
        binding.selected_year.set(year)
    # survives a remount of the binding
    st.session_state["selected_year"] = year
    return year


@error_boundary(error_message="Could not display the hospital table")
def render_hospital_table(binding: HospitalBinding, year: Optional[str] = None):
    records = sort_hospitals(binding.hospitals_for_year(year))
    if not records:
        st.caption("No hospitals recorded for this year.")
        return

    # one read of the list; the listener may replace it at any time
    df = hospitals_to_frame(records)
    st.dataframe(df, use_container_width=True, hide_index=True)
    st.caption(f"{len(records)} hospital(s)")


def render_add_form(binding: HospitalBinding):
    with st.form("add_hospital", clear_on_submit=True):
        st.subheader("➕ Add hospital")
        year = st.text_input(YEAR_FIELD, value=binding.selected_year.get())
        values = {name: st.text_input(name.capitalize()) for name in FORM_FIELDS}
        submitted = st.form_submit_button("Add")

    if submitted:
        with ErrorContext("Adding hospital", show_success=True, success_message="Hospital added"):
            binding.add_hospital({YEAR_FIELD: year.strip(), **build_fields(values)})


def _label(record: Mapping[str, Any]) -> str:
    return f"{record.get('name', '(unnamed)')} · {record[ID_FIELD]}"


def render_edit_form(binding: HospitalBinding, records: List[Dict[str, Any]]):
    if not records:
        return

    st.subheader("✏️ Edit or delete")
    by_id = {r[ID_FIELD]: r for r in records}
    hospital_id = st.selectbox(
        "Hospital",
        list(by_id),
        format_func=lambda hid: _label(by_id[hid]),
        key="edit_selector",
    )
    record = by_id[hospital_id]
    editable = [k for k in record if k not in (ID_FIELD, YEAR_FIELD)]

    with st.form(f"edit_{hospital_id}"):
        values = {k: st.text_input(k, value=str(record.get(k, ""))) for k in editable}
        extra_key = st.text_input("New field name (optional)")
        extra_value = st.text_input("New field value")
        col_save, col_delete = st.columns(2)
        save = col_save.form_submit_button("Save")
        delete = col_delete.form_submit_button("Delete", type="secondary")

    if save:
        if extra_key.strip():
            values[extra_key.strip()] = extra_value
        with ErrorContext("Updating hospital", show_success=True, success_message="Hospital saved"):
            # wholesale replace: blanked fields are removed
            binding.update_hospital(hospital_id, record[YEAR_FIELD], build_fields(values, original=record))
    elif delete:
        with ErrorContext("Deleting hospital", show_success=True, success_message="Hospital deleted"):
            binding.delete_hospital(hospital_id, record[YEAR_FIELD])
