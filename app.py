import streamlit as st
import json
import logging
from typing import List

from compositor import render_layout
from drawerlayout.catalog import default_catalog
from drawerlayout.config import LOG_LEVEL, MAX_BIN_DIM, MAX_DRAWER_DIM, MIN_BIN_DIM, MIN_DRAWER_DIM, SHARE_PARAM
from drawerlayout.logging_config import setup_logging
from drawerlayout.persistence import LocalLayoutStore, encode_share_param, import_upload, load_initial_state
from drawerlayout.session import LayoutSession, placement_edits
from drawerlayout.state import PlacementResult, PlacementStatus, SuggestMode, SuggestStatus
from drawerlayout.summary import invalid_placement_ids, placement_groups, space_used_percent
from drawerlayout.utils.colors import DEFAULT_BIN_COLOR, PRESET_COLORS, normalize_hex_color


def _session() -> LayoutSession:
    if "layout_session" not in st.session_state:
        setup_logging(getattr(logging, LOG_LEVEL, logging.INFO))
        catalog = default_catalog()
        store = LocalLayoutStore()
        initial = load_initial_state(catalog, store=store, share_param=st.query_params.get(SHARE_PARAM))
        st.session_state["layout_store"] = store
        st.session_state["layout_session"] = LayoutSession(catalog, initial)
    return st.session_state["layout_session"]


def _report(action: str, result: PlacementResult) -> None:
    if result.status is PlacementStatus.BLOCKED:
        st.sidebar.warning(f"{action}: blocked.")
    elif result.status is PlacementStatus.AUTOFIT:
        st.sidebar.info(f"{action}: moved to nearest free spot ({result.position.x:g}, {result.position.y:g}).")


st.set_page_config(page_title="Drawer Layout", layout="wide")
session = _session()
store: LocalLayoutStore = st.session_state["layout_store"]
catalog = session.catalog

# Drawer ---------------------------------------------------------------------
st.sidebar.header("Drawer")
state = session.state
title = st.sidebar.text_input("Layout title", value=state.layout_title, max_chars=session.limits.max_title_length)
if title != state.layout_title:
    session.set_layout_title(title)

col_w, col_l = st.sidebar.columns(2)
with col_w:
    drawer_w = st.number_input("Width (in)", min_value=MIN_DRAWER_DIM, max_value=MAX_DRAWER_DIM,
                               value=float(state.drawer_width), step=0.25)
with col_l:
    drawer_l = st.number_input("Length (in)", min_value=MIN_DRAWER_DIM, max_value=MAX_DRAWER_DIM,
                               value=float(state.drawer_length), step=0.25)
if (drawer_w, drawer_l) != (state.drawer_width, state.drawer_length):
    _report("Resize drawer", session.set_drawer_size(drawer_w, drawer_l))

# Bins -----------------------------------------------------------------------
st.sidebar.header("Add bin")
bin_names = {spec.id: f"{spec.name} ({spec.category})" for spec in catalog}
bin_id = st.sidebar.selectbox("Bin", options=list(bin_names), format_func=bin_names.get)
col_x, col_y = st.sidebar.columns(2)
with col_x:
    add_x = st.number_input("X", min_value=0.0, value=0.0, step=0.5, key="add_x")
with col_y:
    add_y = st.number_input("Y", min_value=0.0, value=0.0, step=0.5, key="add_y")
if st.sidebar.button("Add"):
    _report("Add", session.add_placement(bin_id, add_x, add_y))

placement_ids: List[str] = [p.id for p in session.state.placements]
if placement_ids:
    st.sidebar.header("Edit bin")
    target_id = st.sidebar.selectbox("Placement", options=placement_ids)
    target = session.state.find(target_id)
    size = session.size_of(target)
    col_mx, col_my = st.sidebar.columns(2)
    with col_mx:
        move_x = st.number_input("Move X", min_value=0.0, value=float(target.x), step=0.5, key=f"mx_{target_id}")
    with col_my:
        move_y = st.number_input("Move Y", min_value=0.0, value=float(target.y), step=0.5, key=f"my_{target_id}")
    if st.sidebar.button("Move"):
        _report("Move", session.move_placement(target_id, move_x, move_y))

    new_w = new_l = None
    if size is not None:
        col_rw, col_rl = st.sidebar.columns(2)
        with col_rw:
            new_w = st.number_input("Bin width", min_value=MIN_BIN_DIM, max_value=float(max(MAX_BIN_DIM, size.width)),
                                    value=float(size.width), step=0.5, key=f"rw_{target_id}")
        with col_rl:
            new_l = st.number_input("Bin length", min_value=MIN_BIN_DIM, max_value=float(max(MAX_BIN_DIM, size.length)),
                                    value=float(size.length), step=0.5, key=f"rl_{target_id}")
    color_names = dict((v, k) for k, v in PRESET_COLORS)
    current_color = normalize_hex_color(target.color or DEFAULT_BIN_COLOR)
    color_options = list(color_names)
    if current_color not in color_names:
        color_options.append(current_color)
    preset = st.sidebar.selectbox("Color", options=color_options, index=color_options.index(current_color),
                                  format_func=lambda c: color_names.get(c, f"Custom ({c})"), key=f"c_{target_id}")
    label = st.sidebar.text_input("Label", value=target.label or "", key=f"lb_{target_id}")
    if st.sidebar.button("Apply") and size is not None:
        edits = placement_edits(target, size, width=new_w, length=new_l, color=preset, label=label)
        if edits:
            _report("Update", session.update_placement(target_id, **edits))
    if st.sidebar.button("Remove"):
        session.remove_placement(target_id)

# Layout ---------------------------------------------------------------------
st.sidebar.header("Layout")
mode = st.sidebar.radio("Suggest mode", options=[m.value for m in SuggestMode], horizontal=True)
col_s, col_c = st.sidebar.columns(2)
with col_s:
    if st.button("Suggest"):
        outcome = session.suggest_layout(mode)
        if outcome.status is SuggestStatus.BLOCKED:
            st.sidebar.warning("Not all bins fit; layout unchanged.")
with col_c:
    if st.button("Clear"):
        session.clear_placements()
col_u, col_r = st.sidebar.columns(2)
with col_u:
    st.button("Undo", on_click=session.undo, disabled=not session.can_undo)
with col_r:
    st.button("Redo", on_click=session.redo, disabled=not session.can_redo)

# Import / export ------------------------------------------------------------
st.sidebar.header("Import / export")
upload = st.sidebar.file_uploader("Import layout JSON", type=["json"])
if upload is not None and st.session_state.get("imported_file_id") != upload.file_id:
    st.session_state["imported_file_id"] = upload.file_id
    result = import_upload(session, upload.getvalue())
    if result:
        st.sidebar.success(f"Imported {upload.name}")
    else:
        st.sidebar.error(f"Import failed: {result.reason}")

state = session.state
st.sidebar.download_button(
    "Export layout JSON",
    data=json.dumps(session.export_state(), indent=2),
    file_name=f"{(state.layout_title or 'drawer-layout').strip().replace(' ', '-')}.json",
    mime="application/json",
)
if st.sidebar.button("Create share link"):
    st.query_params[SHARE_PARAM] = encode_share_param(state)
    st.sidebar.success("Share link is in the address bar.")

store.save(state)

# Main -----------------------------------------------------------------------
st.title(state.layout_title or "Drawer Layout")
st.caption(f'{state.drawer_width:g}" x {state.drawer_length:g}" drawer, '
           f"{len(state.placements)} bins, {space_used_percent(state, catalog):.1f}% used")

preview_col, summary_col = st.columns([3, 1])
with preview_col:
    st.image(render_layout(state, catalog, selected=[target_id] if placement_ids else None))
with summary_col:
    st.subheader("Summary")
    groups = placement_groups(state, catalog)
    if groups:
        st.table([{"Bin": g.label, "Color": g.color, "Count": g.count} for g in groups])
    else:
        st.info("No bins placed yet.")
    invalid = invalid_placement_ids(state, catalog)
    if invalid:
        st.error(f"{len(invalid)} bin(s) overlap or leave the drawer.")
