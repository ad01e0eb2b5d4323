import html
import logging
from typing import Dict, List

import pandas as pd
import streamlit as st

from model_decoder import DecoderContext, SearchDebouncer, debounced_search
from model_decoder.formatters import attribute_rows, format_decode_result_json, warning_rows
from model_decoder.visualize import CharMark, MarkKind


logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


DEFAULT_SETTINGS: Dict[str, object] = {
    "model_type": "rn",
    "search_delay_seconds": 0.3,
    "show_notices": True,
}

_MARK_STYLES = {
    MarkKind.HIGHLIGHTED: "background:#ffe08a;font-weight:700;",
    MarkKind.SEPARATOR: "color:#999;",
    MarkKind.PLAIN: "",
}


def _ensure_session_state():
    if "context" not in st.session_state:
        st.session_state.context = DecoderContext(DEFAULT_SETTINGS["model_type"])
    if "debouncer" not in st.session_state:
        st.session_state.debouncer = SearchDebouncer(delay=DEFAULT_SETTINGS["search_delay_seconds"])
    if "selected_categories" not in st.session_state:
        st.session_state.selected_categories = []


def _render_marks(marks: List[CharMark]) -> str:
    spans = "".join(
        f'<span style="{_MARK_STYLES[m.kind]}">{html.escape(m.char)}</span>' for m in marks
    )
    return (
        '<div style="font-family:monospace;font-size:22px;letter-spacing:2px;'
        'border:1px solid #e0e0e0;padding:10px;border-radius:8px;background:#fafafa;">'
        f"{spans}</div>"
    )


def _model_type_selector(context: DecoderContext):
    model_types = context.model_types()
    current = model_types.index(context.model_type) if context.model_type in model_types else 0
    selection = st.sidebar.selectbox("Model Type", model_types, index=current, format_func=str.upper)
    if selection != context.model_type:
        context.switch_model_type(selection)
        st.session_state.selected_categories = []
        st.rerun()
    st.sidebar.caption(context.config.title)
    st.sidebar.markdown("**Reference**")
    st.sidebar.code(context.config.reference_string)


def _decode_tab(context: DecoderContext):
    model_string = st.text_input("Model Number", placeholder=context.config.reference_string)
    if not model_string:
        st.info("Enter a model number to decode it.")
        return

    result = context.decode(model_string)

    rows = attribute_rows(result)
    if rows:
        st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)
    if not result.is_complete:
        st.caption(f"{len(result.attributes)} of {result.expected_segments} segments entered")

    categories = [a.category for a in result.attributes]
    selected = st.multiselect(
        "Highlight",
        categories,
        default=[c for c in st.session_state.selected_categories if c in categories],
    )
    st.session_state.selected_categories = selected
    st.markdown(_render_marks(context.highlight_live(selected, result)), unsafe_allow_html=True)
    st.markdown(_render_marks(context.highlight(selected)), unsafe_allow_html=True)

    st.markdown("### Validation")
    if result.warnings:
        for row, warning in zip(warning_rows(result), result.warnings):
            text = f"**{row['Message']}** ({row['Categories']})  \n{row['Hint']}"
            if warning.is_warning:
                st.warning(text)
            else:
                st.info(text)
    else:
        st.success("No dependency issues found")

    if DEFAULT_SETTINGS["show_notices"] and result.notices:
        with st.expander(f"Notices ({len(result.notices)})"):
            for notice in result.notices:
                st.write(f"`{notice.code.value}` {notice.message}")

    st.download_button(
        "Download JSON",
        data=format_decode_result_json(result, include_notices=True),
        file_name=f"{result.normalized or 'model'}.json",
        mime="application/json",
    )


def _search_tab(context: DecoderContext):
    debouncer: SearchDebouncer = st.session_state.debouncer
    query = st.text_input("Search descriptions", placeholder="e.g. gas, MERV 13, economizer")
    if not query.strip():
        return
    # A newer keystroke reruns the script and supersedes this query during the wait
    matches = debounced_search(debouncer, context.config.catalog, query)
    if matches is None:
        return

    st.caption(f"{len(matches)} matches")
    if matches:
        st.dataframe(
            pd.DataFrame([m.to_dict() for m in matches]),
            use_container_width=True,
            hide_index=True,
        )
        selected = sorted({m.category for m in matches})
        st.markdown(_render_marks(context.highlight(selected)), unsafe_allow_html=True)


def _reference_tab(context: DecoderContext):
    config = context.config
    for entry in config.navigation:
        if entry.category is None:
            st.markdown(f"#### {entry.name}")
            continue
        definition = config.catalog.get(entry.category)
        label = f"{entry.name} ({definition.position})" if definition else entry.name
        with st.expander((" " if entry.indent else "") + label):
            st.markdown(_render_marks(context.highlight([entry.category])), unsafe_allow_html=True)
            if definition:
                st.dataframe(
                    pd.DataFrame(
                        [{"Code": code, "Description": text} for code, text in definition.codes.items()]
                    ),
                    use_container_width=True,
                    hide_index=True,
                )


def main():
    st.set_page_config(page_title="Model Number Decoder", layout="wide")
    _ensure_session_state()
    context: DecoderContext = st.session_state.context

    st.title("Model Number Decoder")
    _model_type_selector(context)

    decode_tab, search_tab, reference_tab = st.tabs(["Decode", "Search", "Reference"])
    with decode_tab:
        _decode_tab(context)
    with search_tab:
        _search_tab(context)
    with reference_tab:
        _reference_tab(context)


main()
