# app.py: study wizard entrypoint (streamlit run app.py)
from __future__ import annotations

from pathlib import Path
import sys

import streamlit as st

APP_ROOT = Path(__file__).resolve().parent
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))

from config import get_settings  # noqa: E402
from infra.logging import configure_logging  # noqa: E402
from ui.study_view import render_study  # noqa: E402

SETTINGS = get_settings()
configure_logging(SETTINGS.log_level, debug=SETTINGS.debug)

st.set_page_config(
    page_title="User Study",
    page_icon="📝",
    layout="centered",
    initial_sidebar_state="collapsed",
)

render_study(SETTINGS)
