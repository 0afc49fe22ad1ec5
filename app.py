"""
Blood Donation Management System: Streamlit UI entry point.
"""

import streamlit as st

# Load .env first so BACKEND_BASE_URL / GEMINI_API_KEY changes are picked up
from src.utils.config import load_config, log_file, log_level
load_config()

from src.infrastructure.data.sources.backend_client import BackendClient
from src.orchestration.app_state import AppState
from src.orchestration.controller import AppController
from src.orchestration.gemini_client import GeminiClient
from src.ui.views import render_page
from src.utils.logger import level_from_name, setup_logger

setup_logger(level=level_from_name(log_level()), log_file=log_file())

st.set_page_config(page_title="Blood Donation Management System", page_icon="🩸", layout="wide")


# Clients are process-wide; only plain state goes into the session
@st.cache_resource
def get_backend_client() -> BackendClient:
    return BackendClient()


@st.cache_resource
def get_gemini_client() -> GeminiClient:
    return GeminiClient()


if "app_state" not in st.session_state:
    st.session_state.app_state = AppState()

controller = AppController(
    st.session_state.app_state,
    backend=get_backend_client(),
    generator=get_gemini_client(),
)
controller.initialize()
render_page(controller)
