"""Streamlit web application for Constellation Viewer.

This app provides an interactive interface for:
- Choosing a constellation figure
- Zooming and panning the seam-safe projection
- Inspecting the star nearest to a viewport position
"""

import logging
import sys
from pathlib import Path

# Add src directory to Python path for Streamlit Cloud deployment
_src_path = Path(__file__).parent / "src"
if _src_path.exists() and str(_src_path) not in sys.path:
    sys.path.insert(0, str(_src_path))

import streamlit as st

from constellation_viewer.catalog import StarCatalog, load_catalog_csv
from constellation_viewer.config import ViewerConfig
from constellation_viewer.lines import load_figures
from constellation_viewer.session import ViewerSession

logging.basicConfig(level=logging.INFO)

DATA_DIR = Path(__file__).parent / "data"
LOCAL_CATALOG = DATA_DIR / "vizier_data.csv"
FIGURES_PATH = DATA_DIR / "constellation_lines_iau.json"
PAN_STEP = 40.0


@st.cache_resource
def load_data():
    """Load config, catalog and figures once per server process."""
    config = ViewerConfig.from_env()
    if LOCAL_CATALOG.exists():
        catalog = load_catalog_csv(LOCAL_CATALOG)
    else:
        catalog = StarCatalog(config.cache_dir).load_catalog()
    figures = load_figures(FIGURES_PATH)
    return config, catalog, figures


def initialize_session_state():
    """Initialize Streamlit session state variables."""
    if "viewer" not in st.session_state:
        config, catalog, figures = load_data()
        st.session_state.viewer = ViewerSession(catalog, figures, config)

    if "last_image" not in st.session_state:
        st.session_state.last_image = None


def draw(viewer: ViewerSession):
    """Run one frame and keep the most recent image."""
    image = viewer.frame()
    if image is not None:
        st.session_state.last_image = image
    if st.session_state.last_image is not None:
        st.image(st.session_state.last_image, use_container_width=True)


def main():
    st.set_page_config(page_title="Constellation Viewer", layout="wide")
    st.title("Constellation Viewer")

    try:
        initialize_session_state()
    except (FileNotFoundError, ValueError, RuntimeError) as e:
        st.error(f"Could not load star data: {e}")
        return

    viewer: ViewerSession = st.session_state.viewer
    names = viewer.figure_names
    if not names:
        st.warning(f"No constellation figures found in {FIGURES_PATH}")
        return

    default_index = names.index("Orion") if "Orion" in names else 0
    name = st.sidebar.selectbox("Constellation", names, index=default_index)
    if name != viewer.active_figure:
        if not viewer.select_figure(name):
            st.warning(f"No catalog stars found for {name}")

    width = viewer.config.viewport_width
    height = viewer.config.viewport_height

    st.sidebar.subheader("View")
    zoom_cols = st.sidebar.columns(3)
    if zoom_cols[0].button("Zoom in"):
        viewer.handle_wheel(width / 2, height / 2, delta_y=-1)
    if zoom_cols[1].button("Zoom out"):
        viewer.handle_wheel(width / 2, height / 2, delta_y=1)
    if zoom_cols[2].button("Reset"):
        viewer.reset_view()

    pan_cols = st.sidebar.columns(4)
    for col, label, (dx, dy) in zip(
        pan_cols,
        ["←", "→", "↑", "↓"],
        [(PAN_STEP, 0), (-PAN_STEP, 0), (0, PAN_STEP), (0, -PAN_STEP)],
    ):
        if col.button(label):
            viewer.handle_drag(dx, dy)

    st.sidebar.caption(f"Scale: {viewer.transform.scale:.2f}×")

    draw(viewer)

    st.subheader("Inspect")
    col_x, col_y = st.columns(2)
    x = col_x.number_input("x (px)", 0.0, float(width), float(width) / 2)
    y = col_y.number_input("y (px)", 0.0, float(height), float(height) / 2)
    hit = viewer.hover(x, y, pointer="touch")
    if hit is None:
        st.caption("No star near this position.")
    else:
        st.markdown("  \n".join(hit.describe()))


if __name__ == "__main__":
    main()
