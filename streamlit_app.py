import streamlit as st
st.set_page_config(page_title="PlantLens", page_icon="🌿", layout="wide")
import html
import logging
from datetime import datetime

from streamlit.errors import StreamlitAPIException

from plantlens.config import configure_logging, load_settings
from plantlens.errors import ImageError, ServiceError
from plantlens.gemini import build_gateway
from plantlens.imaging import SAMPLE_IMAGES, fetch_sample_image, image_data_url
from plantlens.state import Analyzing, Error, Idle, Results, SessionController

logger = logging.getLogger("plantlens.app")

CHAT_CSS = """<style>.message-container { padding: 1px 5px; } .user-message { background: #059669; color: white; border-radius: 18px 18px 0 18px; padding: 8px 14px; margin: 3px 0 3px auto; width: fit-content; max-width: 85%; word-wrap: break-word; box-shadow: 0 1px 2px rgba(0,0,0,0.1); } .bot-message { background: #f3f4f6; color: #1f2937; border-radius: 18px 18px 18px 0; padding: 8px 14px; margin: 3px auto 3px 0; width: fit-content; max-width: 85%; word-wrap: break-word; box-shadow: 0 1px 2px rgba(0,0,0,0.05); } .message-meta { font-size: 0.70rem; color: #777; margin-top: 3px; } .user-message .message-meta { text-align: right; color: #d1fae5; }</style>"""


# =======================================================
# ===== Session Setup =====
# =======================================================
def read_secrets():
    try:
        return {key: st.secrets[key] for key in st.secrets}
    except (FileNotFoundError, StreamlitAPIException):
        return {}


@st.cache_resource(show_spinner=False)
def get_settings():
    settings = load_settings(read_secrets())
    configure_logging(settings.log_level)
    return settings


@st.cache_resource(show_spinner=False)
def get_gateway(_settings):
    return build_gateway(_settings)


def get_controller(settings):
    if "controller" not in st.session_state:
        tz = settings.tz
        st.session_state.controller = SessionController(clock=lambda: datetime.now(tz))
    return st.session_state.controller


# =======================================================
# ===== IMAGE DISPLAY HELPER FUNCTION =====
# =======================================================
def display_image_with_max_height(image_bytes, caption="", max_height_px=300):
    try:
        img_data_url = image_data_url(image_bytes)
    except ImageError as e:
        logger.warning("Could not render preview: %s", e)
        st.caption("Preview unavailable.")
        return
    img_style_str = f"max-height: {max_height_px}px; width: auto; display: block; margin-left: auto; margin-right: auto; border-radius: 12px"
    caption_html = f'<p style="text-align: center; font-size: 0.9em; color: grey; margin-top: 5px;">{html.escape(caption)}</p>' if caption else ""
    st.markdown(f"""
<div style="display: flex; justify-content: center; flex-direction: column; align-items: center; margin-bottom: 10px;">
    <img src="{img_data_url}" style="{img_style_str};" alt="{html.escape(caption or 'Uploaded image')}">
    {caption_html}
</div>""", unsafe_allow_html=True)


# =======================================================
# ===== Screens =====
# =======================================================
def display_upload_section(controller):
    st.header("🌿 Identify & Care for Your Plants")
    st.markdown("Upload a photo of any plant to instantly get identification, detailed care guides, and chat with an AI gardening expert.")
    uploaded_file = st.file_uploader(
        "Upload a clear photo of your plant:", type=["jpg", "jpeg", "png", "webp"],
        key=f"plant_uploader_{controller.generation}",
        help="Drag and drop or browse for an image file (JPG, PNG, WEBP).",
    )
    if uploaded_file is not None and controller.submit_image(uploaded_file.getvalue()) is not None:
        st.rerun()

    st.caption("No photo? Try these examples:")
    sample_cols = st.columns(len(SAMPLE_IMAGES) + 4)
    for i, sample in enumerate(SAMPLE_IMAGES):
        with sample_cols[i]:
            st.image(sample["thumbnail"], width=80)
            if st.button(sample["name"], key=f"sample_{sample['name'].lower()}", use_container_width=True):
                try:
                    image_bytes = fetch_sample_image(sample["url"])
                except ServiceError as e:
                    logger.error("%s", e)
                    st.error("Could not load that example photo. Please upload your own.")
                    return
                if controller.submit_image(image_bytes) is not None:
                    st.rerun()


def display_analyzing(controller, gateway, state):
    display_image_with_max_height(state.image, "Your Uploaded Plant", 400)
    with st.spinner("Identifying plant..."):
        controller.run_analysis(gateway)
    st.rerun()


def display_error(controller, state):
    _, center, _ = st.columns([1, 2, 1])
    with center:
        with st.container(border=True):
            st.markdown("### ⚠️ Analysis Failed")
            st.write(state.message)
            st.button("Try Again", key="error_try_again", type="primary", on_click=controller.reset, use_container_width=True)


def display_identity_card(state):
    record = state.record
    with st.container(border=True):
        img_col, info_col = st.columns([0.45, 0.55])
        with img_col:
            display_image_with_max_height(state.image, max_height_px=320)
        with info_col:
            st.subheader(record.common_name)
            st.markdown(f"*{record.scientific_name}*")
            st.write(record.description)


def display_care_guide(record):
    st.markdown("#### 🌱 Care Guide")
    care = record.care
    details = [
        ("☀️ Light", care.light), ("💧 Water", care.water),
        ("🪴 Soil", care.soil), ("⚠️ Toxicity", care.toxicity),
    ]
    c1, c2 = st.columns(2)
    for i, (label, value) in enumerate(details):
        col = c1 if i % 2 == 0 else c2
        with col:
            with st.container(border=True):
                st.markdown(f"**{label}**")
                st.caption(value)
    st.info(f"✨ **Fun fact:** {record.fun_fact}")


def display_chat_interface(controller, state):
    name = state.record.common_name
    st.subheader(f"💬 Ask about your {name}")
    st.markdown(CHAT_CSS, unsafe_allow_html=True)

    chat_container = st.container(height=420)
    with chat_container:
        for turn in state.transcript:
            content = html.escape(turn.text).replace("\n", "<br>")
            time = turn.created_at.strftime("%H:%M")
            if turn.is_user:
                st.markdown(f'<div class="message-container"><div class="user-message">{content}<div class="message-meta">You • {time}</div></div></div>', unsafe_allow_html=True)
            else:
                st.markdown(f'<div class="message-container"><div class="bot-message">🌿 {content}<div class="message-meta">Plant expert • {time}</div></div></div>', unsafe_allow_html=True)

        if state.awaiting_reply:
            with st.spinner("Thinking..."):
                controller.run_reply()
            st.rerun()

    if prompt := st.chat_input("Ask a question...", key=f"chat_input_{controller.generation}", disabled=state.awaiting_reply):
        if controller.send_message(prompt) is not None:
            st.rerun()


def display_dashboard(controller, state):
    details_col, chat_col = st.columns([7, 5], gap="large")
    with details_col:
        display_identity_card(state)
        display_care_guide(state.record)
    with chat_col:
        display_chat_interface(controller, state)


# --- Main App Logic ---
def main():
    settings = get_settings()
    gateway = get_gateway(settings)
    controller = get_controller(settings)

    # --- Sidebar ---
    st.sidebar.title("🌿 PlantLens")
    st.sidebar.button("🔄 New Plant", key="sidebar_reset", on_click=controller.reset, use_container_width=True)
    st.sidebar.divider()
    st.sidebar.caption(f"Powered by Gemini ({settings.gemini_model})")
    if not settings.has_api_key:
        st.sidebar.warning("Gemini API Key missing. Identification and chat use demo data.", icon="🔑")

    state = controller.state
    if isinstance(state, Idle):
        display_upload_section(controller)
    elif isinstance(state, Analyzing):
        display_analyzing(controller, gateway, state)
    elif isinstance(state, Error):
        display_error(controller, state)
    elif isinstance(state, Results):
        display_dashboard(controller, state)


# --- Run the App ---
if __name__ == "__main__":
    main()
