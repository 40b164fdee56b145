"""El Nieto Tech - Streamlit Chat Interface.

Thin client for the tech-support assistant. All model logic lives in the
FastAPI backend. This file handles:
  - Conversation state (ConversationStateMachine in st.session_state)
  - Photo upload as a data URL
  - POST /api/analyze with loading state, rollback and error banners
  - Rate-limit countdown that blocks input until it elapses
  - Read-aloud via /api/tts with browser speech as fallback
"""

import base64
import time

import streamlit as st
import streamlit.components.v1 as components

from backend.agent.icons import resolve_icons
from frontend.api_client import check_health, fetch_speech, post_turn
from frontend.speech import SpeechPlayer, browser_speech_script
from frontend.state import ConversationStateMachine, ErrorKind, TurnState

QUICK_OPTIONS = [
    ("📱", "Celular", "Tengo un problema con el celular"),
    ("💻", "Computadora", "Tengo un problema con la computadora"),
    ("📺", "Televisor", "Tengo un problema con el televisor"),
    ("❓", "Otro aparato", "Tengo un problema con otro aparato"),
]

st.set_page_config(page_title="El Nieto Tech", page_icon="🤗", layout="centered")

# Large type for older eyes
st.markdown("""
<style>
    .stApp { max-width: 760px; margin: 0 auto; }
    .stChatMessage p, .stChatMessage li { font-size: 1.2rem; line-height: 1.6; }
    .icon-chip {
        display: inline-block;
        padding: 4px 10px;
        margin: 4px 6px 0 0;
        border-radius: 12px;
        background: rgba(128, 128, 128, 0.12);
        font-size: 1rem;
    }
    .icon-chip .glyph { font-size: 1.6rem; margin-right: 6px; }
</style>
""", unsafe_allow_html=True)


def init_session():
    """Initialize session state on first load."""
    if "conversation" not in st.session_state:
        st.session_state.conversation = ConversationStateMachine()
    if "player" not in st.session_state:
        st.session_state.player = SpeechPlayer(fetch_speech)
    if "uploader_key" not in st.session_state:
        st.session_state.uploader_key = 0


def _decode_data_url(payload: str) -> bytes | None:
    data = payload.split(",", 1)[1] if "," in payload else payload
    try:
        return base64.b64decode(data)
    except ValueError:
        return None


def _show_image(payload: str, caption: str | None = None):
    image_bytes = _decode_data_url(payload)
    if image_bytes:
        st.image(image_bytes, caption=caption, use_container_width=True)
    else:
        st.warning("No se pudo mostrar la imagen.")


def render_icons(keys: list[str] | None):
    """Icon chips; unknown keys are skipped."""
    chips = [
        f'<span class="icon-chip"><span class="glyph">{icon.glyph}</span>{icon.description}</span>'
        for _, icon in resolve_icons(keys)
    ]
    if chips:
        st.markdown("".join(chips), unsafe_allow_html=True)


def render_message(index: int, msg: dict):
    """Render a single turn with its photo, icons, steps and play button."""
    with st.chat_message(msg["role"]):
        if msg.get("image"):
            _show_image(msg["image"])
        if msg.get("content"):
            st.markdown(msg["content"])

        if msg["role"] != "assistant":
            return

        for step_number, step in enumerate(msg.get("solution") or [], start=1):
            st.markdown(f"**{step_number}.** {step}")
        render_icons(msg.get("icons"))
        if msg.get("generatedImage"):
            _show_image(msg["generatedImage"], caption="Buscá algo parecido a esto")

        player: SpeechPlayer = st.session_state.player
        label = "⏹️ Parar" if player.is_speaking(index) else "🔊 Escuchar"
        if st.button(label, key=f"speak-{index}"):
            player.toggle(index, _speech_text(msg))
            st.rerun()


def _speech_text(msg: dict) -> str:
    steps = msg.get("solution") or []
    return " ".join([msg.get("content", "")] + [f"Paso {i}. {s}" for i, s in enumerate(steps, start=1)])


def render_playback():
    """Mount the audio for the utterance holding the playback slot."""
    utterance = st.session_state.player.current
    if utterance is None:
        components.html(browser_speech_script(None), height=0)
        return
    if utterance.uses_browser_voice:
        components.html(browser_speech_script(utterance.text), height=0)
    else:
        st.audio(base64.b64decode(utterance.audio_base64), format="audio/mp3", autoplay=True)


def render_error(conversation: ConversationStateMachine):
    """Error banner; rate limits show the live countdown instead of a close button."""
    message = conversation.error_message()
    if not message:
        return
    if conversation.error.kind == ErrorKind.RATE_LIMIT:
        st.warning(f"⏳ {message}")
        return
    if conversation.error.kind == ErrorKind.CONNECTION:
        st.error(f"📡 {message}")
    else:
        st.error(message)
    if st.button("Cerrar", key="dismiss-error"):
        conversation.dismiss_error()
        st.rerun()


def send_message(text: str, image: str | None = None):
    """Run one turn through the state machine with a loading indicator."""
    conversation: ConversationStateMachine = st.session_state.conversation
    st.session_state.player.stop()

    with st.spinner("Pensando..."):
        conversation.run_turn(text, image, post_turn)

    st.session_state.uploader_key += 1
    st.rerun()


def photo_input(conversation: ConversationStateMachine) -> str | None:
    """Photo picker as a data URL; highlighted when the assistant asked for one."""
    if conversation.needs_photo:
        st.info("📷 Sacale una foto a la pantalla y subila acá.")
    upload = st.file_uploader(
        "Agregar una foto",
        type=["png", "jpg", "jpeg", "webp"],
        key=f"photo-{st.session_state.uploader_key}",
        disabled=not conversation.can_submit,
    )
    if upload is None:
        return None
    encoded = base64.b64encode(upload.getvalue()).decode("utf-8")
    return f"data:{upload.type or 'image/jpeg'};base64,{encoded}"


def main():
    """Run the Streamlit chat application."""
    init_session()
    conversation: ConversationStateMachine = st.session_state.conversation

    st.title("🤗 El Nieto Tech")

    with st.sidebar:
        status = check_health()
        if status == "healthy":
            st.success("Conectado")
        elif status == "offline":
            st.error("Sin conexión con el asistente")
        else:
            st.warning("El asistente funciona con limitaciones")

        st.divider()
        if st.button("Empezar de nuevo", use_container_width=True, disabled=not conversation.can_submit):
            conversation.reset()
            st.session_state.player.stop()
            st.rerun()

    if not conversation.messages:
        st.subheader("¿En qué te puedo ayudar?")
        for glyph, label, prompt in QUICK_OPTIONS:
            if st.button(f"{glyph}  {label}", key=f"quick-{label}", use_container_width=True,
                         disabled=not conversation.can_submit):
                send_message(prompt)

    for index, msg in enumerate(conversation.messages):
        render_message(index, msg)

    render_playback()
    render_error(conversation)

    image = photo_input(conversation)
    placeholder = "Esperá un momento..." if not conversation.can_submit else "Contame qué te pasa..."
    user_input = st.chat_input(placeholder, disabled=not conversation.can_submit)
    if user_input or (image and st.button("Enviar foto", key="send-photo")):
        send_message(user_input or "", image)

    # Cooldown countdown: one tick per second until input unlocks
    if conversation.state == TurnState.COOLDOWN:
        time.sleep(1)
        conversation.tick()
        st.rerun()


if __name__ == "__main__":
    main()
