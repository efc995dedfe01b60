"""Streamlit editor for DocCraft - document editor, live preview and AI chat.

Run with: streamlit run ui/app.py

The editor session is async (httpx streaming, asyncio debounce timers), so it
lives on one background event loop per browser session. Streamlit callbacks
hand work to that loop and wait for the result.
"""

# Add project root to sys.path for imports to work when run via streamlit
import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio  # noqa: E402
import threading  # noqa: E402
import time  # noqa: E402
from collections.abc import Coroutine  # noqa: E402
from typing import Any  # noqa: E402

import streamlit as st  # noqa: E402
import streamlit.components.v1 as components  # noqa: E402

from backend.app.config import get_settings  # noqa: E402
from backend.app.models.documents import DocumentFormat  # noqa: E402
from ui.api_client import DocCraftClient  # noqa: E402
from ui.editor import EditorSession  # noqa: E402
from ui.helpers import build_preview, build_status_view, build_transcript  # noqa: E402
from ui.session import Attachment, TurnState  # noqa: E402
from ui.settings_store import MODEL_CHOICES, AISettings, SettingsStore  # noqa: E402

BACKEND_URL = get_settings().backend_url
POLL_INTERVAL_S = 0.1

st.set_page_config(page_title="DocCraft AI", page_icon="📝", layout="wide")


def _start_loop() -> asyncio.AbstractEventLoop:
    loop = asyncio.new_event_loop()
    threading.Thread(target=loop.run_forever, name="doccraft-loop", daemon=True).start()
    return loop


def run_async(coro: Coroutine[Any, Any, Any]) -> Any:
    """Run a coroutine on the session loop and wait for its result."""
    return asyncio.run_coroutine_threadsafe(coro, st.session_state.loop).result()


async def _create_editor(settings: AISettings) -> EditorSession:
    return EditorSession(DocCraftClient(BACKEND_URL), settings=settings)


# Initialize session state
if "loop" not in st.session_state:
    st.session_state.loop = _start_loop()
if "settings_store" not in st.session_state:
    st.session_state.settings_store = SettingsStore()
if "editor" not in st.session_state:
    settings = st.session_state.settings_store.load()
    st.session_state.editor = run_async(_create_editor(settings))
    try:
        documents = run_async(st.session_state.editor.list_documents())
        if documents:
            run_async(st.session_state.editor.open_document(documents[0]))
    except Exception as e:
        st.session_state.startup_error = str(e)

editor: EditorSession = st.session_state.editor
loop: asyncio.AbstractEventLoop = st.session_state.loop


def _show_notifications() -> None:
    for notification in editor.chat.pop_notifications():
        icon = "🚨" if notification.destructive else "✅"
        st.toast(f"**{notification.title}** - {notification.description}", icon=icon)


# =============================================================================
# SIDEBAR - DOCUMENTS + AI SETTINGS
# =============================================================================
with st.sidebar:
    st.subheader("📄 Documents")

    if st.session_state.get("startup_error"):
        st.error(f"❌ Backend unavailable: {st.session_state.startup_error}")

    try:
        documents = run_async(editor.list_documents())
    except Exception as e:
        documents = []
        st.caption(f"_Could not load documents: {e}_")

    # Switching documents mid-turn would redirect the reply's replacement
    turn_running = editor.chat.turn_in_progress

    if st.button("➕ New Document", use_container_width=True, disabled=turn_running):
        run_async(editor.new_document())
        st.rerun()

    for document in documents:
        is_open = document.id == editor.working_copy.document_id
        label = f"{'▶ ' if is_open else ''}{document.title}"
        col_open, col_delete = st.columns([4, 1])
        with col_open:
            if st.button(
                label,
                key=f"open-{document.id}",
                use_container_width=True,
                disabled=turn_running,
            ):
                run_async(editor.open_document(document))
                st.rerun()
        with col_delete:
            if st.button("🗑", key=f"delete-{document.id}", disabled=turn_running and is_open):
                run_async(editor.delete_document(document.id))
                st.rerun()

    st.divider()

    with st.expander("⚙️ AI Settings"):
        current = editor.chat.settings
        with st.form("settings_form"):
            api_key = st.text_input("API Key", value=current.api_key, type="password")
            base_url = st.text_input(
                "Base URL", value=current.base_url, help="Leave empty for the default endpoint"
            )
            model_index = MODEL_CHOICES.index(current.model) if current.model in MODEL_CHOICES else 0
            model = st.selectbox("Model", options=MODEL_CHOICES, index=model_index)

            if st.form_submit_button("Save", type="primary"):
                settings = AISettings(api_key=api_key, base_url=base_url, model=model)
                editor.update_settings(settings)
                if st.session_state.settings_store.save(settings):
                    st.success("Settings saved")
                else:
                    st.error("Could not save settings")

# =============================================================================
# HEADER - TITLE, FORMAT, IMPORT/EXPORT
# =============================================================================
col_title, col_format, col_export = st.columns([3, 1, 1])

with col_title:
    title = st.text_input("Title", value=editor.working_copy.title, label_visibility="collapsed")
    if title != editor.working_copy.title:
        loop.call_soon_threadsafe(editor.on_title_change, title)

with col_format:
    formats = list(DocumentFormat)
    selected_format = st.selectbox(
        "Format",
        options=formats,
        index=formats.index(editor.working_copy.format),
        format_func=lambda f: f.value.upper(),
        label_visibility="collapsed",
    )
    if selected_format != editor.working_copy.format:
        run_async(editor.change_format(selected_format))
        st.rerun()

with col_export:
    try:
        export_name, export_body = run_async(editor.export())
        st.download_button(
            "⬇️ Export",
            data=export_body,
            file_name=export_name,
            mime=editor.working_copy.format.mime_type,
            use_container_width=True,
        )
    except Exception as e:
        st.caption(f"_Export unavailable: {e}_")

# =============================================================================
# MAIN - EDITOR, PREVIEW, CHAT
# =============================================================================
col_editor, col_preview, col_chat = st.columns([2, 2, 1.5])

with col_editor:
    st.markdown("#### ✏️ Editor")

    imported = st.file_uploader(
        "Import file", type=["txt", "html", "htm", "tex", "rtf", "doc", "docx"], key="import"
    )
    if imported is not None and st.session_state.get("imported_name") != imported.name:
        try:
            run_async(editor.import_file(imported.name, imported.getvalue(), imported.type))
            st.session_state.imported_name = imported.name
            st.rerun()
        except Exception as e:
            st.error(f"❌ Import failed: {e}")

    # Keyed by document and content so AI replacements show up on rerun
    content = st.text_area(
        "Content",
        value=editor.working_copy.content,
        height=520,
        key=f"content-{editor.working_copy.document_id}-{hash(editor.working_copy.content)}",
        label_visibility="collapsed",
    )
    if content != editor.working_copy.content:
        loop.call_soon_threadsafe(editor.on_content_change, content)

with col_preview:
    st.markdown("#### 👁️ Preview")
    preview = build_preview(editor.working_copy.content, editor.working_copy.format)
    if preview["kind"] == "html":
        components.html(preview["body"], height=560, scrolling=True)
    elif preview["kind"] == "latex":
        st.code(preview["body"], language="latex")
    else:
        st.text(preview["body"])

with col_chat:
    st.markdown("#### 💬 AI Assistant")

    transcript = st.container(height=480)
    with transcript:
        for entry in build_transcript(editor.chat.messages):
            with st.chat_message(entry["role"]):
                st.markdown(entry["content"])
        live = st.empty()

    attachments_raw = st.file_uploader(
        "Attach context",
        type=["txt", "html", "htm", "tex", "rtf", "doc", "docx"],
        accept_multiple_files=True,
        key="attachments",
    )

    prompt = st.chat_input(
        "Ask the AI to edit your document...", disabled=not editor.chat.can_send
    )
    if prompt:
        attachments: list[Attachment] = []
        for upload in attachments_raw or []:
            try:
                attachments.append(
                    run_async(editor.attach_file(upload.name, upload.getvalue(), upload.type))
                )
            except Exception as e:
                st.error(f"❌ Could not attach {upload.name}: {e}")

        future = asyncio.run_coroutine_threadsafe(editor.send_message(prompt, attachments), loop)
        with transcript:
            with st.chat_message("user"):
                st.markdown(prompt)
        while not future.done():
            if editor.chat.state is TurnState.streaming and editor.chat.live_text:
                live.markdown(editor.chat.live_text)
            time.sleep(POLL_INTERVAL_S)
        future.result()
        st.rerun()

# =============================================================================
# STATUS BAR
# =============================================================================
status = build_status_view(
    editor.working_copy.content, editor.working_copy.format, editor.chat.is_connected
)
st.caption(
    f"{'🟢' if editor.chat.is_connected else '🔴'} {status['connection']} · {status['format']}"
    f" · Lines: {status['lines']} · Chars: {status['characters']:,} · Size: {status['size']}"
)

_show_notifications()
