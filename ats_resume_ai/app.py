"""
ATS résumé upload – Streamlit frontend.
No business logic in layout; parsing and saving go through UploadSession.
"""

import time
from concurrent.futures import ThreadPoolExecutor

import streamlit as st

from config import KNOWN_FILE_TYPES, MAX_UPLOAD_BYTES, OPENAI_API_KEY, PipelineConfig
from cv_pipeline.cv_parser import ResumeParsingPipeline
from schemas.document import UploadedDocument
from services.candidate_store import CandidateStoreError, get_candidate_store
from services.upload_session import UploadSession, UploadState

# Field label shown next to each detected field
FIELD_LABELS = {
    "first_name": "First name",
    "last_name": "Last name",
    "email": "Email",
    "phone": "Phone",
    "linkedin_url": "LinkedIn",
    "skills": "Skills",
    "current_role": "Current role",
    "education": "Education",
    "location": "Location",
    "notes": "Summary",
    "experience_years": "Years of experience",
}


def _new_session() -> UploadSession:
    config = PipelineConfig.from_env()
    return UploadSession(ResumeParsingPipeline(config), get_candidate_store(), config)


def _get_session() -> UploadSession:
    if "upload_session" not in st.session_state:
        st.session_state["upload_session"] = _new_session()
    return st.session_state["upload_session"]


def _accepted_extensions(config: PipelineConfig) -> list:
    exts = []
    for mime, info in KNOWN_FILE_TYPES.items():
        if mime in config.accepted_mime_types:
            exts.extend(e.lstrip(".") for e in info["extensions"])
    return exts


def _parse_with_progress(session: UploadSession) -> None:
    """Run the parse in a worker thread and redraw the cosmetic progress bar meanwhile."""
    bar = st.progress(0, text=f"Processing: {session.filename} – AI is analyzing your resume…")
    with ThreadPoolExecutor(max_workers=1) as pool:
        future = pool.submit(session.parse_sync)
        while not future.done():
            bar.progress(session.progress.value)
            time.sleep(0.1)
        future.result()
    bar.progress(100)


def _render_upload(session: UploadSession) -> None:
    labels = " · ".join(
        info["label"] for mime, info in KNOWN_FILE_TYPES.items() if mime in session.config.accepted_mime_types
    )
    uploaded = st.file_uploader(
        "Upload Resume",
        type=_accepted_extensions(session.config),
        accept_multiple_files=False,
        disabled=session.state == UploadState.PARSING,
        key="resume_file",
        help=f"{labels} · Maximum file size: {MAX_UPLOAD_BYTES // (1024 * 1024)}MB",
    )
    if uploaded is None:
        st.info("Drag and drop a résumé, or click to browse.")
        return
    if st.button("Parse Resume", type="primary", key="parse_btn"):
        document = UploadedDocument(
            content=uploaded.getvalue(),
            mime_type=uploaded.type or "",
            filename=uploaded.name,
        )
        if session.select_files([document]):
            _parse_with_progress(session)
        st.rerun()


def _render_error(session: UploadSession) -> None:
    message = session.error
    st.error(f"**{message.title}** – {message.text}")
    if message.checklist:
        with st.expander("Troubleshooting"):
            for item in message.checklist:
                st.markdown(f"- {item}")
    if st.button("Try again", key="retry_btn"):
        session.retry()
        st.rerun()


def _render_success(session: UploadSession) -> None:
    result = session.result
    candidate = result.candidate
    st.success(result.message or "Resume parsed successfully!")
    st.subheader("Extracted Information")
    name = " ".join(p for p in (candidate.first_name, candidate.last_name) if p)
    st.markdown(f"### {name}")
    col_a, col_b = st.columns(2)
    with col_a:
        if candidate.email:
            st.caption(f"**Email:** {candidate.email}")
        if candidate.phone:
            st.caption(f"**Phone:** {candidate.phone}")
        if candidate.location:
            st.caption(f"**Location:** {candidate.location}")
    with col_b:
        if candidate.linkedin_url:
            st.link_button("LinkedIn Profile", url=candidate.linkedin_url, type="secondary")
        if candidate.current_role:
            st.caption(f"**Current role:** {candidate.current_role}")
        if candidate.experience_years is not None:
            st.caption(f"**Experience:** {candidate.experience_years:g} years")
    if candidate.skills:
        st.markdown(" ".join(f"`{s}`" for s in candidate.skills))
    if candidate.education:
        st.caption(f"**Education:** {candidate.education}")
    if candidate.notes:
        with st.expander("Summary", expanded=True):
            st.markdown(candidate.notes)
    st.caption("Detected: " + ", ".join(FIELD_LABELS.get(f, f) for f in result.found_fields))
    st.info("Review the extracted information and save the candidate. You can edit the details later.")

    col_save, col_discard = st.columns([1, 1])
    with col_save:
        if st.button("Save Candidate", type="primary", key="save_btn"):
            try:
                session.commit_sync()
                st.session_state["flash"] = "Candidate added."
                st.rerun()
            except CandidateStoreError as e:
                st.error(f"Saving failed: {e}")
    with col_discard:
        if st.button("Try Another", key="discard_btn"):
            session.discard()
            st.rerun()


def render_layout() -> None:
    """Streamlit page layout; state lives in the UploadSession."""
    st.set_page_config(page_title="Parse Resume with AI", layout="centered")
    st.title("Parse Resume with AI")
    st.markdown("*Upload a résumé to extract candidate details automatically.*")
    st.divider()

    if not OPENAI_API_KEY:
        st.warning("OPENAI_API_KEY is not set. Add it to your .env file.")

    flash = st.session_state.pop("flash", None)
    if flash:
        st.success(flash)

    session = _get_session()
    if session.state == UploadState.SUCCESS:
        _render_success(session)
    elif session.state == UploadState.ERROR:
        _render_error(session)
    else:
        _render_upload(session)


if __name__ == "__main__":
    render_layout()
