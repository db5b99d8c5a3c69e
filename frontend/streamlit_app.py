"""A Streamlit login page rendered from the Login Gateway API."""

import os
import streamlit as st
import requests

# --- Page and API Configuration ---
st.set_page_config(page_title="Sign In", page_icon="🔐", layout="centered")
API_BASE = os.environ.get("API_BASE", "http://localhost:8000")


def get_api_session():
    """Gets the requests.Session object from streamlit's session state."""
    if "api_session" not in st.session_state:
        st.session_state.api_session = requests.Session()
    return st.session_state.api_session


def show_notifications(notifications):
    """Surfaces queued gateway notifications."""
    for note in notifications:
        if note.get("level") == "success":
            st.toast(note["message"], icon="✅")
        elif note.get("level") == "info":
            st.info(note["message"])
        else:
            st.error(note["message"], icon="🚨")


def show_signed_in(redirect):
    """Stands in for the landing page once a session exists."""
    st.success(f"You are signed in. Continue to `{redirect}`.", icon="✅")
    st.stop()


# --- Bootstrap the surface ---
try:
    surface_response = get_api_session().get(f"{API_BASE}/auth/surface", timeout=15)
    surface_response.raise_for_status()
    surface = surface_response.json()
except requests.exceptions.RequestException:
    st.error(
        "Could not reach the login service. Please try again later.",
        icon="🚨",
    )
    st.stop()

if "pending_notifications" in st.session_state:
    show_notifications(st.session_state.pop("pending_notifications"))

if surface.get("redirect"):
    show_signed_in(surface["redirect"])

display = surface["settings"]

# --- Header ---
st.title(display["site_name"])
st.caption(display["login_subtitle"])

# --- Form ---
with st.form("login_form"):
    email = st.text_input("Email", placeholder="Enter email...")
    password = st.text_input("Password", type="password", placeholder="Enter password...")
    submitted = st.form_submit_button(
        "Sign In",
        use_container_width=True,
        disabled=not surface.get("interactive"),
    )

# The gateway answers 409 while another submission for this browser is pending
if submitted:
    try:
        with st.spinner("Signing in..."):
            response = get_api_session().post(
                f"{API_BASE}/auth/login",
                json={"email": email, "password": password},
                timeout=30,
            )
        if response.status_code == 409:
            st.session_state.pending_notifications = [
                {"level": "info", "message": "A sign-in is already in progress."}
            ]
        else:
            response.raise_for_status()
            result = response.json()
            st.session_state.pending_notifications = result.get("notifications", [])
    except requests.exceptions.RequestException:
        st.session_state.pending_notifications = [
            {"level": "error", "message": "An unexpected error occurred."}
        ]
    st.rerun()

# --- Footer ---
st.caption(display["footer_text"])
