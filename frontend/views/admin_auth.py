"""
Admin sign-in panel shown in the sidebar.
"""
import streamlit as st

from utils.auth_session import AuthSession


def _show_status():
    status = st.session_state.auth_status
    if not status:
        return
    if status["success"]:
        st.success(status["message"])
    else:
        st.error(status["message"])


def render(auth: AuthSession):
    st.subheader("Admin Access")

    if auth.is_signed_in:
        user = auth.user
        st.write(f"**Email:** {user.get('email')}")
        st.write(f"**Roles:** {', '.join(user.get('roles', []))}")
        if not auth.is_admin:
            st.warning("This account cannot run batch operations")
        if st.button("Sign Out", use_container_width=True):
            auth.sign_out()
            st.rerun()
        _show_status()
        return

    st.caption("Sign in to unlock batch operations")
    with st.form("admin_login_form", clear_on_submit=True):
        email = st.text_input("Email", placeholder="admin@example.com")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign In", use_container_width=True)

    if submitted:
        with st.spinner("Signing in..."):
            success, _ = auth.sign_in(email, password)
        if success:
            st.rerun()

    _show_status()
