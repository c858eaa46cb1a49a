import streamlit as st

from config import API_URL, APP_NAME
from utils.api import APIClient
from utils.auth_session import AuthSession
from utils.helper import init_session
from utils.styles import inject_styles
from views import admin_auth, connection, data_table, migration_console, query_console


def main():
    st.set_page_config(page_title=APP_NAME, layout="wide")
    inject_styles()
    init_session()

    auth = AuthSession(st.session_state, APIClient(API_URL))
    migration_console.bind(auth)

    st.markdown(f'<p class="console-header">{APP_NAME}</p>', unsafe_allow_html=True)
    st.markdown(
        '<p class="console-subtitle">Connect to a MongoDB collection and explore, query and migrate its documents</p>',
        unsafe_allow_html=True,
    )

    with st.sidebar:
        admin_auth.render(auth)

    connection.render()

    if not st.session_state.connection_id:
        st.stop()

    query_console.render()
    data_table.render()
    migration_console.render(auth)


if __name__ == "__main__":
    main()
