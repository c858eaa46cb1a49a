"""
Global styles and CSS for the console UI.
Dark theme with an orange accent.
"""

COLORS = {
    "bg_primary": "#0d1117",
    "bg_secondary": "#161b22",
    "bg_card": "#21262d",
    "bg_hover": "#30363d",
    "border": "#30363d",
    "text_primary": "#f0f6fc",
    "text_secondary": "#8b949e",
    "text_muted": "#6e7681",
    "accent_orange": "#f0883e",
    "accent_green": "#3fb950",
    "accent_red": "#f85149",
    "accent_blue": "#58a6ff",
}


def get_global_css() -> str:
    """Return global CSS for dark theme styling."""
    return f"""
    <style>
        .console-header {{
            color: {COLORS['accent_orange']};
            font-size: 28px;
            font-weight: 700;
            margin-bottom: 0;
        }}

        .console-subtitle {{
            color: {COLORS['text_secondary']};
            font-size: 14px;
            margin-bottom: 16px;
        }}

        .badge-connected {{
            display: inline-block;
            padding: 4px 8px;
            border-radius: 4px;
            font-size: 11px;
            font-weight: 600;
            background: rgba(63, 185, 80, 0.2);
            color: {COLORS['accent_green']};
        }}

        .badge-selected {{
            display: inline-block;
            padding: 4px 8px;
            border-radius: 4px;
            font-size: 11px;
            font-weight: 600;
            background: rgba(240, 136, 62, 0.2);
            color: {COLORS['accent_orange']};
        }}

        .doc-id {{
            color: {COLORS['text_primary']};
            font-family: monospace;
            font-size: 13px;
        }}

        .doc-summary {{
            color: {COLORS['text_secondary']};
            font-size: 12px;
        }}

        .status-success {{ color: {COLORS['accent_green']}; }}
        .status-error {{ color: {COLORS['accent_red']}; }}
    </style>
    """


def badge(text: str, kind: str = "connected") -> str:
    """HTML for a small inline badge."""
    return f'<span class="badge-{kind}">{text}</span>'


def inject_styles():
    """Inject global styles into the Streamlit app."""
    import streamlit as st
    st.markdown(get_global_css(), unsafe_allow_html=True)
