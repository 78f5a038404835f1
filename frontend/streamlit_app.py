"""
Streamlit frontend for the artist catalog.

Run with:
    streamlit run frontend/streamlit_app.py

Browsing and the dashboard run in-process on the static dataset. The Join
form submits to the API (ARTIST_API_URL, default http://localhost:8000), so
start it first with: python app/app.py
"""

import sys
from pathlib import Path

import streamlit as st
from dotenv import load_dotenv

# Ensure project root is on sys.path when launched with `streamlit run`
sys.path.insert(0, str(Path(__file__).parent.parent))

from frontend.ui import main

load_dotenv()

st.set_page_config(page_title="Artist Booking Catalog", layout="wide")
main()
