"""Entry point for `streamlit run streamlit_app.py`; the viewer lives in app/app.py."""

from app.app import main

main()
