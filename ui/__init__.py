"""Streamlit front-end for the study wizard."""
