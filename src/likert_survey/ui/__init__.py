"""
Streamlit viewer: pick a survey file, run the pipeline, inspect the tables.
"""
