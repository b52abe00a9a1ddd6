"""
Core package for the Access Architects CRM dashboard.

Submodules provide the in-memory data layer (entity store, data manager,
persistence, demo simulation, analytics) and the Streamlit user interface
helpers that are orchestrated by the top-level `app.py`.
"""
