"""Application layer: explicit view state, the controller that mutates it, and
the text-generation client it drives.

Nothing here imports Streamlit; renderers in `src.ui` call into the controller.
"""
