"""NiceGUI web interface for the study notes service.

Pages:
    - /: document dashboard with PDF upload
    - /notes/{id}: markdown notes viewer with generation progress
"""
