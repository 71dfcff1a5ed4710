"""HSSC Guru exam-preparation service."""
