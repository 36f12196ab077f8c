"""Artifact references, completion contexts and leaf expansion."""
