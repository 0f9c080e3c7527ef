"""rf2ctl — SNOMED CT stated/inferred relationship graph toolkit."""

__version__ = "0.1.0"
