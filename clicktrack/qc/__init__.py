"""
Quality Control module for verifying rendered click tracks.
"""
from clicktrack.qc.qc import analyze, verify_wav
from clicktrack.qc.thresholds import QC_THRESHOLDS

__all__ = ["analyze", "verify_wav", "QC_THRESHOLDS"]
