"""Layer analysis for vulnerability scanning: listers, detectors, severities, tokens and SQL builders."""

__version__ = "0.1.0"