"""
SafeReport - API Module
REST endpoints for report intake, assist services and operator triage.
"""
