# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""
Form Session Event Types — constants driving the form FSM.

All event types are UPPERCASE by convention.
"""

# ── Session start-up ────────────────────────────────────────────
SESSION_START = "SESSION_START"
ACCESS_BLOCKED = "ACCESS_BLOCKED"
TENANT_UNAVAILABLE = "TENANT_UNAVAILABLE"
LOAD_COMPLETE = "LOAD_COMPLETE"

# ── Submission ──────────────────────────────────────────────────
SUBMIT = "SUBMIT"
SUBMIT_SUCCEEDED = "SUBMIT_SUCCEEDED"
SUBMIT_FAILED = "SUBMIT_FAILED"

# ── User input ──────────────────────────────────────────────────
FIELD_EDIT = "FIELD_EDIT"

# ── States ──────────────────────────────────────────────────────
STATE_INIT = "init"
STATE_LOADING = "loading"
STATE_BLOCKED = "blocked"
STATE_UNAVAILABLE = "unavailable"
STATE_READY = "ready"
STATE_SUBMITTING = "submitting"
STATE_SUCCESS = "success_displayed"
STATE_ERROR = "error_displayed"
