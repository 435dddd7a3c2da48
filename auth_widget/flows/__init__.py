# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""
Form Session Flows — YAML transition tables for the form FSM.

form_session.yaml drives login and register forms;
reset_password_session.yaml drives the reset-password form, where a
displayed success is terminal.
"""
