# Copyright (c) 2026 Auth Widget Contributors. All Rights Reserved.

"""
Auth Widget — client-side flow controller for an embeddable, multi-tenant
login / register / reset-password form.
"""

__version__ = "0.1.0"
