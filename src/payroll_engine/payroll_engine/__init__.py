"""Payroll Engine package.

This package is organized by feature modules (geo, attendance, payroll, ...)
with a thin Flask controller layer and service/repository layers. Collaborators
(store lookup, wage lookup, persistence) are injected through Protocols.
"""
