"""Absensi attendance package.

This package is organized by feature modules (attendance, leave,
reconciliation, ...) with a thin Flask JSON controller layer on top of
service and repository layers.
"""
