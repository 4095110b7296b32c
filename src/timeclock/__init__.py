"""Timeclock package.

Employee punch-clock: an attendance state machine over an append-only event
log, paid-break payroll accounting, anomaly remediation, holiday requests and
a thin Flask JSON layer. Organized by feature module with service/repository
layers.
"""
