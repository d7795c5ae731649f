"""Workforce Attendance package.

Feature modules (attendance, workdays, leave, users, reports) with a thin Flask
controller layer on top of service/repository layers. Daily records and
monthly summaries are always recomputed from the immutable event log.
"""
