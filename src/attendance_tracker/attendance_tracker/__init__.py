"""Attendance Tracker package.

This package is organized by feature modules (attendance, absentees, users, shifts)
with a thin Flask controller layer over service/repository layers.
"""
