"""Student Attendance package.

This package is organized by feature modules (students, attendance, scan, history)
with a thin Flask controller layer and service/repository layers underneath.
"""
