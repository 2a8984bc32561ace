"""Mess Attendance System package.

Feature modules (students, attendance, menu, reports) each carry a model,
a repository interface with MySQL/in-memory implementations, a service and
a thin Flask controller.
"""
