"""Timesheet Tracker package.

Feature modules (users, projects, assignments, timesheets, reports) each keep
a plain model, a repository Protocol with a MySQL implementation, a service
holding the business rules and a thin Flask controller.
"""
