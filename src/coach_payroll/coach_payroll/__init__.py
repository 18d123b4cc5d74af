"""Coach Payroll package.

Prorated coach compensation for a tutoring business, organized by feature
modules (settings, coaches, students, payroll) with a thin Flask controller
layer on top of service/repository layers.
"""
