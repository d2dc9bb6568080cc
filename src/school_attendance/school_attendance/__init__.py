"""School Attendance package.

Organized by feature modules (periods, attendance, access, users, ...) with a
thin Flask controller layer on top of service/repository layers.
"""
