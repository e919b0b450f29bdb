"""EduMark package.

Organized by feature modules (users, classes, attendance, reports, imports)
with a thin Flask controller layer over service/repository layers.
"""
