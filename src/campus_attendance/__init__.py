"""Campus attendance server package.

This package is organized by feature modules (timetable, geofence, attendance,
students, admin, reports) with a thin Flask controller layer and
service/repository layers underneath.
"""
