"""
Version information for the School Administration Backend
"""

__version__ = "1.0.0"

# Application metadata
APP_NAME = "School Administration Backend"
APP_DESCRIPTION = "Student records, attendance sheets and class timetables behind one REST API"
