"""
MarkTrack: course and assessment mark tracking with weighted grade totals.

Keeps each mark's percentage and weighted contribution, and each course's
totals, consistent as scores, max scores and weightages are entered or revised.
"""

__version__ = "1.0.0"
__author__ = "MarkTrack Development Team"
__description__ = "Course mark tracking with weighted grade computation"
