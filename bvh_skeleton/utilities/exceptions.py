# -*- coding: utf-8 -*-
"""
Exceptions raised while loading, validating and saving BVH data.
"""


class BVHError(Exception):
    pass


class BVHIOError(BVHError):
    def __init__(self, filename, reason=""):
        message = "Could not access file " + str(filename)
        if reason:
            message += ": " + str(reason)
        super(BVHIOError, self).__init__(message)
        self.filename = filename
        self.reason = reason


class BVHSyntaxError(BVHError):
    def __init__(self, message, line_number):
        super(BVHSyntaxError, self).__init__("line %d: %s" % (line_number, message))
        self.line_number = line_number


class BVHConsistencyError(BVHError):
    def __init__(self, message, expected, actual, line_number=None):
        text = "%s (expected %s, got %s)" % (message, expected, actual)
        if line_number is not None:
            text = "line %d: %s" % (line_number, text)
        super(BVHConsistencyError, self).__init__(text)
        self.expected = expected
        self.actual = actual
        self.line_number = line_number


class SkeletonConsistencyError(BVHError):
    pass
