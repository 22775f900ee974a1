"""
Test helpers for dynamodb_record.

Record types shared by the unit and integration suites.
"""
