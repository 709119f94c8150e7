"""
Business rules. Every function takes the RecordStore as its first argument.
"""
