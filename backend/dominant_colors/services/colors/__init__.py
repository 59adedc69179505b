"""
Colors Module

K-means++ seeding, Lloyd refinement and palette formatting.
"""
