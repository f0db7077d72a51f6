"""
Product carbon footprint portal service.
"""
